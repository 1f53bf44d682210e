# billing/methods.py
"""
PAYMENT METHODS - Closed set of payment method variants

Every method carries its own details and maps to the status a new payment
gets and whether it clears (counts toward the enrollment's paid amount).
"""
import datetime
from dataclasses import dataclass
from typing import Optional, Union, Dict, Any

from django.utils.dateparse import parse_date

from shared.constants import PaymentMethods, PaymentStatus
from core.exceptions import ValidationError


@dataclass(frozen=True)
class Cash:
    code = PaymentMethods.CASH


@dataclass(frozen=True)
class Check:
    number: str = ''
    bank: str = ''
    deposit_date: Optional[datetime.date] = None

    code = PaymentMethods.CHECK


@dataclass(frozen=True)
class Transfer:
    proof_url: str = ''

    code = PaymentMethods.TRANSFER


PaymentMethod = Union[Cash, Check, Transfer]


@dataclass(frozen=True)
class Settlement:
    status: str
    clears_balance: bool


def settle(method: PaymentMethod) -> Settlement:
    """Status of a payment recorded against an existing enrollment."""
    if isinstance(method, Cash):
        return Settlement(PaymentStatus.PAID, True)
    if isinstance(method, Check):
        return Settlement(PaymentStatus.CHECK_RECEIVED, False)
    if isinstance(method, Transfer):
        return Settlement(PaymentStatus.PENDING_VERIFICATION, False)
    raise ValidationError(f"Unknown payment method: {method!r}")


def settle_at_enrollment(method: PaymentMethod) -> Settlement:
    """
    Status of a payment taken in the enrollment wizard.

    Every non-cash entry is filed as a received check, transfers included.
    """
    if isinstance(method, Cash):
        return Settlement(PaymentStatus.PAID, True)
    if isinstance(method, (Check, Transfer)):
        return Settlement(PaymentStatus.CHECK_RECEIVED, False)
    raise ValidationError(f"Unknown payment method: {method!r}")


def _parse_optional_date(value) -> Optional[datetime.date]:
    if not value:
        return None
    if isinstance(value, datetime.date):
        return value
    try:
        parsed = parse_date(str(value)[:10])
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f"Invalid date: {value}")
    return parsed


def parse_method(data: Dict[str, Any]) -> PaymentMethod:
    """
    Build a method variant from request data.

    Accepts {"method": "cash"|"check"|"virement", "checkNumber", "bankName",
    "depositDate", "proofUrl"} (snake_case keys work too).
    """
    code = (data.get('method') or PaymentMethods.CASH).strip().lower()

    if code == PaymentMethods.CASH:
        return Cash()

    if code == PaymentMethods.CHECK:
        return Check(
            number=data.get('checkNumber') or data.get('check_number') or '',
            bank=data.get('bankName') or data.get('bank_name') or '',
            deposit_date=_parse_optional_date(data.get('depositDate') or data.get('deposit_date')),
        )

    if code in (PaymentMethods.TRANSFER, 'transfer'):
        return Transfer(proof_url=data.get('proofUrl') or data.get('proof_url') or '')

    raise ValidationError(f"Unknown payment method: {code}", details={'method': code})


def method_fields(method: PaymentMethod) -> Dict[str, Any]:
    """Payment model fields for a method; details of other methods stay empty."""
    fields = {
        'method': method.code,
        'check_number': None,
        'bank_name': None,
        'deposit_date': None,
        'proof_url': None,
    }
    if isinstance(method, Check):
        fields.update(
            check_number=method.number or None,
            bank_name=method.bank or None,
            deposit_date=method.deposit_date,
        )
    elif isinstance(method, Transfer):
        fields['proof_url'] = method.proof_url or None
    return fields


def method_to_dict(method: PaymentMethod) -> Dict[str, Any]:
    data = {'method': method.code}
    if isinstance(method, Check):
        data.update(
            checkNumber=method.number,
            bankName=method.bank,
            depositDate=method.deposit_date.isoformat() if method.deposit_date else '',
        )
    elif isinstance(method, Transfer):
        data['proofUrl'] = method.proof_url
    return data
