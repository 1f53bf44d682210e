# admissions/pricing.py
"""
PRICING - Standard tuition, negotiated price, discount and balance

Pure functions, no database access.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_FLOOR
from typing import Optional, Dict, Any, Iterable

from shared.constants import REGULAR_PROGRAM, PaymentMethods

ZERO = Decimal('0')
HUNDRED = Decimal('100')


def to_decimal(value) -> Decimal:
    if value in (None, ''):
        return ZERO
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return ZERO


def standard_tuition(program, pack: Optional[Dict[str, Any]]) -> Decimal:
    """Annual price for regular programs, flat price otherwise. 0 when unset."""
    if program is None or not pack:
        return ZERO

    if program.type == REGULAR_PROGRAM:
        return to_decimal(pack.get('priceAnnual'))
    return to_decimal(pack.get('price'))


def discount_amount(tuition: Decimal, negotiated_price: Decimal) -> Decimal:
    """Negative when the negotiated price is above tuition."""
    return tuition - negotiated_price


def persisted_discount(tuition: Decimal, negotiated_price: Decimal) -> Decimal:
    return max(discount_amount(tuition, negotiated_price), ZERO)


def discount_percent(tuition: Decimal, negotiated_price: Decimal) -> int:
    """Rounded percentage, halves rounding up. 0 when tuition is 0."""
    if tuition <= 0:
        return 0

    ratio = discount_amount(tuition, negotiated_price) / tuition * HUNDRED
    return int((ratio + Decimal('0.5')).to_integral_value(rounding=ROUND_FLOOR))


def total_paying_now(entries: Iterable) -> Decimal:
    return sum((to_decimal(entry.amount) for entry in entries), ZERO)


def cleared_amount(entries: Iterable) -> Decimal:
    """Cash entries only; checks and transfers clear later."""
    return sum(
        (to_decimal(entry.amount) for entry in entries if entry.method.code == PaymentMethods.CASH),
        ZERO,
    )


def remaining_balance(negotiated_price: Decimal, entries: Iterable) -> Decimal:
    return negotiated_price - total_paying_now(entries)


@dataclass(frozen=True)
class Quote:
    standard_tuition: Decimal
    negotiated_price: Decimal
    discount_amount: Decimal
    discount_percent: int
    total_paying_now: Decimal
    remaining_balance: Decimal

    @classmethod
    def build(cls, program, pack_name: Optional[str], negotiated_price=None, entries=()) -> 'Quote':
        """
        negotiated_price defaults to the standard tuition of the pack.
        """
        pack = program.get_pack(pack_name) if program is not None else None
        tuition = standard_tuition(program, pack)
        price = tuition if negotiated_price in (None, '') else to_decimal(negotiated_price)
        entries = list(entries)

        return cls(
            standard_tuition=tuition,
            negotiated_price=price,
            discount_amount=discount_amount(tuition, price),
            discount_percent=discount_percent(tuition, price),
            total_paying_now=total_paying_now(entries),
            remaining_balance=remaining_balance(price, entries),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'standardTuition': self.standard_tuition,
            'negotiatedPrice': self.negotiated_price,
            'discountAmount': self.discount_amount,
            'discountPercent': self.discount_percent,
            'totalPayingNow': self.total_paying_now,
            'remainingBalance': self.remaining_balance,
        }
