# billing/tests/test_methods.py
import datetime

from django.test import SimpleTestCase

from shared.constants import PaymentStatus
from core.exceptions import ValidationError
from billing.methods import (
    Cash,
    Check,
    Transfer,
    method_fields,
    method_to_dict,
    parse_method,
    settle,
    settle_at_enrollment,
)


class SettlementTest(SimpleTestCase):
    def test_recorder_settlement(self):
        self.assertEqual(settle(Cash()).status, PaymentStatus.PAID)
        self.assertTrue(settle(Cash()).clears_balance)

        self.assertEqual(settle(Check()).status, PaymentStatus.CHECK_RECEIVED)
        self.assertFalse(settle(Check()).clears_balance)

        self.assertEqual(settle(Transfer()).status, PaymentStatus.PENDING_VERIFICATION)
        self.assertFalse(settle(Transfer()).clears_balance)

    def test_wizard_files_transfers_as_received_checks(self):
        self.assertEqual(settle_at_enrollment(Cash()).status, PaymentStatus.PAID)
        self.assertEqual(settle_at_enrollment(Check()).status, PaymentStatus.CHECK_RECEIVED)
        self.assertEqual(settle_at_enrollment(Transfer()).status, PaymentStatus.CHECK_RECEIVED)
        self.assertFalse(settle_at_enrollment(Transfer()).clears_balance)

    def test_unknown_method_is_rejected(self):
        with self.assertRaises(ValidationError):
            settle('cash')


class ParseMethodTest(SimpleTestCase):
    def test_defaults_to_cash(self):
        self.assertEqual(parse_method({}), Cash())
        self.assertEqual(parse_method({'method': ' CASH '}), Cash())

    def test_check_details(self):
        method = parse_method({
            'method': 'check', 'checkNumber': '0042', 'bankName': 'CIH', 'depositDate': '2024-10-01T00:00:00Z',
        })
        self.assertEqual(method, Check(number='0042', bank='CIH', deposit_date=datetime.date(2024, 10, 1)))

    def test_snake_case_keys(self):
        method = parse_method({'method': 'check', 'check_number': '7', 'bank_name': 'BMCE'})
        self.assertEqual(method.number, '7')
        self.assertEqual(method.bank, 'BMCE')

    def test_transfer_aliases(self):
        self.assertEqual(parse_method({'method': 'virement', 'proofUrl': 'https://cdn/p.png'}).proof_url,
                         'https://cdn/p.png')
        self.assertIsInstance(parse_method({'method': 'transfer'}), Transfer)

    def test_invalid_input(self):
        with self.assertRaises(ValidationError):
            parse_method({'method': 'bitcoin'})
        with self.assertRaises(ValidationError):
            parse_method({'method': 'check', 'depositDate': 'not-a-date'})


class MethodFieldsTest(SimpleTestCase):
    def test_other_method_details_stay_empty(self):
        fields = method_fields(Transfer(proof_url='https://cdn/p.png'))
        self.assertEqual(fields['method'], 'virement')
        self.assertEqual(fields['proof_url'], 'https://cdn/p.png')
        self.assertIsNone(fields['check_number'])
        self.assertIsNone(fields['bank_name'])

        self.assertIsNone(method_fields(Cash())['proof_url'])

    def test_to_dict_uses_form_keys(self):
        data = method_to_dict(Check(number='1', bank='CIH'))
        self.assertEqual(data, {'method': 'check', 'checkNumber': '1', 'bankName': 'CIH', 'depositDate': ''})
