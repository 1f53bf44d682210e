# billing/tests/test_admin.py
from decimal import Decimal

from django.contrib import admin
from django.test import TestCase

from shared.constants import PaymentStatus
from core.tests.fixtures import (
    admin_change,
    admin_request,
    create_enrollment,
    create_organization,
    create_program,
)
from billing.methods import Cash, Check
from billing.models import Payment
from billing.services import PaymentService
from users.models import User


class PaymentAdminTest(TestCase):
    def setUp(self):
        self.organization = create_organization()
        self.program = create_program(self.organization)
        self.enrollment = create_enrollment(self.organization, self.program)
        self.superuser = User.objects.create_superuser(email='root@example.com', password='x')
        self.model_admin = admin.site._registry[Payment]

    def _assert_balance(self, enrollment, paid, balance):
        enrollment.refresh_from_db()
        self.assertEqual(enrollment.paid_amount, Decimal(paid))
        self.assertEqual(enrollment.balance, Decimal(balance))
        self.assertEqual(enrollment.balance, enrollment.total_amount - enrollment.paid_amount)

    def test_marking_check_paid_rebalances(self):
        payment = PaymentService.record_payment(
            self.organization, self.enrollment.pk, '600', Check(number='0042', bank='CIH')
        )
        self._assert_balance(self.enrollment, '0', '1000')

        admin_change(self.superuser, payment, status=PaymentStatus.PAID)

        self._assert_balance(self.enrollment, '600', '400')

    def test_amount_edit_rebalances(self):
        payment = PaymentService.record_payment(self.organization, self.enrollment.pk, '400', Cash())

        admin_change(self.superuser, payment, amount='250.00')

        self._assert_balance(self.enrollment, '250', '750')

    def test_moving_payment_rebalances_both_enrollments(self):
        other = create_enrollment(self.organization, self.program, student_name='Sara Alaoui')
        payment = PaymentService.record_payment(self.organization, self.enrollment.pk, '400', Cash())

        admin_change(self.superuser, payment, enrollment=other.pk)

        self._assert_balance(self.enrollment, '0', '1000')
        self._assert_balance(other, '400', '600')

    def test_delete_rebalances(self):
        payment = PaymentService.record_payment(self.organization, self.enrollment.pk, '400', Cash())

        self.model_admin.delete_model(admin_request(self.superuser), payment)

        self._assert_balance(self.enrollment, '0', '1000')

    def test_bulk_delete_rebalances(self):
        PaymentService.record_payment(self.organization, self.enrollment.pk, '400', Cash())
        PaymentService.record_payment(self.organization, self.enrollment.pk, '100', Cash())

        self.model_admin.delete_queryset(admin_request(self.superuser), Payment.objects.all())

        self.assertFalse(Payment.objects.exists())
        self._assert_balance(self.enrollment, '0', '1000')
