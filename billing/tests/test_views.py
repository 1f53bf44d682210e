# billing/tests/test_views.py
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse

from shared.constants import PaymentStatus, RoleTypes
from core.tests.fixtures import create_enrollment, create_organization, create_program, create_staff
from billing.methods import Cash, Check
from billing.models import Payment
from billing.services import PaymentService


class PaymentApiTest(TestCase):
    def setUp(self):
        cache.clear()
        self.organization = create_organization()
        self.program = create_program(self.organization)
        self.enrollment = create_enrollment(self.organization, self.program)
        self.client.force_login(create_staff(self.organization, email='acc@makerlab.academy', role=RoleTypes.ACCOUNTANT))

    def test_record_check_payment(self):
        response = self.client.post(reverse('billing:payment_list'), {
            'enrollment_id': self.enrollment.pk,
            'amount': '250',
            'method': 'check',
            'checkNumber': '0042',
            'bankName': 'CIH',
        }, content_type='application/json')

        self.assertEqual(response.status_code, 201)
        payment = response.json()['payment']
        self.assertEqual(payment['status'], PaymentStatus.CHECK_RECEIVED)
        self.assertEqual(payment['check_number'], '0042')
        self.assertFalse(payment['is_cleared'])

    def test_record_without_enrollment(self):
        response = self.client.post(reverse('billing:payment_list'), {'amount': '250'}, content_type='application/json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Please select a student/enrollment')

    def test_unknown_method_is_a_validation_error(self):
        response = self.client.post(reverse('billing:payment_list'), {
            'enrollment_id': self.enrollment.pk, 'amount': '250', 'method': 'bitcoin',
        }, content_type='application/json')
        self.assertEqual(response.status_code, 400)

    def test_list_filters_by_status(self):
        PaymentService.record_payment(self.organization, self.enrollment.pk, '100', Cash())
        PaymentService.record_payment(self.organization, self.enrollment.pk, '200', Check())

        response = self.client.get(reverse('billing:payment_list'), {'status': PaymentStatus.CHECK_RECEIVED})

        payments = response.json()['payments']
        self.assertEqual(len(payments), 1)
        self.assertEqual(payments[0]['amount'], '200.00')

    def test_status_change_returns_balance(self):
        payment = PaymentService.record_payment(self.organization, self.enrollment.pk, '300', Check())

        response = self.client.post(
            reverse('billing:payment_status', args=[payment.pk]),
            {'status': PaymentStatus.PAID},
            content_type='application/json',
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(Decimal(response.json()['enrollment']['paid_amount']), Decimal('300'))
        self.assertEqual(Decimal(response.json()['enrollment']['balance']), Decimal('700'))

    def test_invalid_transition(self):
        payment = PaymentService.record_payment(self.organization, self.enrollment.pk, '300', Cash())

        response = self.client.post(
            reverse('billing:payment_status', args=[payment.pk]),
            {'status': PaymentStatus.CHECK_DEPOSITED},
            content_type='application/json',
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'VALIDATION_ERROR')

    def test_edit_and_delete(self):
        payment = PaymentService.record_payment(self.organization, self.enrollment.pk, '300', Cash())
        url = reverse('billing:payment_detail', args=[payment.pk])

        response = self.client.patch(url, {'amount': '350'}, content_type='application/json')
        self.assertEqual(response.json()['payment']['amount'], '350.00')

        response = self.client.delete(url)
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Payment.objects.exists())
        self.enrollment.refresh_from_db()
        self.assertEqual(self.enrollment.balance, Decimal('1000'))

    def test_enrollment_search_and_payment_form(self):
        response = self.client.get(reverse('billing:enrollment_search'), {'q': 'neil'})
        self.assertEqual(response.json()['enrollments'][0]['id'], self.enrollment.pk)

        response = self.client.get(reverse('billing:default_payment', args=[self.enrollment.student_id]))
        form = response.json()['form']
        self.assertEqual(form['enrollmentId'], self.enrollment.pk)
        self.assertEqual(Decimal(form['amount']), Decimal('1000'))

    def test_summary(self):
        PaymentService.record_payment(self.organization, self.enrollment.pk, '250', Cash())

        summary = self.client.get(reverse('billing:finance_summary')).json()['summary']

        self.assertEqual(summary['total_students'], 1)
        self.assertEqual(Decimal(summary['total_paid']), Decimal('250'))
        self.assertEqual(Decimal(summary['collection_rate']), Decimal('25'))


class BillingPermissionTest(TestCase):
    def setUp(self):
        cache.clear()
        self.organization = create_organization()

    def test_totals_hidden_from_admission_officers(self):
        self.client.force_login(create_staff(self.organization, role=RoleTypes.ADMISSION_OFFICER))

        self.assertEqual(self.client.get(reverse('billing:payment_list')).status_code, 200)
        self.assertEqual(self.client.get(reverse('billing:finance_summary')).status_code, 403)

    def test_content_managers_cannot_record(self):
        self.client.force_login(create_staff(self.organization, role=RoleTypes.CONTENT_MANAGER))

        response = self.client.post(reverse('billing:payment_list'), {'amount': '10'}, content_type='application/json')
        self.assertEqual(response.status_code, 403)
