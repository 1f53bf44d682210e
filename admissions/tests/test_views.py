# admissions/tests/test_views.py
from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse

from shared.constants import LeadStatus, RoleTypes
from core.tests.fixtures import create_organization, create_program, create_staff
from admissions.models import Enrollment, Lead
from students.models import Student


class WizardApiTest(TestCase):
    def setUp(self):
        cache.clear()
        self.organization = create_organization()
        self.program = create_program(self.organization)
        self.user = create_staff(self.organization, role=RoleTypes.ADMISSION_OFFICER)
        self.client.force_login(self.user)

    def _post(self, name, data=None, **kwargs):
        return self.client.post(reverse(f'admissions:{name}'), data or {}, content_type='application/json', **kwargs)

    def _patch(self, name, data):
        return self.client.patch(reverse(f'admissions:{name}'), data, content_type='application/json')

    def _fill_wizard(self):
        self._post('wizard_start')
        self._patch('wizard_student', {'name': 'Neil Hamdouch', 'parent_phone': '0612345678'})
        self._post('wizard_next')
        self._patch('wizard_program', {
            'program_id': self.program.pk,
            'pack_name': 'Pack Explorer',
            'grade_id': 'g1',
            'group_id': 'grp-wed',
        })
        return self._post('wizard_next')

    def test_full_wizard_flow(self):
        response = self._fill_wizard()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['wizard']['step'], 3)
        self.assertEqual(response.json()['wizard']['quote']['standardTuition'], '1000')

        self._post('wizard_add_payment', {'amount': '400', 'method': 'cash'})
        response = self._post('wizard_add_payment', {
            'amount': '600', 'method': 'check', 'checkNumber': '0042', 'bankName': 'CIH',
        })
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['wizard']['quote']['remainingBalance'], '0.00')

        response = self._post('wizard_finish')

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertTrue(body['success'])
        self.assertEqual(body['wizard']['step'], 4)
        self.assertEqual(body['enrollment']['paid_amount'], '400.00')
        self.assertEqual(body['enrollment']['balance'], '600.00')

        # Wizard is cleared after finishing
        self.assertEqual(self.client.get(reverse('admissions:wizard')).status_code, 400)

    def test_next_without_name_is_rejected(self):
        self._post('wizard_start')
        response = self._post('wizard_next')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'VALIDATION_ERROR')

    def test_unknown_program_is_not_found(self):
        self._post('wizard_start')
        response = self._patch('wizard_program', {'program_id': 999999})
        self.assertEqual(response.status_code, 404)

    def test_remove_payment_entry(self):
        self._fill_wizard()
        response = self._post('wizard_add_payment', {'amount': '250'})
        entry_id = response.json()['wizard']['entries'][0]['id']

        response = self.client.delete(reverse('admissions:wizard_remove_payment', args=[entry_id]))

        self.assertEqual(response.json()['wizard']['entries'], [])

    def test_duplicate_returns_matches_and_confirm_finishes(self):
        existing = Student.objects.create(organization=self.organization, name='Neil Hamdouch')
        self._fill_wizard()

        response = self._post('wizard_finish')

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['error'], 'DUPLICATE_STUDENT')
        self.assertEqual(response.json()['matches'][0]['id'], existing.pk)
        self.assertEqual(Enrollment.objects.count(), 0)

        response = self._post('wizard_finish', {'confirm_duplicate': True})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(Enrollment.objects.count(), 1)

    def test_finish_is_idempotent(self):
        self._fill_wizard()
        self._post('wizard_add_payment', {'amount': '400'})

        with self.captureOnCommitCallbacks(execute=True):
            first = self._post('wizard_finish', HTTP_X_IDEMPOTENCY_KEY='abc-123')
        second = self._post('wizard_finish', HTTP_X_IDEMPOTENCY_KEY='abc-123')

        self.assertEqual(first.status_code, 201)
        self.assertEqual(second.status_code, 200)
        self.assertEqual(second.json()['enrollment']['id'], first.json()['enrollment']['id'])
        self.assertEqual(Enrollment.objects.count(), 1)

    def test_replay_waits_for_commit(self):
        self._fill_wizard()
        self._post('wizard_add_payment', {'amount': '400'})

        with self.captureOnCommitCallbacks() as callbacks:
            first = self._post('wizard_finish', HTTP_X_IDEMPOTENCY_KEY='abc-456')

        self.assertEqual(first.status_code, 201)
        self.assertEqual(len(callbacks), 1)
        in_flight = self._post('wizard_finish', HTTP_X_IDEMPOTENCY_KEY='abc-456')
        self.assertEqual(in_flight.status_code, 409)
        self.assertEqual(in_flight.json()['error'], 'IN_PROGRESS')

        callbacks[0]()
        replay = self._post('wizard_finish', HTTP_X_IDEMPOTENCY_KEY='abc-456')
        self.assertEqual(replay.status_code, 200)
        self.assertEqual(replay.json()['enrollment']['id'], first.json()['enrollment']['id'])

    def test_quick_enroll_starts_on_program_step(self):
        student = Student.objects.create(organization=self.organization, name='Sara Alaoui')

        response = self._post('wizard_start', {'student_id': student.pk})

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['wizard']['step'], 2)
        self.assertEqual(response.json()['wizard']['form']['existing_student_id'], student.pk)

    def test_start_from_lead(self):
        lead = Lead.objects.create(
            organization=self.organization, name='Sara Alaoui', phone='0600000000',
            program=self.program, selected_pack='Pack Maker', selected_slot='Saturday 10:00',
        )

        response = self._post('wizard_start', {'lead_id': lead.pk})

        form = response.json()['wizard']['form']
        self.assertEqual(form['student']['name'], 'Sara Alaoui')
        self.assertEqual(form['program']['group_id'], 'grp-sat')
        self.assertEqual(form['lead_id'], lead.pk)

    def test_negotiated_price_updates_quote(self):
        self._fill_wizard()

        response = self._post('wizard_price', {'negotiated_price': '900'})

        quote = response.json()['wizard']['quote']
        self.assertEqual(quote['discountAmount'], '100.00')
        self.assertEqual(quote['discountPercent'], '10')

    def test_requires_enroll_permission(self):
        accountant = create_staff(self.organization, email='acc@makerlab.academy', role=RoleTypes.ACCOUNTANT)
        self.client.force_login(accountant)

        response = self._post('wizard_start')

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()['error'], 'PERMISSION_ERROR')

    def test_anonymous_is_rejected(self):
        self.client.logout()
        response = self._post('wizard_start')
        self.assertIn(response.status_code, (401, 403))


class QuoteApiTest(TestCase):
    def setUp(self):
        cache.clear()
        self.organization = create_organization()
        self.program = create_program(self.organization)
        self.client.force_login(create_staff(self.organization))

    def test_quote(self):
        response = self.client.get(reverse('admissions:quote'), {
            'program_id': self.program.pk, 'pack_name': 'Pack Maker', 'negotiated_price': '1500',
        })

        quote = response.json()['quote']
        self.assertEqual(quote['standardTuition'], '1800')
        self.assertEqual(quote['discountAmount'], '300')
        self.assertEqual(quote['discountPercent'], '17')

    def test_quote_requires_program(self):
        response = self.client.get(reverse('admissions:quote'))
        self.assertEqual(response.status_code, 400)


class LeadApiTest(TestCase):
    def setUp(self):
        cache.clear()
        self.organization = create_organization()
        self.program = create_program(self.organization)
        self.client.force_login(create_staff(self.organization, role=RoleTypes.CONTENT_MANAGER))

    def test_create_and_list_leads(self):
        response = self.client.post(reverse('admissions:lead_list'), {
            'name': 'Yassine', 'parent_name': 'Omar', 'phone': '0611111111',
            'source': 'Facebook', 'program_id': self.program.pk, 'selected_slot': 'Wednesday 14:00',
        }, content_type='application/json')

        self.assertEqual(response.status_code, 201)
        lead = Lead.objects.get()
        self.assertEqual(lead.organization, self.organization)
        self.assertEqual(lead.program, self.program)
        self.assertEqual(lead.status, LeadStatus.NEW)

        response = self.client.get(reverse('admissions:lead_list'))
        self.assertEqual(len(response.json()['leads']), 1)

    def test_update_status(self):
        lead = Lead.objects.create(organization=self.organization, name='Yassine')

        response = self.client.patch(
            reverse('admissions:lead_status', args=[lead.pk]),
            {'status': LeadStatus.CONTACTED},
            content_type='application/json',
        )

        self.assertEqual(response.status_code, 200)
        lead.refresh_from_db()
        self.assertEqual(lead.status, LeadStatus.CONTACTED)

    def test_leads_of_other_organizations_are_hidden(self):
        other = create_organization('other-academy', 'Other Academy')
        lead = Lead.objects.create(organization=other, name='Hidden')

        response = self.client.patch(
            reverse('admissions:lead_status', args=[lead.pk]),
            {'status': LeadStatus.CLOSED},
            content_type='application/json',
        )

        self.assertEqual(response.status_code, 404)
