# admissions/tests/test_wizard.py
import datetime
from decimal import Decimal

from django.test import SimpleTestCase

from shared.constants import REGULAR_PROGRAM
from core.exceptions import WizardValidationError
from core.models import Program
from billing.methods import Cash, Check, Transfer
from admissions import wizard
from admissions.models import Lead


class WizardTransitionTest(SimpleTestCase):
    def test_new_student_starts_on_student_step(self):
        state = wizard.start()
        self.assertIsInstance(state, wizard.StudentStep)
        self.assertEqual(state.step, 1)

    def test_quick_enroll_skips_student_step(self):
        state = wizard.start(existing_student_id=7)
        self.assertIsInstance(state, wizard.ProgramStep)

    def test_advance_requires_student_name(self):
        state = wizard.start()
        with self.assertRaises(WizardValidationError):
            wizard.advance(state)

        state = wizard.update_student_form(state, name='Neil Hamdouch')
        self.assertIsInstance(wizard.advance(state), wizard.ProgramStep)

    def test_advance_requires_program(self):
        state = wizard.start(existing_student_id=7)
        with self.assertRaises(WizardValidationError):
            wizard.advance(state)

        state = wizard.update_program_form(state, program_id=3, pack_name='Pack Explorer')
        self.assertIsInstance(wizard.advance(state), wizard.PaymentStep)

    def test_payment_step_does_not_advance(self):
        state = wizard.PaymentStep(wizard.WizardForm())
        with self.assertRaises(WizardValidationError):
            wizard.advance(state)

    def test_back_keeps_form_and_drops_entries(self):
        state = wizard.start(student=wizard.StudentForm(name='Neil Hamdouch'))
        state = wizard.advance(state)
        state = wizard.advance(wizard.update_program_form(state, program_id=3))
        state = wizard.add_payment(state, '400')

        previous = wizard.back(state)
        self.assertIsInstance(previous, wizard.ProgramStep)
        self.assertEqual(previous.form.student.name, 'Neil Hamdouch')
        self.assertEqual(wizard.entries_of(previous), ())

        self.assertIsInstance(wizard.back(previous), wizard.StudentStep)

    def test_submitted_is_terminal(self):
        state = wizard.Submitted(enrollment_id=1)
        with self.assertRaises(WizardValidationError):
            wizard.back(state)
        with self.assertRaises(WizardValidationError):
            wizard.update_student_form(state, name='x')


class WizardFormTest(SimpleTestCase):
    def test_changing_pack_resets_negotiated_price(self):
        state = wizard.start(existing_student_id=1)
        state = wizard.update_program_form(state, program_id=3, pack_name='Pack Explorer')
        state = wizard.set_negotiated_price(state, '850')
        self.assertEqual(state.form.negotiated_price, Decimal('850'))

        state = wizard.update_program_form(state, grade_id='g1')
        self.assertEqual(state.form.negotiated_price, Decimal('850'))

        state = wizard.update_program_form(state, pack_name='Pack Maker')
        self.assertIsNone(state.form.negotiated_price)

    def test_blank_negotiated_price_means_standard_tuition(self):
        state = wizard.set_negotiated_price(wizard.start(), '')
        self.assertIsNone(state.form.negotiated_price)


class WizardPaymentTest(SimpleTestCase):
    def setUp(self):
        self.state = wizard.PaymentStep(wizard.WizardForm())

    def test_add_and_remove_entries(self):
        state = wizard.add_payment(self.state, '400')
        state = wizard.add_payment(state, '600', Check(number='0042', bank='CIH'))
        self.assertEqual(len(state.entries), 2)
        self.assertIsInstance(state.entries[0].method, Cash)

        state = wizard.remove_payment(state, state.entries[0].id)
        self.assertEqual([e.amount for e in state.entries], [Decimal('600')])

    def test_rejects_non_positive_amounts(self):
        for amount in ('0', '-5', ''):
            with self.assertRaises(WizardValidationError):
                wizard.add_payment(self.state, amount)

    def test_payments_only_on_payment_step(self):
        with self.assertRaises(WizardValidationError):
            wizard.add_payment(wizard.start(), '100')

    def test_quote_reflects_entries(self):
        program = Program(pk=3, type=REGULAR_PROGRAM, packs=[{'name': 'Pack Explorer', 'priceAnnual': 1000}])
        form = wizard.WizardForm(program=wizard.ProgramForm(program_id=3, pack_name='Pack Explorer'))
        state = wizard.add_payment(wizard.PaymentStep(form), '250')

        quote = wizard.quote(state, program)
        self.assertEqual(quote.remaining_balance, Decimal('750'))


class WizardSerializationTest(SimpleTestCase):
    def test_session_round_trip_keeps_method_details(self):
        form = wizard.WizardForm(
            student=wizard.StudentForm(name='Neil Hamdouch', parent_phone='0612345678'),
            program=wizard.ProgramForm(program_id=3, pack_name='Pack Explorer', group_id='grp-wed'),
            negotiated_price=Decimal('900'),
            lead_id=5,
        )
        state = wizard.PaymentStep(form)
        state = wizard.add_payment(state, '300', Check(number='77', bank='BMCE', deposit_date=datetime.date(2024, 10, 1)))
        state = wizard.add_payment(state, '200', Transfer(proof_url='https://cdn/proof.jpg'))

        restored = wizard.from_dict(wizard.to_dict(state))

        self.assertEqual(restored, state)

    def test_unknown_step_is_rejected(self):
        with self.assertRaises(WizardValidationError):
            wizard.from_dict({'step': 9})


class WizardSeedingTest(SimpleTestCase):
    def setUp(self):
        self.program = Program(
            pk=3,
            type=REGULAR_PROGRAM,
            packs=[{'name': 'Pack Explorer', 'priceAnnual': 1000}, {'name': 'Pack Maker', 'priceAnnual': 1800}],
            grades=[{'id': 'g1', 'name': 'Juniors', 'groups': [
                {'id': 'grp-wed', 'name': 'Group A', 'day': 'Wednesday', 'time': '14:00'},
            ]}],
        )

    def test_seed_from_lead_matches_slot(self):
        lead = Lead(pk=5, name='Sara Alaoui', parent_name='Karim', phone='0600000000',
                    email='karim@example.com', program=self.program,
                    selected_pack='Pack Maker', selected_slot='Wednesday 14:00')

        state = wizard.seed_from_lead(lead)

        self.assertIsInstance(state, wizard.StudentStep)
        self.assertEqual(state.form.student.name, 'Sara Alaoui')
        self.assertEqual(state.form.program.group_id, 'grp-wed')
        self.assertEqual(state.form.program.grade_id, 'g1')
        self.assertEqual(state.form.program.pack_name, 'Pack Maker')
        self.assertEqual(state.form.lead_id, 5)

    def test_seed_from_group_defaults_to_first_pack(self):
        state = wizard.seed_from_group(self.program, 'g1', 'grp-wed')
        self.assertEqual(state.form.program.pack_name, 'Pack Explorer')
        self.assertEqual(state.form.program.program_id, 3)
