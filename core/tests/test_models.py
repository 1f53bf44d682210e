# core/tests/test_models.py
from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase

from core.models import Program, group_slot_label
from core.tests.fixtures import GRADES, PACKS, create_organization


class ProgramLookupTest(SimpleTestCase):
    def setUp(self):
        self.program = Program(name='Robotics', packs=PACKS, grades=GRADES)

    def test_get_pack(self):
        self.assertEqual(self.program.get_pack('Pack Maker')['priceAnnual'], 1800)
        self.assertIsNone(self.program.get_pack('Pack Nope'))
        self.assertIsNone(self.program.get_pack(''))

    def test_find_group_across_grades(self):
        grade, group = self.program.find_group('grp-diy')
        self.assertEqual(grade['name'], 'Seniors')
        self.assertEqual(group['name'], 'DIY Lab')

        self.assertEqual(self.program.find_group('missing'), (None, None))

    def test_find_group_by_slot_or_name(self):
        _, group = self.program.find_group_by_slot('Saturday 10:00')
        self.assertEqual(group['id'], 'grp-sat')

        _, group = self.program.find_group_by_slot('Group A')
        self.assertEqual(group['id'], 'grp-wed')

        self.assertEqual(self.program.find_group_by_slot('Monday 09:00'), (None, None))

    def test_pack_names(self):
        self.assertEqual(self.program.pack_names(), ['Pack Explorer', 'Pack Maker'])

    def test_slot_label(self):
        self.assertEqual(group_slot_label({'day': 'Wednesday', 'time': '14:00'}), 'Wednesday 14:00')
        self.assertIsNone(group_slot_label(None))


class ProgramValidationTest(SimpleTestCase):
    def test_duplicate_pack_names(self):
        program = Program(packs=[{'name': 'A'}, {'name': 'A'}])
        with self.assertRaises(ValidationError):
            program.clean()

    def test_negative_price(self):
        program = Program(packs=[{'name': 'A', 'priceAnnual': -5}])
        with self.assertRaises(ValidationError):
            program.clean()

    def test_non_numeric_price(self):
        program = Program(packs=[{'name': 'A', 'price': 'cheap'}])
        with self.assertRaises(ValidationError):
            program.clean()

    def test_valid_packs(self):
        Program(packs=PACKS).clean()


class OrganizationModelTest(TestCase):
    def test_settings_are_created_on_first_access(self):
        organization = create_organization()

        organization_settings = organization.get_settings()

        self.assertEqual(organization_settings.academy_name, 'MakerLab Academy')
        self.assertEqual(organization_settings.academic_year, '2024-2025')
        self.assertEqual(organization.get_settings().pk, organization_settings.pk)
