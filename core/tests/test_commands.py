# core/tests/test_commands.py
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from core.models import Organization, Program
from core.tests.fixtures import create_organization, create_program
from admissions.models import Lead
from students.models import Student


class AssignDefaultOrganizationTest(TestCase):
    def _run(self, *args):
        out = StringIO()
        call_command('assign_default_organization', *args, stdout=out)
        return out.getvalue()

    def test_creates_default_and_assigns_in_batches(self):
        for i in range(5):
            Student.objects.create(name=f'Student {i}')
        Lead.objects.create(name='Walk-in')

        output = self._run('--organization', 'makerlab-academy', '--batch-size', '2')

        organization = Organization.objects.get(pk='makerlab-academy')
        self.assertEqual(Student.objects.filter(organization=organization).count(), 5)
        self.assertEqual(Lead.objects.get().organization, organization)
        self.assertIn('Created organization makerlab-academy', output)
        self.assertEqual(output.count('students: committed batch'), 3)
        self.assertIn('6 records assigned to makerlab-academy', output)

    def test_leaves_assigned_records_alone(self):
        owner = create_organization('other-academy', 'Other Academy')
        kept = create_program(owner)
        Program.objects.create(name='Legacy Camp')

        self._run('--organization', 'makerlab-academy')

        kept.refresh_from_db()
        self.assertEqual(kept.organization, owner)
        self.assertEqual(Program.objects.get(name='Legacy Camp').organization_id, 'makerlab-academy')

    def test_dry_run_writes_nothing(self):
        Student.objects.create(name='Legacy')

        output = self._run('--dry-run')

        self.assertIsNone(Student.objects.get().organization)
        self.assertFalse(Organization.objects.filter(pk='makerlab-academy').exists())
        self.assertIn('Dry run: 1 records would be assigned', output)
