# core/management/commands/assign_default_organization.py
from django.apps import apps
from django.core.management.base import BaseCommand
from django.db import transaction

from shared.constants import DEFAULT_ORGANIZATION_ID
from core.services import OrganizationService

# Tenant-scoped tables whose legacy rows have no organization
TENANT_MODELS = (
    ('students', 'Student'),
    ('core', 'Program'),
    ('admissions', 'Enrollment'),
    ('billing', 'Payment'),
    ('admissions', 'Lead'),
    ('users', 'UserProfile'),
)


class Command(BaseCommand):
    help = 'Attach records without an organization to the default organization'

    def add_arguments(self, parser):
        parser.add_argument(
            '--organization',
            default=DEFAULT_ORGANIZATION_ID,
            help=f'Organization id to assign (default: {DEFAULT_ORGANIZATION_ID})',
        )
        parser.add_argument(
            '--batch-size',
            type=int,
            default=400,
            help='Rows updated per transaction (default: 400)',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Count what would be updated without writing',
        )

    def handle(self, *args, **options):
        batch_size = max(1, options['batch_size'])
        dry_run = options['dry_run']

        if dry_run:
            organization_id = options['organization']
        else:
            organization, created = OrganizationService.get_or_create_default(options['organization'])
            organization_id = organization.id
            if created:
                self.stdout.write(f"Created organization {organization_id}")

        total = 0
        for app_label, model_name in TENANT_MODELS:
            model = apps.get_model(app_label, model_name)
            pending = list(
                model.objects.filter(organization__isnull=True).order_by('pk').values_list('pk', flat=True)
            )

            if dry_run:
                self.stdout.write(f"{model._meta.db_table}: {len(pending)} would be updated")
                total += len(pending)
                continue

            updated = 0
            for start in range(0, len(pending), batch_size):
                batch = pending[start:start + batch_size]
                with transaction.atomic():
                    updated += model.objects.filter(pk__in=batch, organization__isnull=True).update(
                        organization_id=organization_id
                    )
                self.stdout.write(f"  {model._meta.db_table}: committed batch of {len(batch)}")

            self.stdout.write(f"{model._meta.db_table}: {updated} updated")
            total += updated

        if dry_run:
            self.stdout.write(self.style.WARNING(f"Dry run: {total} records would be assigned to {organization_id}"))
        else:
            self.stdout.write(self.style.SUCCESS(f"✓ {total} records assigned to {organization_id}"))
