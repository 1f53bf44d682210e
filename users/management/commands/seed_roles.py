# users/management/commands/seed_roles.py
from django.core.management.base import BaseCommand, CommandError

from core.models import Organization
from users.services import RoleManagementService


class Command(BaseCommand):
    help = 'Seed missing default roles and merge missing default permissions'

    def add_arguments(self, parser):
        parser.add_argument(
            '--organization',
            help='Only this organization id (default: all organizations)',
        )

    def handle(self, *args, **options):
        organizations = Organization.objects.all()
        if options['organization']:
            organizations = organizations.filter(pk=options['organization'])
            if not organizations.exists():
                raise CommandError(f"Organization {options['organization']} not found")

        for organization in organizations:
            self.stdout.write(f"Checking roles for {organization.name}...")
            roles = RoleManagementService.sync_default_roles(organization)
            self.stdout.write(self.style.SUCCESS(f"✓ {len(roles)} roles in sync for {organization.name}"))
