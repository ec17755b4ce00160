# branches/management/commands/migrate_share_settings.py
from django.core.management.base import BaseCommand
from branches.models import Branch
from branches.services import migrate_share_settings


class Command(BaseCommand):
    help = 'Move legacy branch-level share settings onto each branch service'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show how many branches would be migrated without changing them',
        )

    def handle(self, *args, **options):
        dry_run = options.get('dry_run', False)

        self.stdout.write(self.style.SUCCESS('Starting migration...'))
        self.stdout.write(f'Found {Branch.objects.count()} branches')

        updated = migrate_share_settings(dry_run=dry_run)

        if updated == 0:
            self.stdout.write(self.style.WARNING('No branches to migrate'))
            return

        if dry_run:
            self.stdout.write(self.style.WARNING(f'[DRY RUN] Would update {updated} branches'))
        else:
            self.stdout.write(self.style.SUCCESS(f'Migration complete: {updated} branches updated'))
