"""
Management command to repair application flags left behind by approvals
that did not finish their best-effort steps.

Usage:
    python manage.py reconcile_occupancy
    python manage.py reconcile_occupancy --dry-run

Can be added to crontab:
    30 3 * * * cd /path/to/project && python manage.py reconcile_occupancy
"""

from django.core.management.base import BaseCommand
from occupancy.services import ReconciliationService


class Command(BaseCommand):
    help = 'Deactivate applications that contradict existing occupancy records'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report what would be repaired without changing anything',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        self.stdout.write(f"\n{'=' * 60}")
        self.stdout.write("  OCCUPANCY RECONCILIATION")
        self.stdout.write(f"{'=' * 60}\n")

        if dry_run:
            self.stdout.write(self.style.WARNING("DRY RUN MODE - No records will be changed\n"))

        report = ReconciliationService().reconcile(dry_run=dry_run)

        self.stdout.write(f"  Accepted applications still active: {report.stale_source_applications}")
        self.stdout.write(f"  Competing applications still active: {report.stale_competing_applications}")

        if dry_run:
            total = report.stale_source_applications + report.stale_competing_applications
            self.stdout.write(self.style.WARNING(f"  Would repair: {total}"))
        else:
            self.stdout.write(self.style.SUCCESS(f"  Repaired: {report.repaired}"))

        self.stdout.write(f"{'=' * 60}\n")
