"""
Management command to mark pending payments past their due date as overdue.

Usage:
    python manage.py sweep_overdue_payments

Can be added to crontab to run daily:
    0 1 * * * cd /path/to/project && python manage.py sweep_overdue_payments
"""

from django.core.management.base import BaseCommand
from django.utils import timezone

from audit.helpers import log_action
from audit.models import AuditLog
from payments.services import PaymentService


class Command(BaseCommand):
    help = 'Mark pending payments whose due date has passed as overdue'

    def handle(self, *args, **options):
        today = timezone.localdate()

        self.stdout.write(f"\n{'=' * 60}")
        self.stdout.write(f"  OVERDUE PAYMENT SWEEP - {today.isoformat()}")
        self.stdout.write(f"{'=' * 60}\n")

        updated = PaymentService().sweep_overdue(today=today)

        if updated:
            log_action(
                user=None,
                action=AuditLog.ACTION_SWEEP,
                resource_type=AuditLog.RESOURCE_PAYMENT,
                resource_id=None,
                description=f"Marked {updated} payments overdue",
                metadata={'updated_count': updated, 'date': today.isoformat()},
            )

        self.stdout.write(self.style.SUCCESS(f"  Payments marked overdue: {updated}"))
        self.stdout.write(f"{'=' * 60}\n")
