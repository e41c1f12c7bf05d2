from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command

from audit.models import AuditLog
from core.constants import DeactivationReason
from occupancy.models import AcceptedApplication
from occupancy.services import ReconciliationService


@pytest.fixture
def half_applied(student, room, single_room, make_application):
    """
    State left by an approval whose source flip and voiding never ran:
    an occupancy whose source is still active plus a competing active
    application of the same user.
    """
    source = make_application(student, room)
    competing = make_application(student, single_room)
    AcceptedApplication.objects.create(
        application=source, user=student, room=room,
        student_index_number=source.student_index_number,
        average_grade=Decimal('8.50'), academic_year='2024/2025',
    )
    return source, competing


def test_reconcile_repairs_flags(half_applied):
    source, competing = half_applied

    report = ReconciliationService().reconcile()

    assert report.stale_source_applications == 1
    assert report.stale_competing_applications == 1
    assert report.repaired == 2

    source.refresh_from_db()
    competing.refresh_from_db()
    assert (source.is_active, source.deactivation_reason) == (False, DeactivationReason.ACCEPTED)
    assert (competing.is_active, competing.deactivation_reason) == (False, DeactivationReason.VOIDED)
    assert AuditLog.objects.filter(action=AuditLog.ACTION_RECONCILE).count() == 1


def test_reconcile_leaves_consistent_state_alone(other_student, room, make_application):
    untouched = make_application(other_student, room)

    report = ReconciliationService().reconcile()

    assert report.repaired == 0
    untouched.refresh_from_db()
    assert untouched.is_active
    assert not AuditLog.objects.exists()


def test_reconcile_command_dry_run(half_applied):
    source, competing = half_applied
    out = StringIO()

    call_command('reconcile_occupancy', '--dry-run', stdout=out)

    assert 'Would repair: 2' in out.getvalue()
    source.refresh_from_db()
    competing.refresh_from_db()
    assert source.is_active and competing.is_active


def test_reconcile_command(half_applied):
    out = StringIO()

    call_command('reconcile_occupancy', stdout=out)

    assert 'Repaired: 2' in out.getvalue()
