"""
Occupancy services - approval, eviction, checkout and reconciliation.

Approval converts an active Application into an AcceptedApplication. The
occupancy insert and the flip of the source application commit together
while the room row is locked; voiding the applicant's other applications
and billing the first month happen afterwards and are best-effort.
"""
from typing import List, Optional

from django.db import transaction, IntegrityError, DatabaseError

from audit.helpers import log_approval, log_eviction, log_checkout, log_action
from audit.models import AuditLog
from core.constants import DeactivationReason, DefaultLimits, Pagination
from core.dto import ReconciliationReport
from core.exceptions import (
    BaseApplicationException, NotFoundError, RoomNotFoundError,
    ApplicationInactiveError, AlreadyAcceptedError, UserAlreadyOccupyingError,
    RoomFullError, NoActiveRoomError, ValidationError,
)
from core.services import BaseService
from core.validators import OccupancyValidator
from applications.models import Application
from applications.repositories import ApplicationRepository
from dormitories.repositories import RoomRepository
from payments.services import PaymentService
from .models import AcceptedApplication
from .repositories import AcceptedApplicationRepository


class ApprovalService(BaseService):
    """Service for the application -> occupancy lifecycle"""

    def __init__(self, payment_service: PaymentService = None):
        super().__init__()
        self.occupancy_repo = AcceptedApplicationRepository()
        self.application_repo = ApplicationRepository()
        self.room_repo = RoomRepository()
        self.payment_service = payment_service or PaymentService()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def approve(self, application_id, academic_year: str, actor=None, request=None) -> AcceptedApplication:
        """
        Approve an application for the given academic year.

        Args:
            application_id: Application to approve
            academic_year: Academic year, e.g. "2024/2025"
            actor: Administrator performing the approval
            request: Django request, for the audit trail

        Returns:
            Created AcceptedApplication

        Raises:
            ValidationError: If the academic year is malformed
            NotFoundError: If the application doesn't exist
            ApplicationInactiveError: If the application is no longer active
            AlreadyAcceptedError: If the application already has an occupancy record
            UserAlreadyOccupyingError: If the applicant already holds a room
            RoomFullError: If the room has no free bed
        """
        OccupancyValidator.validate_academic_year(academic_year)

        application = self.application_repo.find(application_id)
        if not application:
            raise NotFoundError(resource_type="Application", resource_id=application_id)
        if not application.is_active:
            raise ApplicationInactiveError(details={'application_id': application.id})
        if self.occupancy_repo.exists(application_id=application.id):
            raise AlreadyAcceptedError(details={'application_id': application.id})
        if self.occupancy_repo.user_has_room(application.user_id):
            raise UserAlreadyOccupyingError(details={'user_id': application.user_id})

        with transaction.atomic():
            # Concurrent approvals into the same room queue up here
            room = self.room_repo.lock(application.room_id)
            if room is None:
                raise RoomNotFoundError(resource_type="Room", resource_id=application.room_id)

            occupants = self.occupancy_repo.occupant_count(room.id)
            if occupants >= room.capacity:
                raise RoomFullError(details={'room_id': room.id, 'capacity': room.capacity})

            accepted = self._insert_occupancy(application, academic_year)

            if not self.application_repo.deactivate(application.id, DeactivationReason.ACCEPTED):
                # Withdrawn or approved elsewhere since it was read; roll back the insert
                raise ApplicationInactiveError(details={'application_id': application.id})

        self.log_info(
            "Application approved",
            application_id=application.id, user_id=application.user_id,
            room_id=room.id, academic_year=academic_year
        )

        self._void_other_applications(application)
        self._bill_first_month(application)
        log_approval(actor, accepted, request=request)

        return self.occupancy_repo.find(accepted.id)

    def evict(self, user_id, reason: str, actor=None, request=None) -> AcceptedApplication:
        """
        Remove a student from their room. The reason goes to the audit log.

        Raises:
            ValidationError: If no reason is given
            NoActiveRoomError: If the user holds no room
        """
        if not reason or not reason.strip():
            raise ValidationError(message="Eviction reason is required", code="REASON_REQUIRED")

        removed = self.occupancy_repo.delete_for_user(user_id)
        if removed is None:
            raise NoActiveRoomError(details={'user_id': user_id})

        self.log_info("Student evicted", user_id=user_id, room_id=removed.room_id, reason=reason)
        log_eviction(actor, removed, reason.strip(), request=request)
        return removed

    def checkout(self, user, request=None) -> AcceptedApplication:
        """
        Student leaves their room voluntarily.

        Raises:
            NoActiveRoomError: If the user holds no room
        """
        removed = self.occupancy_repo.delete_for_user(user.id)
        if removed is None:
            raise NoActiveRoomError(message="You do not have an active room assignment", details={'user_id': user.id})

        self.log_info("Student checked out", user_id=user.id, room_id=removed.room_id)
        log_checkout(user, removed, request=request)
        return removed

    def delete_accepted(self, accepted_id, actor=None, request=None) -> None:
        """
        Administrative removal of an occupancy record by id.

        Raises:
            NotFoundError: If the record doesn't exist
        """
        record = self.occupancy_repo.get_by_id(accepted_id)
        if not record or not self.occupancy_repo.delete(record):
            raise NotFoundError(resource_type="Accepted application", resource_id=accepted_id)

        self.log_info("Accepted application deleted", accepted_id=accepted_id, user_id=record.user_id)
        log_action(
            user=actor,
            action=AuditLog.ACTION_DELETE,
            resource_type=AuditLog.RESOURCE_ACCEPTED_APPLICATION,
            resource_id=accepted_id,
            description=f"Deleted accepted application #{accepted_id} of user {record.user_id}",
            request=request,
            metadata={'user_id': record.user_id, 'room_id': record.room_id},
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def check_user_has_active_room(self, user_id) -> bool:
        """True iff the user holds an occupancy record"""
        return self.occupancy_repo.user_has_room(user_id)

    def get_accepted(self, accepted_id) -> AcceptedApplication:
        record = self.occupancy_repo.find(accepted_id)
        if not record:
            raise NotFoundError(resource_type="Accepted application", resource_id=accepted_id)
        return record

    def list_all(self) -> List[AcceptedApplication]:
        return list(self.occupancy_repo.get_queryset())

    def list_by_user(self, user_id) -> List[AcceptedApplication]:
        return list(self.occupancy_repo.by_user(user_id))

    def list_by_room(self, room_id) -> List[AcceptedApplication]:
        return list(self.occupancy_repo.by_room(room_id))

    def list_by_academic_year(self, academic_year: str) -> List[AcceptedApplication]:
        return list(self.occupancy_repo.by_academic_year(academic_year))

    def top_students(self, limit=None, academic_year: Optional[str] = None, room_id=None) -> List[AcceptedApplication]:
        """
        Residents ranked by average grade, best first.

        Args:
            limit: Maximum number of results; non-positive or missing means 10
            academic_year: Restrict to one academic year
            room_id: Restrict to one room
        """
        limit = self.normalize_limit(limit)
        filters = {}
        if academic_year:
            filters['academic_year'] = academic_year
        if room_id is not None:
            filters['room_id'] = room_id
        return list(self.occupancy_repo.top_by_grade(limit, **filters))

    @staticmethod
    def normalize_limit(limit) -> int:
        try:
            limit = int(limit)
        except (TypeError, ValueError):
            return DefaultLimits.TOP_STUDENTS_LIMIT
        if limit <= 0:
            return DefaultLimits.TOP_STUDENTS_LIMIT
        return min(limit, Pagination.MAX_PAGE_SIZE)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _insert_occupancy(self, application: Application, academic_year: str) -> AcceptedApplication:
        try:
            with transaction.atomic():
                return self.occupancy_repo.create(
                    application=application,
                    user_id=application.user_id,
                    room_id=application.room_id,
                    student_index_number=application.student_index_number,
                    average_grade=application.average_grade,
                    academic_year=academic_year,
                )
        except IntegrityError as e:
            # A concurrent approval won; report which uniqueness rule it hit
            if self.occupancy_repo.exists(application_id=application.id):
                raise AlreadyAcceptedError(details={'application_id': application.id}) from e
            raise UserAlreadyOccupyingError(details={'user_id': application.user_id}) from e

    def _void_other_applications(self, application: Application) -> int:
        voided = 0
        for other_id in self.application_repo.other_active_ids(application.user_id, application.id):
            try:
                with transaction.atomic():
                    voided += self.application_repo.deactivate(other_id, DeactivationReason.VOIDED)
            except DatabaseError as e:
                self.log_error(
                    "Failed to void application after approval",
                    error=e, application_id=other_id, approved_application_id=application.id
                )
        if voided:
            self.log_info("Voided other applications", user_id=application.user_id, count=voided)
        return voided

    def _bill_first_month(self, application: Application):
        try:
            return self.payment_service.create_first_payment(application.id)
        except (BaseApplicationException, DatabaseError) as e:
            self.log_error("Failed to create payment after approval", error=e, application_id=application.id)
            return None


class ReconciliationService(BaseService):
    """
    Repairs application flags left behind by partially applied approvals:
    occupancy records whose source application is still active, and active
    applications of users who already hold a room.
    """

    def __init__(self):
        super().__init__()
        self.application_repo = ApplicationRepository()

    def reconcile(self, dry_run: bool = False) -> ReconciliationReport:
        stale_sources = list(
            Application.objects.filter(is_active=True, acceptance__isnull=False)
            .values_list('id', flat=True)
        )
        occupying_users = AcceptedApplication.objects.values('user_id')
        stale_competing = list(
            Application.objects.filter(is_active=True, acceptance__isnull=True, user_id__in=occupying_users)
            .values_list('id', flat=True)
        )

        report = ReconciliationReport(
            stale_source_applications=len(stale_sources),
            stale_competing_applications=len(stale_competing),
            dry_run=dry_run,
        )

        if dry_run:
            self.log_info("Reconciliation dry run", sources=stale_sources, competing=stale_competing)
            return report

        for application_id in stale_sources:
            report.repaired += self.application_repo.deactivate(application_id, DeactivationReason.ACCEPTED)
        for application_id in stale_competing:
            report.repaired += self.application_repo.deactivate(application_id, DeactivationReason.VOIDED)

        if report.repaired:
            log_action(
                user=None,
                action=AuditLog.ACTION_RECONCILE,
                resource_type=AuditLog.RESOURCE_APPLICATION,
                resource_id=None,
                description=f"Reconciliation deactivated {report.repaired} applications",
                metadata={'accepted': stale_sources, 'voided': stale_competing},
            )

        self.log_info(
            "Reconciliation finished",
            stale_sources=report.stale_source_applications,
            stale_competing=report.stale_competing_applications,
            repaired=report.repaired,
        )
        return report
