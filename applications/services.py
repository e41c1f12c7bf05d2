"""
Application service - business logic for the Application Store.
"""
from typing import List
from django.db import transaction
from core.services import BaseService
from core.exceptions import (
    NotFoundError, PermissionDeniedError, RoomNotFoundError,
    DuplicateActiveError, AlreadyAcceptedError, UserAlreadyOccupyingError,
    ApplicationHasPaymentsError,
)
from core.validators import ApplicationValidator
from core.dto import ApplicationDTO, ApplicationPatchDTO
from dormitories.repositories import RoomRepository
from occupancy.repositories import AcceptedApplicationRepository
from .repositories import ApplicationRepository
from .models import Application


class ApplicationService(BaseService):
    """Service for room applications"""

    def __init__(self):
        super().__init__()
        self.application_repo = ApplicationRepository()
        self.room_repo = RoomRepository()
        self.occupancy_repo = AcceptedApplicationRepository()

    def create_application(self, user, data: ApplicationDTO) -> Application:
        """
        File a new application for a room.

        Args:
            user: Applicant
            data: Room, index number and average grade

        Returns:
            Created Application (active)

        Raises:
            ValidationError: If the index number or grade is invalid
            RoomNotFoundError: If the room does not resolve
            DuplicateActiveError: If the user already has an active application for the room
        """
        ApplicationValidator.validate_index_number(data.student_index_number)
        ApplicationValidator.validate_average_grade(data.average_grade)

        room = self.room_repo.resolve(data.room_id)
        if not room:
            raise RoomNotFoundError(resource_type="Room", resource_id=data.room_id)

        # Check-then-insert; no unique index backs this rule.
        if self.application_repo.active_for_user_and_room(user.id, room.id):
            raise DuplicateActiveError(details={'user_id': user.id, 'room_id': room.id})

        application = self.application_repo.create(
            user=user,
            room=room,
            student_index_number=data.student_index_number.strip(),
            average_grade=data.average_grade,
            is_active=True,
        )

        self.log_info("Application created", application_id=application.id, user_id=user.id, room_id=room.id)
        return application

    def get_application(self, application_id) -> Application:
        """
        Raises:
            NotFoundError: If the application doesn't exist
        """
        application = self.application_repo.find(application_id)
        if not application:
            raise NotFoundError(resource_type="Application", resource_id=application_id)
        return application

    def list_by_user(self, user_id) -> List[Application]:
        return list(self.application_repo.by_user(user_id))

    def list_by_room(self, room_id) -> List[Application]:
        return list(self.application_repo.by_room(room_id))

    def list_all(self) -> List[Application]:
        return list(self.application_repo.get_queryset())

    def update_application(self, application_id, caller, patch: ApplicationPatchDTO) -> Application:
        """
        Owner-only partial update.

        Args:
            application_id: Application ID
            caller: User performing the update
            patch: Fields to change; None leaves a field untouched

        Raises:
            NotFoundError: If the application doesn't exist
            PermissionDeniedError: If the caller does not own the application
            DuplicateActiveError: If reactivating collides with another active application
            AlreadyAcceptedError: If reactivating an application that was accepted
            UserAlreadyOccupyingError: If reactivating while the owner holds a room
        """
        with transaction.atomic():
            application = self.application_repo.get_for_update(application_id)
            if not application:
                raise NotFoundError(resource_type="Application", resource_id=application_id)

            if application.user_id != caller.id:
                raise PermissionDeniedError("Application does not belong to user")

            changes = {}
            if patch.student_index_number is not None:
                ApplicationValidator.validate_index_number(patch.student_index_number)
                changes['student_index_number'] = patch.student_index_number.strip()
            if patch.average_grade is not None:
                ApplicationValidator.validate_average_grade(patch.average_grade)
                changes['average_grade'] = patch.average_grade
            if patch.is_active is not None and patch.is_active != application.is_active:
                if patch.is_active:
                    self._check_reactivation(application)
                changes['is_active'] = patch.is_active
                changes['deactivation_reason'] = None

            if changes:
                self.application_repo.update(application, **changes)

        self.log_info("Application updated", application_id=application.id, fields=sorted(changes))
        return self.get_application(application.id)

    def delete_application(self, application_id, caller) -> None:
        """
        Owners delete their own applications; administrators delete any.

        Payments are keyed to their application, so an application that has
        been billed stays; its payments must be deleted first.

        Raises:
            NotFoundError: If the application doesn't exist
            PermissionDeniedError: If the caller is neither owner nor admin
            ApplicationHasPaymentsError: If any payment references the application
        """
        with transaction.atomic():
            application = self.application_repo.get_for_update(application_id)
            if not application:
                raise NotFoundError(resource_type="Application", resource_id=application_id)

            if application.user_id != caller.id and not caller.is_dorm_admin:
                raise PermissionDeniedError("Application does not belong to user")

            if self.application_repo.has_payments(application.id):
                raise ApplicationHasPaymentsError(details={'application_id': application.id})

            if not self.application_repo.delete(application):
                raise NotFoundError(resource_type="Application", resource_id=application_id)

        self.log_info("Application deleted", application_id=application_id, caller_id=caller.id)

    def _check_reactivation(self, application: Application):
        if self.occupancy_repo.exists(application_id=application.id):
            raise AlreadyAcceptedError(details={'application_id': application.id})

        # An occupying user keeps zero active applications
        if self.occupancy_repo.user_has_room(application.user_id):
            raise UserAlreadyOccupyingError(details={'user_id': application.user_id})

        duplicate = self.application_repo.get_all(
            user_id=application.user_id, room_id=application.room_id, is_active=True
        ).exclude(id=application.id).exists()
        if duplicate:
            raise DuplicateActiveError(details={'user_id': application.user_id, 'room_id': application.room_id})
