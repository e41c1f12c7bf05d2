"""
Application repository - data access for the Application Store.
"""
from typing import Optional
from django.db.models import QuerySet
from django.utils import timezone
from core.repositories import BaseRepository
from .models import Application


class ApplicationRepository(BaseRepository[Application]):
    """Repository for Application model"""
    model = Application

    def get_queryset(self) -> QuerySet[Application]:
        return self.model.objects.select_related('room', 'room__dormitory', 'user')

    def find(self, application_id) -> Optional[Application]:
        return self.get_queryset().filter(id=application_id).first()

    def active_for_user_and_room(self, user_id, room_id) -> Optional[Application]:
        """The active application of a user for a room, if any"""
        return self.first(user_id=user_id, room_id=room_id, is_active=True)

    def by_user(self, user_id) -> QuerySet[Application]:
        return self.get_queryset().filter(user_id=user_id)

    def by_room(self, room_id) -> QuerySet[Application]:
        return self.get_queryset().filter(room_id=room_id)

    def has_payments(self, application_id) -> bool:
        return self.model.objects.filter(id=application_id, payments__isnull=False).exists()

    def other_active_ids(self, user_id, exclude_id) -> list:
        """Ids of the user's active applications except ``exclude_id``"""
        return list(
            self.get_all(user_id=user_id, is_active=True)
            .exclude(id=exclude_id)
            .values_list('id', flat=True)
        )

    def deactivate(self, application_id, reason) -> int:
        """
        Flip one application inactive if it is still active.
        Returns the number of rows changed (0 or 1).
        """
        return self.update_where(
            {'id': application_id, 'is_active': True},
            is_active=False,
            deactivation_reason=reason,
            updated_at=timezone.now(),
        )
