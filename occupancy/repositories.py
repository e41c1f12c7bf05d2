"""
Occupancy repository - data access for accepted applications.
"""
from typing import Optional
from django.db.models import QuerySet
from core.repositories import BaseRepository
from .models import AcceptedApplication


class AcceptedApplicationRepository(BaseRepository[AcceptedApplication]):
    """Repository for AcceptedApplication model"""
    model = AcceptedApplication

    def get_queryset(self) -> QuerySet[AcceptedApplication]:
        return self.model.objects.select_related('room', 'room__dormitory', 'user')

    def find(self, accepted_id) -> Optional[AcceptedApplication]:
        return self.get_queryset().filter(id=accepted_id).first()

    def for_user(self, user_id) -> Optional[AcceptedApplication]:
        return self.get_queryset().filter(user_id=user_id).first()

    def user_has_room(self, user_id) -> bool:
        return self.exists(user_id=user_id)

    def occupant_count(self, room_id) -> int:
        return self.count(room_id=room_id)

    def by_user(self, user_id) -> QuerySet[AcceptedApplication]:
        return self.get_queryset().filter(user_id=user_id)

    def by_room(self, room_id) -> QuerySet[AcceptedApplication]:
        return self.get_queryset().filter(room_id=room_id)

    def by_academic_year(self, academic_year: str) -> QuerySet[AcceptedApplication]:
        return self.get_queryset().filter(academic_year=academic_year)

    def top_by_grade(self, limit: int, **filters) -> QuerySet[AcceptedApplication]:
        """Highest average grade first; ties broken by earliest admission"""
        return self.get_queryset().filter(**filters).order_by('-average_grade', 'created_at')[:limit]

    def delete_for_user(self, user_id) -> Optional[AcceptedApplication]:
        """
        Remove the user's occupancy record.
        Returns the removed record, or None when the user held no room.
        """
        record = self.for_user(user_id)
        if record is None:
            return None
        deleted, _ = self.model.objects.filter(pk=record.pk).delete()
        return record if deleted else None
