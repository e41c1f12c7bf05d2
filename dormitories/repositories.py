"""
Room registry - read access to dormitories and rooms.
"""
from typing import Optional
from django.db.models import QuerySet, Count
from core.repositories import BaseRepository
from .models import Dormitory, Room


class DormitoryRepository(BaseRepository[Dormitory]):
    """Repository for Dormitory model"""
    model = Dormitory

    def with_room_stats(self) -> QuerySet[Dormitory]:
        """Dormitories annotated with room count"""
        return self.get_queryset().annotate(room_count=Count('rooms', distinct=True))


class RoomRepository(BaseRepository[Room]):
    """Repository for Room model"""
    model = Room

    def resolve(self, room_id) -> Optional[Room]:
        """Room by id, or None when it does not resolve"""
        return self.get_all(id=room_id).select_related('dormitory').first()

    def lock(self, room_id) -> Optional[Room]:
        """Row-lock the room; serializes admissions into it"""
        return self.get_for_update(room_id)

    def by_dormitory(self, dormitory_id: int) -> QuerySet[Room]:
        return self.get_all(dormitory_id=dormitory_id)
