from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from .repositories import DormitoryRepository, RoomRepository
from .serializers import DormitorySerializer, RoomSerializer


class DormitoryViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only room registry. Dormitories and rooms are maintained through
    the Django admin.
    """
    permission_classes = [IsAuthenticated]
    serializer_class = DormitorySerializer
    pagination_class = None
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        return DormitoryRepository().with_room_stats()

    @action(detail=True, methods=['get'])
    def rooms(self, request, pk=None):
        """Rooms of one dormitory"""
        dormitory = self.get_object()
        rooms = RoomRepository().by_dormitory(dormitory.id).select_related('dormitory')
        serializer = RoomSerializer(rooms, many=True)
        return Response({'rooms': serializer.data, 'count': len(serializer.data)})


class RoomViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [IsAuthenticated]
    serializer_class = RoomSerializer
    pagination_class = None
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        return RoomRepository().get_queryset().select_related('dormitory')
