from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.views import APIView

from api.permissions import IsDormAdmin, IsStudent
from core.exceptions import PermissionDeniedError, ValidationError
from .serializers import AcceptedApplicationSerializer, ApproveSerializer, EvictSerializer
from .services import ApprovalService


class OccupancyViewSet(viewsets.ViewSet):
    """
    ViewSet for occupancy records (accepted applications).

    Administrators approve applications and evict residents; students see
    their own record and may check out.
    """
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r'\d+'

    # Lookups inside these actions fail with 400, not 404
    bad_request_on_not_found = ('approve',)

    admin_actions = ('list', 'destroy', 'approve', 'evict', 'by_room', 'by_academic_year')

    def get_permissions(self):
        if self.action in self.admin_actions:
            return [IsAuthenticated(), IsDormAdmin()]
        if self.action == 'checkout':
            return [IsAuthenticated(), IsStudent()]
        return super().get_permissions()

    @staticmethod
    def _envelope(records):
        data = AcceptedApplicationSerializer(records, many=True).data
        return Response({'accepted_applications': data, 'count': len(data)})

    def list(self, request):
        return self._envelope(ApprovalService().list_all())

    def retrieve(self, request, pk=None):
        record = ApprovalService().get_accepted(pk)
        if record.user_id != request.user.id and not request.user.is_dorm_admin:
            raise PermissionDeniedError("Accepted application does not belong to user")
        return Response(AcceptedApplicationSerializer(record).data)

    def destroy(self, request, pk=None):
        """Administrative removal of an occupancy record"""
        ApprovalService().delete_accepted(pk, actor=request.user, request=request)
        return Response({'message': 'Accepted application deleted successfully'}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['post'])
    def approve(self, request):
        """
        Approve an application.

        Body: {"aplikacija_id": <id>, "academic_year": "2024/2025"}
        """
        serializer = ApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        accepted = ApprovalService().approve(
            serializer.validated_data['aplikacija_id'],
            serializer.validated_data['academic_year'],
            actor=request.user,
            request=request,
        )
        return Response({
            'message': 'Application approved successfully',
            'accepted_application': AcceptedApplicationSerializer(accepted).data,
        }, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'])
    def evict(self, request):
        """
        Evict a student from their room.

        Body: {"user_id": <id>, "reason": "..."}
        """
        serializer = EvictSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user_id = serializer.validated_data['user_id']
        reason = serializer.validated_data['reason']
        ApprovalService().evict(user_id, reason, actor=request.user, request=request)

        return Response({
            'message': 'Student evicted successfully',
            'user_id': user_id,
            'reason': reason,
        })

    @action(detail=False, methods=['post'])
    def checkout(self, request):
        """Authenticated student leaves their room"""
        ApprovalService().checkout(request.user, request=request)
        return Response({'message': 'Successfully checked out from room'})

    @action(detail=False, methods=['get'])
    def my(self, request):
        return self._envelope(ApprovalService().list_by_user(request.user.id))

    @action(detail=False, methods=['get'], url_path=r'room/(?P<room_id>\d+)')
    def by_room(self, request, room_id=None):
        return self._envelope(ApprovalService().list_by_room(room_id))

    @action(detail=False, methods=['get'], url_path='academic-year')
    def by_academic_year(self, request):
        """GET /api/occupancy/academic-year/?academic_year=2024/2025"""
        academic_year = request.query_params.get('academic_year')
        if not academic_year:
            raise ValidationError(message="academic_year query parameter is required", code="ACADEMIC_YEAR_REQUIRED")
        return self._envelope(ApprovalService().list_by_academic_year(academic_year))

    @action(detail=False, methods=['get'], url_path='top-students')
    def top_students(self, request):
        """
        Residents ranked by average grade.

        Query params:
        - limit: number of results (default 10)
        - academic_year: restrict to one academic year
        - room_id: restrict to one room
        """
        room_id = request.query_params.get('room_id')
        if room_id is not None and not room_id.isdigit():
            raise ValidationError(message="room_id must be an integer", code="INVALID_ROOM_ID")

        service = ApprovalService()
        limit = service.normalize_limit(request.query_params.get('limit'))
        records = service.top_students(
            limit=limit,
            academic_year=request.query_params.get('academic_year'),
            room_id=int(room_id) if room_id is not None else None,
        )
        data = AcceptedApplicationSerializer(records, many=True).data
        return Response({'top_students': data, 'count': len(data), 'limit': limit})


class RoomStatusView(APIView):
    """
    GET /api/internal/users/<user_id>/room-status

    Service-to-service query used by the identity side before deleting an
    account. Unauthenticated; callers are expected on the internal network.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, user_id):
        if not str(user_id).isdigit():
            return Response({'error': 'Invalid user ID format', 'code': 'INVALID_USER_ID'},
                            status=status.HTTP_400_BAD_REQUEST)

        user_id = int(user_id)
        has_room = ApprovalService().check_user_has_active_room(user_id)
        return Response({'user_id': user_id, 'has_active_room': has_room})
