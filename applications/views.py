from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from api.permissions import IsDormAdmin, IsStudent
from core.dto import ApplicationDTO, ApplicationPatchDTO
from core.exceptions import PermissionDeniedError
from .serializers import ApplicationSerializer, ApplicationCreateSerializer, ApplicationUpdateSerializer
from .services import ApplicationService


class ApplicationViewSet(viewsets.ViewSet):
    """
    ViewSet for room applications.

    Students file and manage their own applications; administrators see
    every application and may delete any of them.
    """
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r'\d+'

    # An unknown room in the request body is a bad request
    bad_request_on_not_found = ('create',)

    def get_permissions(self):
        if self.action == 'by_room':
            return [IsAuthenticated(), IsDormAdmin()]
        if self.action == 'create':
            return [IsAuthenticated(), IsStudent()]
        return super().get_permissions()

    @staticmethod
    def _envelope(applications):
        data = ApplicationSerializer(applications, many=True).data
        return Response({'applications': data, 'count': len(data)})

    def list(self, request):
        """Administrators see all applications; students see their own"""
        service = ApplicationService()
        if request.user.is_dorm_admin:
            return self._envelope(service.list_all())
        return self._envelope(service.list_by_user(request.user.id))

    def create(self, request):
        serializer = ApplicationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        application = ApplicationService().create_application(
            request.user, ApplicationDTO(**serializer.validated_data)
        )
        return Response(ApplicationSerializer(application).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        application = ApplicationService().get_application(pk)
        if application.user_id != request.user.id and not request.user.is_dorm_admin:
            raise PermissionDeniedError("Application does not belong to user")
        return Response(ApplicationSerializer(application).data)

    def update(self, request, pk=None):
        serializer = ApplicationUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        application = ApplicationService().update_application(
            pk, request.user, ApplicationPatchDTO(**serializer.validated_data)
        )
        return Response(ApplicationSerializer(application).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        ApplicationService().delete_application(pk, request.user)
        return Response({'message': 'Application deleted successfully'}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'])
    def my(self, request):
        """Applications of the authenticated user"""
        return self._envelope(ApplicationService().list_by_user(request.user.id))

    @action(detail=False, methods=['get'], url_path=r'room/(?P<room_id>\d+)')
    def by_room(self, request, room_id=None):
        """All applications for one room (admin)"""
        return self._envelope(ApplicationService().list_by_room(room_id))
