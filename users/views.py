from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from .serializers import UserSerializer
from .services import AccountDeletionService


class UserViewSet(viewsets.GenericViewSet):
    """
    Self-service endpoints for the authenticated user.

    DELETE /api/users/me/ consults the dormitory room-status endpoint first
    and refuses the deletion when the user holds a room or the status
    cannot be verified.
    """
    permission_classes = [IsAuthenticated]
    serializer_class = UserSerializer

    @action(detail=False, methods=['get', 'patch', 'delete'])
    def me(self, request):
        user = request.user

        if request.method == 'DELETE':
            AccountDeletionService().delete_account(user)
            return Response({'message': 'Account deleted successfully'}, status=status.HTTP_200_OK)

        if request.method == 'PATCH':
            serializer = self.get_serializer(user, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            serializer.save()
            return Response(serializer.data)

        return Response(self.get_serializer(user).data)
