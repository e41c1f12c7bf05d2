"""
Audit Log API Views

Read-only access to audit logs for administrators.
"""

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from api.permissions import IsDormAdmin
from audit.helpers import get_resource_audit_trail
from audit.models import AuditLog
from audit.serializers import AuditLogSerializer


class AuditLogViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only ViewSet for audit logs.

    Filters:
    - ?action=VACATE
    - ?resource_type=AcceptedApplication
    - ?user=<id>
    """

    serializer_class = AuditLogSerializer
    permission_classes = [IsAuthenticated, IsDormAdmin]
    search_fields = ['description']
    ordering_fields = ['timestamp', 'action']
    ordering = ['-timestamp']

    def get_queryset(self):
        queryset = AuditLog.objects.select_related('user')

        for param in ('action', 'resource_type', 'user'):
            value = self.request.query_params.get(param)
            if value:
                queryset = queryset.filter(**{param: value})

        return queryset

    @action(detail=False, methods=['get'])
    def evictions(self, request):
        """Eviction entries with their recorded reasons"""
        queryset = AuditLog.objects.evictions().select_related('user')
        serializer = self.get_serializer(queryset, many=True)
        return Response({'evictions': serializer.data, 'count': len(serializer.data)})

    @action(detail=False, methods=['get'])
    def resource_trail(self, request):
        """
        Get audit trail for a specific resource.

        Example: GET /api/audit/logs/resource_trail/?resource_type=Payment&resource_id=12
        """
        resource_type = request.query_params.get('resource_type')
        resource_id = request.query_params.get('resource_id')

        if not resource_type or not resource_id or not resource_id.isdigit():
            return Response(
                {'error': 'Both resource_type and a numeric resource_id are required', 'code': 'VALIDATION_ERROR'},
                status=status.HTTP_400_BAD_REQUEST
            )

        serializer = self.get_serializer(get_resource_audit_trail(resource_type, int(resource_id)), many=True)
        return Response({
            'resource_type': resource_type,
            'resource_id': int(resource_id),
            'audit_trail': serializer.data,
            'count': len(serializer.data)
        })
