"""
Reporting API

Statistics over dormitories, applications and residents, computed from
current records on every request.
"""

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from .services import ReportingService


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def statistics(request):
    """
    Overall statistics.

    Returns:
        summary, per-dormitory breakdown, application counts, average
        grades and the yearly acceptance trend
    """
    return Response(ReportingService().statistics())


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dormitory_statistics(request):
    """Per-dormitory capacity and occupancy"""
    dormitories = ReportingService().dormitory_breakdown()
    return Response({'dormitories': dormitories, 'count': len(dormitories)})
