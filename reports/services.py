"""
Reporting read-model.

Every figure is aggregated from the current applications, occupancy
records and rooms on each request; nothing is cached or counted
incrementally.
"""
from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Count, Sum, Avg, Q

from core.constants import DeactivationReason
from core.services import BaseService
from applications.models import Application
from dormitories.models import Dormitory, Room
from occupancy.models import AcceptedApplication


def _rate(part, whole) -> float:
    """Percentage rounded to one decimal; 0.0 for an empty whole"""
    return round(part / whole * 100, 1) if whole else 0.0


def _grade(value):
    if value is None:
        return None
    return float(Decimal(str(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


class ReportingService(BaseService):
    """Aggregates occupancy and application statistics"""

    def dormitory_breakdown(self) -> list:
        """Room count, capacity, occupants and occupancy rate per dormitory"""
        occupants = dict(
            AcceptedApplication.objects.values_list('room__dormitory_id').order_by()
            .annotate(total=Count('id'))
        )
        rooms = dict(
            (row['dormitory_id'], row)
            for row in Room.objects.order_by().values('dormitory_id')
            .annotate(room_count=Count('id'), total_capacity=Sum('capacity'))
        )

        breakdown = []
        for dormitory in Dormitory.objects.order_by('name'):
            room_stats = rooms.get(dormitory.id, {})
            capacity = room_stats.get('total_capacity') or 0
            occupied = occupants.get(dormitory.id, 0)
            breakdown.append({
                'dormitory_id': dormitory.id,
                'dormitory_name': dormitory.name,
                'room_count': room_stats.get('room_count', 0),
                'total_capacity': capacity,
                'occupants': occupied,
                'free_beds': max(capacity - occupied, 0),
                'occupancy_rate': _rate(occupied, capacity),
            })
        return breakdown

    def application_summary(self) -> dict:
        stats = Application.objects.aggregate(
            total=Count('id'),
            active=Count('id', filter=Q(is_active=True)),
            accepted=Count('id', filter=Q(deactivation_reason=DeactivationReason.ACCEPTED)),
            voided=Count('id', filter=Q(deactivation_reason=DeactivationReason.VOIDED)),
        )
        stats['acceptance_rate'] = _rate(stats['accepted'], stats['total'])
        return stats

    def grade_summary(self) -> dict:
        overall = AcceptedApplication.objects.aggregate(avg=Avg('average_grade'))['avg']
        per_year = (
            AcceptedApplication.objects.values('academic_year')
            .annotate(avg=Avg('average_grade'), residents=Count('id'))
            .order_by('academic_year')
        )
        return {
            'overall': _grade(overall),
            'by_academic_year': [
                {
                    'academic_year': row['academic_year'],
                    'average_grade': _grade(row['avg']),
                    'residents': row['residents'],
                }
                for row in per_year
            ],
        }

    def yearly_trend(self) -> list:
        """Current occupancy records per academic year, oldest year first"""
        return [
            {'academic_year': row['academic_year'], 'accepted': row['accepted']}
            for row in AcceptedApplication.objects.values('academic_year')
            .annotate(accepted=Count('id'))
            .order_by('academic_year')
        ]

    def statistics(self) -> dict:
        dormitories = self.dormitory_breakdown()
        total_capacity = sum(d['total_capacity'] for d in dormitories)
        total_occupants = sum(d['occupants'] for d in dormitories)

        return {
            'summary': {
                'total_dormitories': len(dormitories),
                'total_rooms': sum(d['room_count'] for d in dormitories),
                'total_capacity': total_capacity,
                'total_occupants': total_occupants,
                'occupancy_rate': _rate(total_occupants, total_capacity),
            },
            'dormitories': dormitories,
            'applications': self.application_summary(),
            'average_grade': self.grade_summary(),
            'yearly_trend': self.yearly_trend(),
        }
