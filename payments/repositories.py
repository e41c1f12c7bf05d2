"""
Payment repository - data access for the Billing Generator.
"""
from datetime import date
from typing import Optional
from django.db.models import QuerySet
from django.utils import timezone
from core.constants import PaymentStatus
from core.repositories import BaseRepository
from .models import Payment


class PaymentRepository(BaseRepository[Payment]):
    """Repository for Payment model"""
    model = Payment

    def get_queryset(self) -> QuerySet[Payment]:
        return self.model.objects.select_related('application', 'application__room')

    def find(self, payment_id) -> Optional[Payment]:
        return self.get_queryset().filter(id=payment_id).first()

    def for_period(self, application_id, period: str) -> Optional[Payment]:
        return self.first(application_id=application_id, period=period)

    def by_user(self, user_id) -> QuerySet[Payment]:
        return self.get_queryset().filter(application__user_id=user_id)

    def by_room(self, room_id) -> QuerySet[Payment]:
        return self.get_queryset().filter(application__room_id=room_id)

    def by_application(self, application_id) -> QuerySet[Payment]:
        return self.get_queryset().filter(application_id=application_id)

    def by_status(self, status: str) -> QuerySet[Payment]:
        return self.get_queryset().filter(status=status)

    def search_by_index(self, prefix: str, status: Optional[str] = None) -> QuerySet[Payment]:
        """Case-insensitive prefix match on the applicant's index number"""
        queryset = self.get_queryset().filter(application__student_index_number__istartswith=prefix)
        if status:
            queryset = queryset.filter(status=status)
        return queryset

    def mark_overdue(self, today: date) -> int:
        """Single-statement sweep of pending payments past their due date"""
        return self.update_where(
            {'status': PaymentStatus.PENDING, 'due_date__lt': today},
            status=PaymentStatus.OVERDUE,
            updated_at=timezone.now(),
        )
