"""
Payment service - business logic for the Billing Generator.
"""
from datetime import date
from typing import List, Optional

from django.db import transaction, IntegrityError
from django.utils import timezone

from core.constants import PaymentStatus
from core.dto import PaymentDTO, PaymentPatchDTO, BillingPolicy
from core.exceptions import NotFoundError, DuplicatePeriodError
from core.services import BaseService
from core.validators import PaymentValidator, period_for
from applications.repositories import ApplicationRepository
from .models import Payment
from .policy import get_billing_policy, due_date_for
from .repositories import PaymentRepository


class PaymentService(BaseService):
    """Service for dormitory payments"""

    def __init__(self, policy: BillingPolicy = None):
        super().__init__()
        self.payment_repo = PaymentRepository()
        self.application_repo = ApplicationRepository()
        self.policy = policy or get_billing_policy()

    def create_payment(self, data: PaymentDTO) -> Payment:
        """
        Create a pending payment for an application and billing period.

        Args:
            data: Application id, amount, period, due date, notes

        Returns:
            Created Payment with status pending

        Raises:
            ValidationError: If the amount or period is invalid
            NotFoundError: If the application doesn't exist
            DuplicatePeriodError: If a payment for (application, period) exists
        """
        amount = PaymentValidator.validate_amount(data.amount)
        PaymentValidator.validate_period(data.period)

        application = self.application_repo.get_by_id(data.application_id)
        if not application:
            raise NotFoundError(resource_type="Application", resource_id=data.application_id)

        if self.payment_repo.for_period(application.id, data.period):
            raise DuplicatePeriodError(details={'application_id': application.id, 'period': data.period})

        try:
            with transaction.atomic():
                # Serializes with application deletion
                if not self.application_repo.get_for_update(application.id):
                    raise NotFoundError(resource_type="Application", resource_id=application.id)
                payment = self.payment_repo.create(
                    application=application,
                    amount=amount,
                    period=data.period,
                    status=PaymentStatus.PENDING,
                    due_date=data.due_date,
                    notes=data.notes or '',
                )
        except IntegrityError as e:
            # Lost the race against a concurrent insert for the same period
            raise DuplicatePeriodError(details={'application_id': application.id, 'period': data.period}) from e

        self.log_info("Payment created", payment_id=payment.id, application_id=application.id, period=data.period)
        return payment

    def create_first_payment(self, application_id, today: Optional[date] = None) -> Optional[Payment]:
        """
        Bill the current month for a freshly approved application.
        Returns None when the policy disables auto-creation.
        """
        if not self.policy.auto_create_on_approval:
            return None

        today = today or timezone.localdate()
        return self.create_payment(PaymentDTO(
            application_id=application_id,
            amount=self.policy.default_amount,
            period=period_for(today),
            due_date=due_date_for(today, self.policy.default_due_day),
            notes="Automatically created on approval",
        ))

    def get_payment(self, payment_id) -> Payment:
        payment = self.payment_repo.find(payment_id)
        if not payment:
            raise NotFoundError(resource_type="Payment", resource_id=payment_id)
        return payment

    def list_all(self) -> List[Payment]:
        return list(self.payment_repo.get_queryset())

    def list_by_user(self, user_id) -> List[Payment]:
        return list(self.payment_repo.by_user(user_id))

    def list_by_room(self, room_id) -> List[Payment]:
        return list(self.payment_repo.by_room(room_id))

    def list_by_application(self, application_id) -> List[Payment]:
        return list(self.payment_repo.by_application(application_id))

    def list_by_status(self, status: str) -> List[Payment]:
        PaymentValidator.validate_status(status)
        return list(self.payment_repo.by_status(status))

    def search_by_index(self, prefix: str, status: Optional[str] = None) -> List[Payment]:
        if status:
            PaymentValidator.validate_status(status)
        return list(self.payment_repo.search_by_index(prefix or '', status))

    def update_payment(self, payment_id, patch: PaymentPatchDTO) -> Payment:
        """
        Partial update of a payment.

        Raises:
            NotFoundError: If the payment doesn't exist
            ValidationError: If amount, period or status is invalid
            DuplicatePeriodError: If the new period is already billed
        """
        with transaction.atomic():
            payment = self.payment_repo.get_for_update(payment_id)
            if not payment:
                raise NotFoundError(resource_type="Payment", resource_id=payment_id)

            changes = {}
            if patch.amount is not None:
                changes['amount'] = PaymentValidator.validate_amount(patch.amount)
            if patch.period is not None and patch.period != payment.period:
                PaymentValidator.validate_period(patch.period)
                if self.payment_repo.for_period(payment.application_id, patch.period):
                    raise DuplicatePeriodError(
                        details={'application_id': payment.application_id, 'period': patch.period}
                    )
                changes['period'] = patch.period
            if patch.status is not None:
                PaymentValidator.validate_status(patch.status)
                changes['status'] = patch.status
                if patch.status == PaymentStatus.PAID and payment.paid_at is None:
                    changes['paid_at'] = timezone.now()
                elif patch.status != PaymentStatus.PAID:
                    changes['paid_at'] = None
            if patch.due_date is not None:
                changes['due_date'] = patch.due_date
            if patch.notes is not None:
                changes['notes'] = patch.notes

            if changes:
                try:
                    with transaction.atomic():
                        self.payment_repo.update(payment, **changes)
                except IntegrityError as e:
                    raise DuplicatePeriodError(
                        details={'application_id': payment.application_id, 'period': changes.get('period')}
                    ) from e

        self.log_info("Payment updated", payment_id=payment.id, fields=sorted(changes))
        return payment

    def mark_paid(self, payment_id, paid_at=None) -> Payment:
        """Mark a payment paid; ``paid_at`` defaults to now"""
        with transaction.atomic():
            payment = self.payment_repo.get_for_update(payment_id)
            if not payment:
                raise NotFoundError(resource_type="Payment", resource_id=payment_id)
            self.payment_repo.update(payment, status=PaymentStatus.PAID, paid_at=paid_at or timezone.now())

        self.log_info("Payment marked paid", payment_id=payment.id)
        return payment

    def mark_unpaid(self, payment_id) -> Payment:
        """Return a payment to pending and clear its paid timestamp"""
        with transaction.atomic():
            payment = self.payment_repo.get_for_update(payment_id)
            if not payment:
                raise NotFoundError(resource_type="Payment", resource_id=payment_id)
            self.payment_repo.update(payment, status=PaymentStatus.PENDING, paid_at=None)

        self.log_info("Payment marked unpaid", payment_id=payment.id)
        return payment

    def delete_payment(self, payment_id) -> None:
        payment = self.payment_repo.get_by_id(payment_id)
        if not payment or not self.payment_repo.delete(payment):
            raise NotFoundError(resource_type="Payment", resource_id=payment_id)
        self.log_info("Payment deleted", payment_id=payment_id)

    def sweep_overdue(self, today: Optional[date] = None) -> int:
        """
        Move every pending payment whose due date has passed to overdue.

        Returns:
            Number of payments updated
        """
        today = today or timezone.localdate()
        updated = self.payment_repo.mark_overdue(today)
        self.log_info("Overdue sweep finished", updated_count=updated, today=today.isoformat())
        return updated
