"""
Validation utilities and validators.
Centralized validation logic following single responsibility principle.
"""
import re
from datetime import date
from decimal import Decimal, InvalidOperation

from core.constants import Grade, PaymentStatus
from core.exceptions import ValidationError as AppValidationError

PERIOD_RE = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')
ACADEMIC_YEAR_RE = re.compile(r'^(\d{4})/(\d{4})$')


class ApplicationValidator:
    """Validates application fields"""

    @staticmethod
    def validate_average_grade(grade):
        """Validate the average grade is on the grading scale"""
        try:
            value = Decimal(str(grade))
        except (InvalidOperation, ValueError):
            value = None
        if value is not None and not value.is_finite():
            value = None
        if value is None or not (Grade.MIN <= value <= Grade.MAX):
            raise AppValidationError(
                message=f"Average grade must be between {Grade.MIN} and {Grade.MAX}",
                code="INVALID_GRADE",
                details={"grade": grade}
            )

    @staticmethod
    def validate_index_number(index_number: str):
        """Validate the student index number is present"""
        if not index_number or not str(index_number).strip():
            raise AppValidationError(
                message="Student index number is required",
                code="INVALID_INDEX_NUMBER"
            )


class OccupancyValidator:
    """Validates occupancy operations"""

    @staticmethod
    def validate_academic_year(academic_year: str):
        """Validate academic year of the form 2024/2025"""
        match = ACADEMIC_YEAR_RE.match(academic_year or '')
        if not match or int(match.group(2)) != int(match.group(1)) + 1:
            raise AppValidationError(
                message="Academic year must look like 2024/2025",
                code="INVALID_ACADEMIC_YEAR",
                details={"academic_year": academic_year}
            )


class PaymentValidator:
    """Validates payment-related operations"""

    @staticmethod
    def validate_amount(amount) -> Decimal:
        """Validate payment amount and return it as a Decimal"""
        try:
            value = Decimal(str(amount))
        except (InvalidOperation, ValueError):
            value = None
        if value is None or not value.is_finite():
            raise AppValidationError(
                message="Payment amount must be a number",
                code="INVALID_PAYMENT_AMOUNT",
                details={"amount": amount}
            )
        if value < 0:
            raise AppValidationError(
                message="Payment amount cannot be negative",
                code="INVALID_PAYMENT_AMOUNT"
            )
        if value > Decimal('9999999.99'):
            raise AppValidationError(
                message="Payment amount exceeds maximum allowed",
                code="PAYMENT_AMOUNT_TOO_LARGE"
            )
        return value

    @staticmethod
    def validate_period(period: str):
        """Validate billing period of the form YYYY-MM"""
        if not PERIOD_RE.match(period or ''):
            raise AppValidationError(
                message="Payment period must use the YYYY-MM format",
                code="INVALID_PERIOD",
                details={"period": period}
            )

    @staticmethod
    def validate_status(status: str):
        """Validate payment status value"""
        if status not in PaymentStatus.VALUES:
            raise AppValidationError(
                message="Invalid payment status. Valid values: pending, paid, overdue",
                code="INVALID_PAYMENT_STATUS",
                details={"status": status}
            )


def period_for(day: date) -> str:
    """Billing period containing the given day"""
    return day.strftime('%Y-%m')
