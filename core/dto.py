"""
Data Transfer Objects (DTOs).
Used for passing data between layers without exposing domain models.
"""
from dataclasses import dataclass
from typing import Optional
from decimal import Decimal
from datetime import date


@dataclass
class ApplicationDTO:
    """Data Transfer Object for a new Application"""
    room_id: int = None
    student_index_number: str = ""
    average_grade: Decimal = None


@dataclass
class ApplicationPatchDTO:
    """Partial update for an Application; None means leave unchanged"""
    student_index_number: Optional[str] = None
    average_grade: Optional[Decimal] = None
    is_active: Optional[bool] = None


@dataclass
class PaymentDTO:
    """Data Transfer Object for a new Payment"""
    application_id: int = None
    amount: Decimal = Decimal('0')
    period: str = ""
    due_date: date = None
    notes: str = ""


@dataclass
class PaymentPatchDTO:
    """Partial update for a Payment; None means leave unchanged"""
    amount: Optional[Decimal] = None
    period: Optional[str] = None
    status: Optional[str] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None


@dataclass
class BillingPolicy:
    """Payment defaults applied when an approval triggers billing"""
    default_amount: Decimal = Decimal('100.00')
    default_due_day: int = 15
    auto_create_on_approval: bool = True


@dataclass
class ReconciliationReport:
    """Outcome of one reconciliation pass"""
    stale_source_applications: int = 0
    stale_competing_applications: int = 0
    repaired: int = 0
    dry_run: bool = False
