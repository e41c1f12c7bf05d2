"""
Billing policy - payment defaults applied when an approval creates the
first payment.
"""
import calendar
from datetime import date
from decimal import Decimal

from django.conf import settings

from core.constants import DefaultLimits
from core.dto import BillingPolicy


def get_billing_policy() -> BillingPolicy:
    """Build the policy from the DORM_PAYMENTS setting"""
    config = getattr(settings, 'DORM_PAYMENTS', {})
    return BillingPolicy(
        default_amount=Decimal(str(config.get('DEFAULT_AMOUNT', DefaultLimits.PAYMENT_DEFAULT_AMOUNT))),
        default_due_day=int(config.get('DEFAULT_DUE_DAY', DefaultLimits.PAYMENT_DEFAULT_DUE_DAY)),
        auto_create_on_approval=bool(config.get('AUTO_CREATE_ON_APPROVAL', True)),
    )


def due_date_for(day: date, due_day: int) -> date:
    """Due date in the month of ``day``, clamped to the month's last day"""
    last_day = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=min(max(due_day, 1), last_day))
