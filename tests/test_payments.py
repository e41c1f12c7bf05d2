from datetime import date, timedelta
from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from audit.models import AuditLog
from core.constants import PaymentStatus
from core.dto import PaymentDTO, PaymentPatchDTO, BillingPolicy
from core.exceptions import DuplicatePeriodError, NotFoundError, ValidationError
from payments.models import Payment
from payments.policy import due_date_for, get_billing_policy
from payments.services import PaymentService


@pytest.fixture
def service():
    return PaymentService()


@pytest.fixture
def application(student, room, make_application):
    return make_application(student, room, index_number='RA-42/2020')


def _dto(application, period='2024-10', due=date(2024, 10, 15), amount='100.00'):
    return PaymentDTO(application_id=application.id, amount=Decimal(amount), period=period, due_date=due)


def test_create_payment_is_pending(service, application):
    payment = service.create_payment(_dto(application))

    assert payment.status == PaymentStatus.PENDING
    assert payment.paid_at is None
    assert payment.amount == Decimal('100.00')


def test_duplicate_period_rejected(service, application):
    service.create_payment(_dto(application))

    with pytest.raises(DuplicatePeriodError):
        service.create_payment(_dto(application, amount='50.00'))
    assert Payment.objects.count() == 1


def test_same_period_for_other_application(service, application, other_student, room, make_application):
    service.create_payment(_dto(application))
    other = make_application(other_student, room)

    service.create_payment(_dto(other))

    assert Payment.objects.filter(period='2024-10').count() == 2


def test_create_for_unknown_application(service, db):
    with pytest.raises(NotFoundError):
        service.create_payment(PaymentDTO(application_id=999, amount=Decimal('10'), period='2024-10',
                                          due_date=date(2024, 10, 15)))


@pytest.mark.parametrize('period', ['2024-13', '2024/10', '24-10', ''])
def test_create_rejects_bad_period(service, application, period):
    with pytest.raises(ValidationError):
        service.create_payment(_dto(application, period=period))


def test_negative_amount_rejected(service, application):
    with pytest.raises(ValidationError):
        service.create_payment(_dto(application, amount='-1'))


@pytest.mark.parametrize('amount', ['abc', 'NaN', None])
def test_non_numeric_amount_rejected(service, application, amount):
    with pytest.raises(ValidationError) as excinfo:
        service.create_payment(PaymentDTO(application_id=application.id, amount=amount, period='2024-10',
                                          due_date=date(2024, 10, 15)))

    assert excinfo.value.code == 'INVALID_PAYMENT_AMOUNT'
    assert not Payment.objects.exists()


def test_update_with_non_numeric_amount_rejected(service, application):
    payment = service.create_payment(_dto(application))

    with pytest.raises(ValidationError):
        service.update_payment(payment.id, PaymentPatchDTO(amount='twelve'))

    payment.refresh_from_db()
    assert payment.amount == Decimal('100.00')


def test_mark_paid_and_unpaid(service, application):
    payment = service.create_payment(_dto(application))

    paid = service.mark_paid(payment.id)
    assert paid.status == PaymentStatus.PAID
    assert paid.paid_at is not None

    unpaid = service.mark_unpaid(payment.id)
    assert unpaid.status == PaymentStatus.PENDING
    assert unpaid.paid_at is None


def test_mark_paid_with_explicit_timestamp(service, application):
    payment = service.create_payment(_dto(application))
    when = timezone.now() - timedelta(days=3)

    paid = service.mark_paid(payment.id, paid_at=when)

    assert paid.paid_at == when


def test_sweep_overdue(service, application, other_student, room, make_application):
    today = date(2024, 10, 20)
    late = service.create_payment(_dto(application, period='2024-09', due=date(2024, 10, 19)))
    due_today = service.create_payment(_dto(application, period='2024-10', due=today))
    settled = service.create_payment(_dto(application, period='2024-08', due=date(2024, 8, 15)))
    service.mark_paid(settled.id)

    updated = service.sweep_overdue(today=today)

    assert updated == 1
    late.refresh_from_db()
    due_today.refresh_from_db()
    settled.refresh_from_db()
    assert late.status == PaymentStatus.OVERDUE
    assert due_today.status == PaymentStatus.PENDING
    assert settled.status == PaymentStatus.PAID


def test_search_by_index_prefix_case_insensitive(service, application, other_student, room, make_application):
    service.create_payment(_dto(application))
    other = make_application(other_student, room, index_number='SI-7/2021')
    service.create_payment(_dto(other))

    results = service.search_by_index('ra-4')
    assert [p.application_id for p in results] == [application.id]

    assert service.search_by_index('ra-4', status=PaymentStatus.PAID) == []


def test_list_by_status_validates(service, db):
    with pytest.raises(ValidationError):
        service.list_by_status('cancelled')


def test_update_payment_status_controls_paid_at(service, application):
    payment = service.create_payment(_dto(application))

    paid = service.update_payment(payment.id, PaymentPatchDTO(status=PaymentStatus.PAID))
    assert paid.paid_at is not None

    overdue = service.update_payment(payment.id, PaymentPatchDTO(status=PaymentStatus.OVERDUE, notes='late'))
    assert overdue.paid_at is None
    assert overdue.notes == 'late'


def test_update_payment_into_billed_period(service, application):
    service.create_payment(_dto(application, period='2024-09'))
    payment = service.create_payment(_dto(application, period='2024-10'))

    with pytest.raises(DuplicatePeriodError):
        service.update_payment(payment.id, PaymentPatchDTO(period='2024-09'))


def test_delete_payment(service, application):
    payment = service.create_payment(_dto(application))

    service.delete_payment(payment.id)

    with pytest.raises(NotFoundError):
        service.delete_payment(payment.id)


def test_first_payment_respects_policy(application):
    disabled = PaymentService(policy=BillingPolicy(auto_create_on_approval=False))
    assert disabled.create_first_payment(application.id) is None

    custom = PaymentService(policy=BillingPolicy(default_amount=Decimal('250.00'), default_due_day=31))
    payment = custom.create_first_payment(application.id, today=date(2024, 2, 10))
    assert payment.amount == Decimal('250.00')
    assert payment.period == '2024-02'
    assert payment.due_date == date(2024, 2, 29)


def test_billing_policy_from_settings(settings):
    settings.DORM_PAYMENTS = {'DEFAULT_AMOUNT': '80.50', 'DEFAULT_DUE_DAY': 5, 'AUTO_CREATE_ON_APPROVAL': False}

    policy = get_billing_policy()

    assert policy.default_amount == Decimal('80.50')
    assert policy.default_due_day == 5
    assert policy.auto_create_on_approval is False


def test_due_date_clamped_to_month_end():
    assert due_date_for(date(2023, 2, 1), 30) == date(2023, 2, 28)
    assert due_date_for(date(2024, 4, 1), 15) == date(2024, 4, 15)


# ============================================================================
# MANAGEMENT COMMAND
# ============================================================================

def test_sweep_command(service, application):
    yesterday = timezone.localdate() - timedelta(days=1)
    service.create_payment(_dto(application, period='2024-01', due=yesterday))
    out = StringIO()

    call_command('sweep_overdue_payments', stdout=out)

    assert 'Payments marked overdue: 1' in out.getvalue()
    assert Payment.objects.get().status == PaymentStatus.OVERDUE
    assert AuditLog.objects.filter(action=AuditLog.ACTION_SWEEP).count() == 1


# ============================================================================
# HTTP
# ============================================================================

def test_api_create_and_duplicate(admin_client, application):
    body = {'application_id': application.id, 'amount': '120.00', 'period': '2024-11', 'due_date': '2024-11-15'}

    created = admin_client.post('/api/payments/', body, format='json')
    duplicate = admin_client.post('/api/payments/', body, format='json')

    assert created.status_code == 201
    assert created.data['status'] == PaymentStatus.PENDING
    assert duplicate.status_code == 400
    assert duplicate.data['code'] == 'DUPLICATE_PERIOD'


def test_api_student_cannot_create(student_client, application):
    body = {'application_id': application.id, 'amount': '120.00', 'period': '2024-11', 'due_date': '2024-11-15'}

    assert student_client.post('/api/payments/', body, format='json').status_code == 403


def test_api_mark_paid_and_unpaid(admin_client, service, application):
    payment = service.create_payment(_dto(application))

    paid = admin_client.post(f'/api/payments/{payment.id}/mark-paid/', {}, format='json')
    assert paid.status_code == 200
    assert paid.data['status'] == PaymentStatus.PAID
    assert paid.data['paid_at'] is not None

    unpaid = admin_client.post(f'/api/payments/{payment.id}/mark-unpaid/')
    assert unpaid.data['status'] == PaymentStatus.PENDING
    assert unpaid.data['paid_at'] is None

    assert AuditLog.objects.filter(action=AuditLog.ACTION_PAY, resource_id=payment.id).count() == 2


def test_api_sweep_overdue(admin_client, service, application):
    service.create_payment(_dto(application, period='2020-01', due=date(2020, 1, 15)))

    response = admin_client.post('/api/payments/sweep-overdue/')

    assert response.status_code == 200
    assert response.data['updated_count'] == 1


def test_api_search_and_status(admin_client, service, application):
    service.create_payment(_dto(application))

    found = admin_client.get('/api/payments/search/', {'index': 'RA-42', 'status': 'pending'})
    assert found.data['count'] == 1

    by_status = admin_client.get('/api/payments/status/paid/')
    assert by_status.data['count'] == 0

    invalid = admin_client.get('/api/payments/status/cancelled/')
    assert invalid.status_code == 400
    assert invalid.data['code'] == 'INVALID_PAYMENT_STATUS'


def test_api_payment_scoped_to_owner(student_client, other_client, service, application):
    payment = service.create_payment(_dto(application))

    assert student_client.get(f'/api/payments/{payment.id}/').status_code == 200
    assert other_client.get(f'/api/payments/{payment.id}/').status_code == 403
    assert other_client.get(f'/api/payments/application/{application.id}/').status_code == 403
    assert student_client.get('/api/payments/my/').data['count'] == 1
