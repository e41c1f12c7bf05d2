from datetime import date
from decimal import Decimal

import pytest

from applications.models import Application
from applications.services import ApplicationService
from core.constants import DeactivationReason, PaymentStatus
from core.dto import ApplicationDTO, ApplicationPatchDTO, PaymentDTO
from core.exceptions import (
    DuplicateActiveError, PermissionDeniedError, RoomNotFoundError,
    ValidationError, AlreadyAcceptedError, UserAlreadyOccupyingError,
    ApplicationHasPaymentsError,
)
from occupancy.models import AcceptedApplication
from occupancy.services import ApprovalService
from payments.models import Payment
from payments.services import PaymentService


@pytest.fixture
def service():
    return ApplicationService()


def test_create_application(service, student, room):
    application = service.create_application(
        student, ApplicationDTO(room_id=room.id, student_index_number=' RA-1/2021 ', average_grade=Decimal('9.10'))
    )

    assert application.is_active
    assert application.deactivation_reason is None
    assert application.student_index_number == 'RA-1/2021'
    assert application.room_id == room.id


def test_create_duplicate_active_for_same_room(service, student, room, make_application):
    make_application(student, room)

    with pytest.raises(DuplicateActiveError):
        service.create_application(
            student, ApplicationDTO(room_id=room.id, student_index_number='RA-1/2021', average_grade=Decimal('8'))
        )


def test_create_allowed_when_previous_is_inactive(service, student, room, make_application):
    make_application(student, room, is_active=False)

    application = service.create_application(
        student, ApplicationDTO(room_id=room.id, student_index_number='RA-1/2021', average_grade=Decimal('8'))
    )
    assert application.is_active


def test_create_for_unknown_room(service, student, db):
    with pytest.raises(RoomNotFoundError):
        service.create_application(
            student, ApplicationDTO(room_id=9999, student_index_number='RA-1/2021', average_grade=Decimal('8'))
        )


@pytest.mark.parametrize('grade', ['5.99', '10.01', 'abc'])
def test_create_rejects_grade_off_scale(service, student, room, grade):
    with pytest.raises(ValidationError):
        service.create_application(
            student, ApplicationDTO(room_id=room.id, student_index_number='RA-1/2021', average_grade=grade)
        )


def test_update_by_other_user_is_forbidden(service, student, other_student, room, make_application):
    application = make_application(student, room)

    with pytest.raises(PermissionDeniedError):
        service.update_application(application.id, other_student, ApplicationPatchDTO(average_grade=Decimal('9')))


def test_update_by_admin_is_forbidden(service, student, admin_user, room, make_application):
    application = make_application(student, room)

    with pytest.raises(PermissionDeniedError):
        service.update_application(application.id, admin_user, ApplicationPatchDTO(is_active=False))


def test_owner_withdraws_application(service, student, room, make_application):
    application = make_application(student, room)

    updated = service.update_application(application.id, student, ApplicationPatchDTO(is_active=False))

    assert not updated.is_active
    assert updated.deactivation_reason is None


def test_reactivating_accepted_application_fails(service, student, room, make_application):
    application = make_application(student, room, is_active=False, deactivation_reason=DeactivationReason.ACCEPTED)
    AcceptedApplication.objects.create(
        application=application, user=student, room=room,
        student_index_number=application.student_index_number,
        average_grade=application.average_grade, academic_year='2024/2025',
    )

    with pytest.raises(AlreadyAcceptedError):
        service.update_application(application.id, student, ApplicationPatchDTO(is_active=True))


def test_reactivating_into_duplicate_fails(service, student, room, make_application):
    withdrawn = make_application(student, room, is_active=False)
    make_application(student, room)

    with pytest.raises(DuplicateActiveError):
        service.update_application(withdrawn.id, student, ApplicationPatchDTO(is_active=True))


def test_delete_by_other_student_is_forbidden(service, student, other_student, room, make_application):
    application = make_application(student, room)

    with pytest.raises(PermissionDeniedError):
        service.delete_application(application.id, other_student)
    assert Application.objects.filter(id=application.id).exists()


def test_admin_deletes_any_application(service, student, admin_user, room, make_application):
    application = make_application(student, room)

    service.delete_application(application.id, admin_user)

    assert not Application.objects.filter(id=application.id).exists()


# ============================================================================
# HTTP
# ============================================================================

def test_api_create_application(student_client, room):
    response = student_client.post('/api/applications/', {
        'room_id': room.id, 'student_index_number': 'RA-7/2022', 'average_grade': '8.75',
    }, format='json')

    assert response.status_code == 201
    assert response.data['is_active'] is True
    assert response.data['room_number'] == '101'


def test_api_create_duplicate_returns_400(student_client, student, room, make_application):
    make_application(student, room)

    response = student_client.post('/api/applications/', {
        'room_id': room.id, 'student_index_number': 'RA-7/2022', 'average_grade': '8.75',
    }, format='json')

    assert response.status_code == 400
    assert response.data['code'] == 'DUPLICATE_ACTIVE'


def test_api_create_for_unknown_room_returns_400(student_client, db):
    response = student_client.post('/api/applications/', {
        'room_id': 4242, 'student_index_number': 'RA-7/2022', 'average_grade': '8.75',
    }, format='json')

    assert response.status_code == 400
    assert response.data['code'] == 'ROOM_NOT_FOUND'


def test_api_create_invalid_grade(student_client, room):
    response = student_client.post('/api/applications/', {
        'room_id': room.id, 'student_index_number': 'RA-7/2022', 'average_grade': '11',
    }, format='json')

    assert response.status_code == 400
    assert response.data['code'] == 'VALIDATION_ERROR'
    assert 'average_grade' in response.data['details']


def test_api_list_scoped_by_role(student_client, admin_client, student, other_student, room, make_application):
    make_application(student, room)
    make_application(other_student, room)

    own = student_client.get('/api/applications/')
    everything = admin_client.get('/api/applications/')

    assert own.data['count'] == 1
    assert everything.data['count'] == 2


def test_api_retrieve_foreign_application_forbidden(other_client, student, room, make_application):
    application = make_application(student, room)

    response = other_client.get(f'/api/applications/{application.id}/')

    assert response.status_code == 403
    assert response.data['code'] == 'FORBIDDEN'


def test_api_retrieve_missing_application(student_client, db):
    response = student_client.get('/api/applications/999/')

    assert response.status_code == 404


def test_api_patch_foreign_application_forbidden(other_client, student, room, make_application):
    application = make_application(student, room)

    response = other_client.patch(f'/api/applications/{application.id}/', {'average_grade': '9.00'}, format='json')

    assert response.status_code == 403


def test_api_admin_delete(admin_client, student, room, make_application):
    application = make_application(student, room)

    response = admin_client.delete(f'/api/applications/{application.id}/')

    assert response.status_code == 200
    assert not Application.objects.filter(id=application.id).exists()


def test_api_by_room_requires_admin(student_client, admin_client, student, room, make_application):
    make_application(student, room)

    assert student_client.get(f'/api/applications/room/{room.id}/').status_code == 403
    response = admin_client.get(f'/api/applications/room/{room.id}/')
    assert response.status_code == 200
    assert response.data['count'] == 1


def test_api_requires_authentication(api_client, db):
    response = api_client.get('/api/applications/')

    assert response.status_code == 401


def test_api_admin_cannot_file_application(admin_client, room):
    response = admin_client.post('/api/applications/', {
        'room_id': room.id, 'student_index_number': 'RA-7/2022', 'average_grade': '8.75',
    }, format='json')

    assert response.status_code == 403


def test_resident_cannot_delete_billed_application(student_client, student, room, make_application):
    application = make_application(student, room)
    ApprovalService().approve(application.id, '2024/2025')
    payments = PaymentService()
    payments.create_payment(PaymentDTO(
        application_id=application.id, amount=Decimal('120.00'), period='2025-03', due_date=date(2025, 3, 10),
    ))
    payments.sweep_overdue(today=date(2025, 4, 1))

    response = student_client.delete(f'/api/applications/{application.id}/')

    assert response.status_code == 400
    assert response.data['code'] == 'APPLICATION_HAS_PAYMENTS'
    assert Application.objects.filter(id=application.id).exists()
    assert Payment.objects.filter(application=application).count() == 2
    assert Payment.objects.get(application=application, period='2025-03').status == PaymentStatus.OVERDUE


def test_admin_cannot_delete_billed_application(service, student, admin_user, room, make_application):
    application = make_application(student, room)
    PaymentService().create_payment(PaymentDTO(
        application_id=application.id, amount=Decimal('120.00'), period='2025-03', due_date=date(2025, 3, 10),
    ))

    with pytest.raises(ApplicationHasPaymentsError):
        service.delete_application(application.id, admin_user)
    assert Payment.objects.filter(application=application).count() == 1


def test_billed_application_deletable_once_payments_removed(service, student, room, make_application):
    application = make_application(student, room)
    payments = PaymentService()
    payment = payments.create_payment(PaymentDTO(
        application_id=application.id, amount=Decimal('120.00'), period='2025-03', due_date=date(2025, 3, 10),
    ))
    payments.delete_payment(payment.id)

    service.delete_application(application.id, student)

    assert not Application.objects.filter(id=application.id).exists()


def test_occupying_user_cannot_reactivate_voided_application(service, student, room, single_room, make_application):
    chosen = make_application(student, room)
    competing = make_application(student, single_room)
    ApprovalService().approve(chosen.id, '2024/2025')

    with pytest.raises(UserAlreadyOccupyingError):
        service.update_application(competing.id, student, ApplicationPatchDTO(is_active=True))

    competing.refresh_from_db()
    assert not competing.is_active
    assert competing.deactivation_reason == DeactivationReason.VOIDED
    assert not any(a.is_active for a in service.list_by_user(student.id))


def test_reactivation_allowed_after_checkout(service, student, room, single_room, make_application):
    chosen = make_application(student, room)
    competing = make_application(student, single_room)
    approvals = ApprovalService()
    approvals.approve(chosen.id, '2024/2025')
    approvals.checkout(student)

    reactivated = service.update_application(competing.id, student, ApplicationPatchDTO(is_active=True))

    assert reactivated.is_active
    assert reactivated.deactivation_reason is None
