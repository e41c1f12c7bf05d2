"""
HTTP surface of the occupancy lifecycle, including the full
apply -> approve -> evict scenario.
"""
from decimal import Decimal

import pytest

from applications.models import Application
from audit.models import AuditLog
from occupancy.models import AcceptedApplication

YEAR = '2024/2025'


def _approve(client, application_id, academic_year=YEAR):
    return client.post('/api/occupancy/approve/', {
        'aplikacija_id': application_id, 'academic_year': academic_year,
    }, format='json')


def test_full_lifecycle(student_client, admin_client, api_client, student, room, single_room):
    # Student applies for two rooms
    first = student_client.post('/api/applications/', {
        'room_id': room.id, 'student_index_number': 'RA-15/2021', 'average_grade': '9.40',
    }, format='json')
    second = student_client.post('/api/applications/', {
        'room_id': single_room.id, 'student_index_number': 'RA-15/2021', 'average_grade': '9.40',
    }, format='json')
    assert first.status_code == 201 and second.status_code == 201

    # Administrator approves the first one
    approved = _approve(admin_client, first.data['id'])
    assert approved.status_code == 201
    record = approved.data['accepted_application']
    assert record['room'] == room.id
    assert record['academic_year'] == YEAR

    # The competing application is voided
    mine = student_client.get('/api/applications/my/').data['applications']
    assert {a['id']: a['is_active'] for a in mine} == {first.data['id']: False, second.data['id']: False}

    # Room status reflects the occupancy
    status = api_client.get(f'/api/internal/users/{student.id}/room-status')
    assert status.data == {'user_id': student.id, 'has_active_room': True}

    # A monthly payment was billed
    payments = student_client.get('/api/payments/my/')
    assert payments.data['count'] == 1

    # Eviction with a reason
    evicted = admin_client.post('/api/occupancy/evict/', {
        'user_id': student.id, 'reason': 'Lease terms violated',
    }, format='json')
    assert evicted.status_code == 200
    assert evicted.data['reason'] == 'Lease terms violated'

    status = api_client.get(f'/api/internal/users/{student.id}/room-status')
    assert status.data['has_active_room'] is False

    evictions = admin_client.get('/api/audit/logs/evictions/')
    assert evictions.data['count'] == 1
    assert evictions.data['evictions'][0]['metadata']['reason'] == 'Lease terms violated'


def test_billing_sweep_and_checkout_scenario(student_client, admin_client, api_client, student, room):
    applied = student_client.post('/api/applications/', {
        'room_id': room.id, 'student_index_number': 'RA-15/2021', 'average_grade': '8.60',
    }, format='json')
    assert _approve(admin_client, applied.data['id']).status_code == 201

    # March is billed with a due date long past
    billed = admin_client.post('/api/payments/', {
        'application_id': applied.data['id'], 'amount': '150.00', 'period': '2025-03', 'due_date': '2025-03-10',
    }, format='json')
    assert billed.status_code == 201
    assert billed.data['status'] == 'pending'

    swept = admin_client.post('/api/payments/sweep-overdue/')
    assert swept.data['updated_count'] >= 1
    march = student_client.get(f"/api/payments/{billed.data['id']}/")
    assert march.data['status'] == 'overdue'

    assert student_client.post('/api/occupancy/checkout/').status_code == 200

    status = api_client.get(f'/api/internal/users/{student.id}/room-status')
    assert status.data == {'user_id': student.id, 'has_active_room': False}
    # Billing history outlives the occupancy
    assert student_client.get(f"/api/payments/{billed.data['id']}/").data['status'] == 'overdue'


def test_approve_requires_admin(student_client, student, room, make_application):
    application = make_application(student, room)

    response = _approve(student_client, application.id)

    assert response.status_code == 403
    assert not AcceptedApplication.objects.exists()


def test_approve_unknown_application_is_bad_request(admin_client, db):
    response = _approve(admin_client, 987654)

    assert response.status_code == 400
    assert response.data['code'] == 'NOT_FOUND'


@pytest.mark.parametrize('setup,code', [
    ('inactive', 'APPLICATION_INACTIVE'),
    ('occupying', 'USER_ALREADY_OCCUPYING'),
    ('full', 'ROOM_FULL'),
])
def test_approve_rejections(admin_client, student, other_student, single_room, room, make_application, setup, code):
    if setup == 'inactive':
        application = make_application(student, room, is_active=False)
    elif setup == 'occupying':
        AcceptedApplication.objects.create(
            user=student, room=single_room, student_index_number='X',
            average_grade=Decimal('8'), academic_year=YEAR,
        )
        application = make_application(student, room)
    else:
        AcceptedApplication.objects.create(
            user=other_student, room=single_room, student_index_number='X',
            average_grade=Decimal('8'), academic_year=YEAR,
        )
        application = make_application(student, single_room)

    response = _approve(admin_client, application.id)

    assert response.status_code == 400
    assert response.data['code'] == code


def test_approve_invalid_body(admin_client, db):
    response = admin_client.post('/api/occupancy/approve/', {'academic_year': YEAR}, format='json')

    assert response.status_code == 400
    assert response.data['code'] == 'VALIDATION_ERROR'


def test_evict_user_without_room(admin_client, student):
    response = admin_client.post('/api/occupancy/evict/', {'user_id': student.id, 'reason': 'x'}, format='json')

    assert response.status_code == 400
    assert response.data['code'] == 'NO_ACTIVE_ROOM'


def test_checkout(student_client, admin_client, student, room, make_application):
    application = make_application(student, room)
    _approve(admin_client, application.id)

    response = student_client.post('/api/occupancy/checkout/')
    assert response.status_code == 200
    assert AuditLog.objects.filter(action=AuditLog.ACTION_VACATE, metadata__kind='checkout').count() == 1

    again = student_client.post('/api/occupancy/checkout/')
    assert again.status_code == 400
    assert again.data['code'] == 'NO_ACTIVE_ROOM'


def test_admin_delete_accepted_application(admin_client, student, room, make_application):
    application = make_application(student, room)
    record_id = _approve(admin_client, application.id).data['accepted_application']['id']

    response = admin_client.delete(f'/api/occupancy/{record_id}/')
    assert response.status_code == 200
    assert not AcceptedApplication.objects.filter(id=record_id).exists()

    missing = admin_client.delete(f'/api/occupancy/{record_id}/')
    assert missing.status_code == 404


def test_retrieve_scoped_to_owner(student_client, other_client, admin_client, student, room, make_application):
    application = make_application(student, room)
    record_id = _approve(admin_client, application.id).data['accepted_application']['id']

    assert student_client.get(f'/api/occupancy/{record_id}/').status_code == 200
    assert other_client.get(f'/api/occupancy/{record_id}/').status_code == 403
    assert admin_client.get(f'/api/occupancy/{record_id}/').status_code == 200


def test_list_queries(admin_client, student, other_student, room, make_application):
    for user in (student, other_student):
        _approve(admin_client, make_application(user, room).id)

    assert admin_client.get('/api/occupancy/').data['count'] == 2
    assert admin_client.get(f'/api/occupancy/room/{room.id}/').data['count'] == 2
    by_year = admin_client.get('/api/occupancy/academic-year/', {'academic_year': YEAR})
    assert by_year.data['count'] == 2
    assert admin_client.get('/api/occupancy/academic-year/').status_code == 400


def test_top_students_endpoint(student_client, admin_client, student, other_student, room, make_application):
    _approve(admin_client, make_application(student, room, grade='7.50').id)
    _approve(admin_client, make_application(other_student, room, grade='9.90').id)

    response = student_client.get('/api/occupancy/top-students/', {'limit': 1})

    assert response.status_code == 200
    assert response.data['limit'] == 1
    assert response.data['count'] == 1
    assert response.data['top_students'][0]['user'] == other_student.id


def test_deleted_source_application_does_not_free_bed(admin_client, student, other_student, single_room,
                                                       make_application):
    application = make_application(student, single_room)
    _approve(admin_client, application.id)
    Application.objects.filter(id=application.id).delete()

    response = _approve(admin_client, make_application(other_student, single_room).id)

    assert response.status_code == 400
    assert response.data['code'] == 'ROOM_FULL'
