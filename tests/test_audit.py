import pytest
from django.core.exceptions import PermissionDenied
from django.test import RequestFactory

from audit.helpers import log_action, get_client_ip
from audit.models import AuditLog


def _entry(user=None, **overrides):
    values = dict(
        user=user,
        action=AuditLog.ACTION_UPDATE,
        resource_type=AuditLog.RESOURCE_APPLICATION,
        resource_id=1,
        description="Updated application #1",
    )
    values.update(overrides)
    return log_action(**values)


def test_log_action_captures_request_metadata(admin_user):
    request = RequestFactory().post('/', HTTP_USER_AGENT='pytest', HTTP_X_FORWARDED_FOR='10.0.0.7, 10.0.0.1')

    entry = _entry(admin_user, request=request, metadata={'field': 'average_grade'})

    assert entry.ip_address == '10.0.0.7'
    assert entry.user_agent == 'pytest'
    assert entry.metadata == {'field': 'average_grade'}


def test_system_entries_have_no_user(db):
    entry = _entry(None)

    assert entry.user is None
    assert entry.user_display == 'System'


def test_entries_are_immutable(admin_user):
    entry = _entry(admin_user)

    entry.description = 'rewritten'
    with pytest.raises(PermissionDenied):
        entry.save()
    with pytest.raises(PermissionDenied):
        entry.delete()


def test_client_ip_falls_back_to_remote_addr():
    request = RequestFactory().get('/', REMOTE_ADDR='192.168.1.20')

    assert get_client_ip(request) == '192.168.1.20'


def test_audit_api_admin_only(admin_client, student_client, admin_user):
    _entry(admin_user)
    _entry(admin_user, action=AuditLog.ACTION_DELETE)

    assert student_client.get('/api/audit/logs/').status_code == 403

    response = admin_client.get('/api/audit/logs/', {'action': AuditLog.ACTION_DELETE})
    assert response.status_code == 200
    assert response.data['count'] == 1


def test_resource_trail(admin_client, admin_user):
    _entry(admin_user, resource_type=AuditLog.RESOURCE_PAYMENT, resource_id=12)
    _entry(admin_user, resource_type=AuditLog.RESOURCE_PAYMENT, resource_id=13)

    response = admin_client.get('/api/audit/logs/resource_trail/', {'resource_type': 'Payment', 'resource_id': '12'})
    assert response.data['count'] == 1

    invalid = admin_client.get('/api/audit/logs/resource_trail/', {'resource_type': 'Payment'})
    assert invalid.status_code == 400
