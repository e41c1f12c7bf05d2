"""
Shared fixtures: users in both roles, authenticated API clients and a
small room registry.
"""
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from applications.models import Application
from core.constants import UserRole
from dormitories.models import Dormitory, Room
from users.models import User


@pytest.fixture
def api_client():
    """Unauthenticated client"""
    return APIClient()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(username='admin', password='admin-pass-123', role=UserRole.ADMIN)


@pytest.fixture
def student(db):
    return User.objects.create_user(username='marko', password='student-pass-123', role=UserRole.STUDENT)


@pytest.fixture
def other_student(db):
    return User.objects.create_user(username='jovana', password='student-pass-456', role=UserRole.STUDENT)


def _client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def admin_client(admin_user):
    return _client_for(admin_user)


@pytest.fixture
def student_client(student):
    return _client_for(student)


@pytest.fixture
def other_client(other_student):
    return _client_for(other_student)


@pytest.fixture
def dormitory(db):
    return Dormitory.objects.create(name='Dom Studenata Sava', address='Bulevar 12, Beograd')


@pytest.fixture
def room(dormitory):
    """Two-bed room"""
    return Room.objects.create(dormitory=dormitory, number='101', capacity=2, amenities=['window', 'wardrobe'])


@pytest.fixture
def single_room(dormitory):
    """One-bed room"""
    return Room.objects.create(dormitory=dormitory, number='102', capacity=1)


@pytest.fixture
def make_application(db):
    """Factory for active applications"""
    counter = {'n': 0}

    def _make(user, room, grade='8.50', index_number=None, **extra):
        counter['n'] += 1
        return Application.objects.create(
            user=user,
            room=room,
            student_index_number=index_number or f"RA-{counter['n']:03d}/2021",
            average_grade=Decimal(grade),
            is_active=extra.pop('is_active', True),
            **extra
        )

    return _make
