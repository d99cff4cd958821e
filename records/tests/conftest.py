import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from records.models import Department, DepartmentMember, User


@pytest.fixture(autouse=True)
def _clear_cache():
    # throttling counters and cached reference lists live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def departments(db):
    return {
        'maternite': Department.objects.create(slug='maternite', name='Maternité'),
        'medecine': Department.objects.create(slug='medecine', name='Médecine'),
    }


def _member(username, role, department=None):
    user = User.objects.create_user(username=username, password='Sf#2024-maternite', role=role)
    if department is not None:
        DepartmentMember.objects.create(user=user, department=department)
    return user


@pytest.fixture
def midwife(departments):
    return _member('sagefemme', 'nurse', departments['maternite'])


@pytest.fixture
def doctor(departments):
    return _member('medecin', 'doctor', departments['medecine'])


@pytest.fixture
def admin_user(departments):
    return _member('admin', 'admin')


@pytest.fixture
def client_for():
    def make(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return make
