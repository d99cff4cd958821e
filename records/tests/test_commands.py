import io

import pytest
from django.contrib.auth import authenticate
from django.core.cache import cache
from django.core.management import call_command

from records.models import Department, DepartmentMember, Diagnostic, User
from records.services.hospitalizations import DIAGNOSTICS_CACHE_KEY

pytestmark = pytest.mark.django_db


def run(*args, **kwargs):
    out = io.StringIO()
    call_command(*args, stdout=out, **kwargs)
    return out.getvalue()


def test_seed_departments_is_idempotent():
    first = run('seed_departments')
    assert 'departments: 9 created' in first
    assert Diagnostic.objects.filter(name='Paludisme').exists()
    again = run('seed_departments')
    assert 'departments: 0 created' in again
    assert 'diagnostics: 0 created' in again


def test_seed_departments_without_diagnostics():
    run('seed_departments', '--no-diagnostics')
    assert Department.objects.filter(slug='maternite').exists()
    assert not Diagnostic.objects.exists()


def test_ensure_test_users_resets_password():
    run('ensure_test_users')
    nurse = User.objects.get(username='sagefemme1')
    assert DepartmentMember.objects.filter(user=nurse, department__slug='maternite').exists()
    nurse.set_password('autre-chose-2025')
    nurse.is_active = False
    nurse.save()
    run('ensure_test_users', '--password', 'Moroni#2025')
    assert authenticate(username='sagefemme1', password='Moroni#2025') is not None
    assert authenticate(username='medecin1', password='Moroni#2025').role == 'doctor'


def test_refresh_caches_warms_diagnostics():
    Diagnostic.objects.create(name='Paludisme')
    out = run('refresh_caches')
    assert '1 entries' in out
    assert cache.get(DIAGNOSTICS_CACHE_KEY) == [{'id': Diagnostic.objects.get().id, 'name': 'Paludisme'}]
