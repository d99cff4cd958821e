import pytest
from django.urls import reverse
from redis.exceptions import RedisError
from rest_framework.test import APIClient

from records.exceptions import api_exception_handler
from records.models import AuditEvent
from records.views import health

pytestmark = pytest.mark.django_db

PASSWORD = 'Sf#2024-maternite'


def login(client, username, password=PASSWORD):
    return client.post(reverse('login_view'), {'username': username, 'password': password}, format='json')


def test_login_returns_jwt_and_legacy_token(midwife):
    r = login(APIClient(), 'sagefemme')
    assert r.status_code == 200
    assert r.data['token']
    assert r.data['jwt_access'] and r.data['jwt_refresh']
    assert r.data['role'] == 'nurse'
    assert [d['slug'] for d in r.data['user']['departments']] == ['maternite']


def test_no_role_bypass_in_login(midwife):
    client = APIClient()
    r = client.post(reverse('login_view'),
                    {'username': 'sagefemme', 'password': PASSWORD, 'role': 'admin'}, format='json')
    assert r.status_code == 200
    assert r.data['role'] == 'nurse'
    midwife.refresh_from_db()
    assert midwife.role == 'nurse'


def test_wrong_password_is_rejected_and_audited(midwife):
    r = login(APIClient(), 'sagefemme', 'nope')
    assert r.status_code == 400
    assert r.data['ok'] is False
    event = AuditEvent.objects.get(action='login')
    assert event.detail['result'] == 'fail'
    assert event.detail['username'] == 'sagefemme'


def test_inactive_account_cannot_log_in(midwife):
    midwife.is_active = False
    midwife.save()
    r = login(APIClient(), 'sagefemme')
    assert r.status_code == 403
    assert 'désactivé' in r.data['detail']


def test_token_and_jwt_both_authenticate(midwife):
    r = login(APIClient(), 'sagefemme')
    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Token {r.data['token']}")
    assert c.get(reverse('me')).data['data']['username'] == 'sagefemme'
    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['jwt_access']}")
    assert c.get(reverse('me')).status_code == 200


def test_anonymous_requests_are_refused():
    r = APIClient().get('/api/maternity/appointments')
    assert r.status_code == 401
    assert r.data['ok'] is False
    assert r.data['error']['code'] == 'unauthorized'


def test_department_isolation(midwife, doctor, client_for):
    r = client_for(doctor).get('/api/maternity/deliveries')
    assert r.status_code == 403
    assert r.data['error']['code'] == 'forbidden'
    assert client_for(midwife).get('/api/medicine/hospitalizations').status_code == 403
    assert client_for(midwife).get('/api/maternity/deliveries').status_code == 200
    assert client_for(doctor).get('/api/medicine/hospitalizations').status_code == 200


def test_admin_opens_every_department(admin_user, client_for):
    client = client_for(admin_user)
    assert client.get('/api/maternity/prenatal').status_code == 200
    assert client.get('/api/medicine/hospitalizations').status_code == 200


def test_refresh_and_logout_blacklists(midwife):
    client = APIClient()
    r = login(client, 'sagefemme')
    refresh = r.data['jwt_refresh']
    rr = client.post(reverse('jwt_refresh_view'), {'refresh': refresh}, format='json')
    assert rr.status_code == 200
    assert rr.data['jwt_access']

    client.credentials(HTTP_AUTHORIZATION=f"Token {r.data['token']}")
    out = client.post(reverse('jwt_logout_view'), {}, format='json')
    assert out.status_code == 200
    assert out.data['blacklisted'] >= 1

    client.credentials()
    assert client.post(reverse('jwt_refresh_view'), {'refresh': refresh}, format='json').status_code == 401
    client.credentials(HTTP_AUTHORIZATION=f"Token {r.data['token']}")
    assert client.get(reverse('me')).status_code == 401


def test_logout_cannot_revoke_someone_elses_token(midwife, doctor):
    other = login(APIClient(), 'medecin')
    client = APIClient()
    mine = login(client, 'sagefemme')
    client.credentials(HTTP_AUTHORIZATION=f"Token {mine.data['token']}")
    r = client.post(reverse('jwt_logout_view'), {'refresh': other.data['jwt_refresh']}, format='json')
    assert r.status_code == 403
    # the other user's session keeps working
    rr = APIClient().post(reverse('jwt_refresh_view'), {'refresh': other.data['jwt_refresh']}, format='json')
    assert rr.status_code == 200
    # revoking one's own token is allowed
    r = client.post(reverse('jwt_logout_view'), {'refresh': mine.data['jwt_refresh']}, format='json')
    assert r.status_code == 200
    assert r.data['blacklisted'] == 1


def test_healthz_is_public():
    r = APIClient().get('/healthz')
    assert r.status_code == 200
    body = r.json()
    assert body['ok'] is True
    assert body['db'] is True
    assert body['cache'] is True


def test_healthz_reports_cache_outage(monkeypatch):
    class DownCache:
        def set(self, *args, **kwargs):
            raise RedisError('connection refused')

        def get(self, *args, **kwargs):
            raise RedisError('connection refused')

    monkeypatch.setattr(health, 'cache', DownCache())
    r = APIClient().get('/healthz')
    assert r.status_code == 503
    body = r.json()
    assert body['ok'] is False
    assert body['db'] is True
    assert body['cache'] is False


def test_markup_is_stripped_from_free_text(midwife, client_for):
    r = client_for(midwife).post('/api/maternity/deliveries',
                                 {'fullName': '<script>x</script>Mariama', 'observations': '<b>RAS</b>'},
                                 format='json')
    assert r.status_code == 201
    assert r.data['data']['fullName'] == 'xMariama'
    assert r.data['data']['observations'] == 'RAS'


def test_unhandled_error_hides_internal_detail(caplog):
    with caplog.at_level('ERROR', logger='records.exceptions'):
        r = api_exception_handler(RuntimeError('password=hunter2 at db-host'), {'view': None})
    assert r.status_code == 500
    assert r.data['error']['code'] == 'server_error'
    assert r.data['error']['message'] == 'Erreur interne du serveur'
    assert 'hunter2' not in str(r.data)
    assert 'hunter2' in caplog.text
