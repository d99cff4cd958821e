import datetime as dt
import io

import pytest
from django.utils import timezone
from openpyxl import load_workbook

from records.models import AuditEvent, MaternityAppointment
from records.services import localtime
from records.services.appointments import days_missed, display_status, missed_cutoff, status_rows

pytestmark = pytest.mark.django_db

UTC = dt.timezone.utc
NOW = dt.datetime(2025, 6, 10, 12, 0, tzinfo=UTC)


# ---------------------------------------------------------------------
# display status
# ---------------------------------------------------------------------
def test_final_statuses_are_kept():
    long_ago = NOW - dt.timedelta(days=30)
    assert display_status('completed', long_ago, NOW) == 'completed'
    assert display_status('cancelled', long_ago, NOW) == 'cancelled'


def test_open_appointment_becomes_missed_after_more_than_one_full_day():
    assert display_status('scheduled', NOW - dt.timedelta(hours=1), NOW) == 'scheduled'
    assert display_status('scheduled', NOW - dt.timedelta(days=1, hours=23), NOW) == 'scheduled'
    assert display_status('scheduled', NOW - dt.timedelta(days=2), NOW) == 'missed'
    assert display_status(None, NOW - dt.timedelta(days=5), NOW) == 'missed'


def test_future_or_undated_appointment_is_scheduled():
    assert display_status('scheduled', NOW + dt.timedelta(days=3), NOW) == 'scheduled'
    assert display_status(None, None, NOW) == 'scheduled'


def test_missed_cutoff_matches_row_rule():
    cutoff = missed_cutoff(NOW)
    assert display_status('scheduled', cutoff, NOW) == 'missed'
    assert display_status('scheduled', cutoff + dt.timedelta(seconds=1), NOW) == 'scheduled'


def test_threshold_follows_settings(settings):
    settings.APPOINTMENT_MISSED_AFTER_DAYS = 3
    assert display_status('scheduled', NOW - dt.timedelta(days=3), NOW) == 'scheduled'
    assert display_status('scheduled', NOW - dt.timedelta(days=4), NOW) == 'missed'


def test_days_missed_counts_whole_days():
    assert days_missed('scheduled', NOW - dt.timedelta(days=4, hours=20), NOW) == 4
    assert days_missed(None, NOW - dt.timedelta(days=2), NOW) == 2
    assert days_missed('scheduled', NOW - dt.timedelta(hours=30), NOW) is None
    assert days_missed('completed', NOW - dt.timedelta(days=9), NOW) is None


def test_pdf_status_block_warns_about_missed_appointment():
    a = MaternityAppointment(patient_name='A', patient_phone_number='1', status='scheduled',
                             appointment_date=NOW - dt.timedelta(days=3, hours=2))
    rows = dict(status_rows(a, NOW))
    assert rows['Statut affiché (calculé)'] == 'Manqué (3j)'
    assert rows['Avertissement'] == 'Ce rendez-vous a été manqué il y a 3 jours'
    a.appointment_date = NOW + dt.timedelta(days=1)
    rows = dict(status_rows(a, NOW))
    assert rows['Statut affiché (calculé)'] == 'Programmé'
    assert 'Avertissement' not in rows


# ---------------------------------------------------------------------
# API
# ---------------------------------------------------------------------
URL = '/api/maternity/appointments'


def _make(name, when, status='scheduled', phone='3331234'):
    return MaternityAppointment.objects.create(
        patient_name=name, patient_phone_number=phone, appointment_date=when, status=status
    )


def test_create_appointment(midwife, client_for):
    client = client_for(midwife)
    r = client.post(URL, {
        'patientName': 'Amina Said',
        'patientPhoneNumber': '3331234',
        'appointmentReason': 'Suivi',
        'appointmentDate': '2030-01-15T07:30:00Z',
    }, format='json')
    assert r.status_code == 201
    data = r.data['data']
    assert data['status'] == 'scheduled'
    assert data['displayStatus'] == 'scheduled'
    assert data['displayStatusLabel'] == 'Programmé'
    assert data['localTime'] == '10:30'
    assert data['localDate'] == '2030-01-15'
    obj = MaternityAppointment.objects.get(pk=data['id'])
    assert obj.created_by == midwife
    assert AuditEvent.objects.filter(action='appointment_create', object_id=obj.pk).exists()


def test_naive_date_is_read_at_configured_offset(midwife, client_for, settings):
    client = client_for(midwife)
    body = {'patientName': 'Amina', 'patientPhoneNumber': '3331234',
            'appointmentDate': '2030-01-15T10:30:00'}
    r = client.post(URL, body, format='json')
    assert r.status_code == 201
    obj = MaternityAppointment.objects.get(pk=r.data['data']['id'])
    assert obj.appointment_date == dt.datetime(2030, 1, 15, 7, 30, tzinfo=UTC)

    settings.LOCAL_UTC_OFFSET_HOURS = 1
    r = client.post(URL, body, format='json')
    assert r.status_code == 201
    obj = MaternityAppointment.objects.get(pk=r.data['data']['id'])
    assert obj.appointment_date == dt.datetime(2030, 1, 15, 9, 30, tzinfo=UTC)
    assert r.data['data']['localTime'] == '10:30'


def test_missed_cannot_be_stored(midwife, client_for):
    r = client_for(midwife).post(URL, {
        'patientName': 'Amina', 'patientPhoneNumber': '3331234',
        'appointmentDate': '2030-01-15T07:30:00Z', 'status': 'missed',
    }, format='json')
    assert r.status_code == 400
    assert r.data['ok'] is False
    assert r.data['error']['code'] == 'validation_error'
    assert 'status' in r.data['error']['message']


def test_required_fields(midwife, client_for):
    r = client_for(midwife).post(URL, {'patientName': '   ', 'appointmentDate': '2030-01-15T07:30:00Z'},
                                 format='json')
    assert r.status_code == 400
    assert 'patientName' in r.data['error']['message']
    assert 'patientPhoneNumber' in r.data['error']['message']


def test_status_filters_use_display_status(midwife, client_for):
    now = timezone.now()
    missed = _make('Missed', now - dt.timedelta(days=3))
    _make('Done', now - dt.timedelta(days=3), status='completed')
    upcoming = _make('Upcoming', now + dt.timedelta(days=1))
    recent = _make('Recent', now - dt.timedelta(hours=30))
    client = client_for(midwife)

    r = client.get(URL, {'status': 'missed'})
    assert [a['id'] for a in r.data['data']] == [missed.id]
    assert r.data['data'][0]['displayStatusLabel'] == 'Manqué'
    assert r.data['data'][0]['daysMissed'] == 3

    r = client.get(URL, {'status': 'scheduled'})
    assert [a['id'] for a in r.data['data']] == [recent.id, upcoming.id]
    assert [a['daysMissed'] for a in r.data['data']] == [None, None]

    r = client.get(URL, {'status': 'completed'})
    assert [a['patientName'] for a in r.data['data']] == ['Done']

    stats = r.data['stats']
    assert stats == {'total': 4, 'scheduled': 2, 'completed': 1, 'cancelled': 0, 'missed': 1,
                     'today': stats['today']}


def test_list_is_ordered_by_date(midwife, client_for):
    now = timezone.now()
    late = _make('B', now + dt.timedelta(days=5))
    early = _make('A', now + dt.timedelta(days=1))
    r = client_for(midwife).get(URL)
    assert [a['id'] for a in r.data['data']] == [early.id, late.id]


def test_period_today_uses_local_day(midwife, client_for):
    start, end = localtime.local_day_bounds(localtime.local_today())
    today = _make('Today', start + dt.timedelta(minutes=1))
    _make('Yesterday', start - dt.timedelta(minutes=1))
    _make('Tomorrow', end)
    r = client_for(midwife).get(URL, {'period': 'today'})
    assert [a['id'] for a in r.data['data']] == [today.id]
    assert r.data['stats']['today'] == 1


def test_period_upcoming_and_past(midwife, client_for):
    now = timezone.now()
    past = _make('Past', now - dt.timedelta(hours=2))
    future = _make('Future', now + dt.timedelta(hours=2))
    client = client_for(midwife)
    assert [a['id'] for a in client.get(URL, {'period': 'upcoming'}).data['data']] == [future.id]
    assert [a['id'] for a in client.get(URL, {'period': 'past'}).data['data']] == [past.id]


def test_date_range_is_inclusive_in_local_time(midwife, client_for):
    # 2025-03-09 21:30 UTC is already 10 March in GMT+3
    inside = _make('Inside', dt.datetime(2025, 3, 9, 21, 30, tzinfo=UTC))
    _make('Before', dt.datetime(2025, 3, 9, 20, 30, tzinfo=UTC))
    last = _make('Last', dt.datetime(2025, 3, 11, 20, 59, tzinfo=UTC))
    r = client_for(midwife).get(URL, {'start': '2025-03-10', 'end': '2025-03-11'})
    assert [a['id'] for a in r.data['data']] == [inside.id, last.id]


def test_search_by_name_or_phone(midwife, client_for):
    now = timezone.now()
    a = _make('Fatima Ali', now, phone='7771111')
    b = _make('Zaina Moussa', now, phone='3339999')
    client = client_for(midwife)
    assert [x['id'] for x in client.get(URL, {'search': 'fatima'}).data['data']] == [a.id]
    assert [x['id'] for x in client.get(URL, {'search': '3339'}).data['data']] == [b.id]


def test_invalid_filter_value(midwife, client_for):
    r = client_for(midwife).get(URL, {'period': 'yesterday'})
    assert r.status_code == 400


def test_update_stamps_audit_columns(midwife, client_for):
    a = _make('Amina', timezone.now() + dt.timedelta(days=2))
    r = client_for(midwife).patch(f'{URL}/{a.id}', {'status': 'completed'}, format='json')
    assert r.status_code == 200
    assert r.data['data']['displayStatus'] == 'completed'
    a.refresh_from_db()
    assert a.updated_by == midwife
    assert a.updated_at is not None
    assert AuditEvent.objects.filter(action='appointment_update', object_id=a.id).exists()


def test_put_requires_all_fields(midwife, client_for):
    a = _make('Amina', timezone.now())
    r = client_for(midwife).put(f'{URL}/{a.id}', {'status': 'cancelled'}, format='json')
    assert r.status_code == 400


def test_delete_and_not_found(midwife, client_for):
    a = _make('Amina', timezone.now())
    client = client_for(midwife)
    assert client.delete(f'{URL}/{a.id}').status_code == 200
    assert not MaternityAppointment.objects.filter(pk=a.id).exists()
    r = client.get(f'{URL}/{a.id}')
    assert r.status_code == 404
    assert r.data['error']['code'] == 'not_found'


def test_pdf_sheet(midwife, client_for):
    a = _make('Amina', dt.datetime(2025, 5, 4, 22, 0, tzinfo=UTC))
    r = client_for(midwife).get(f'{URL}/{a.id}/pdf')
    assert r.status_code == 200
    assert r['Content-Type'] == 'application/pdf'
    assert r.content.startswith(b'%PDF')


def test_excel_export(midwife, client_for):
    _make('Inside', dt.datetime(2025, 3, 10, 8, 0, tzinfo=UTC))
    _make('Outside', dt.datetime(2025, 4, 10, 8, 0, tzinfo=UTC))
    r = client_for(midwife).get(f'{URL}/export', {'start': '2025-03-01', 'end': '2025-03-31'})
    assert r.status_code == 200
    assert r['Content-Type'].startswith('application/vnd.openxmlformats')
    assert 'rendez_vous_maternite_01-03-2025_au_31-03-2025.xlsx' in r['Content-Disposition']
    ws = load_workbook(io.BytesIO(r.content)).active
    rows = list(ws.iter_rows(values_only=True))
    assert rows[0][0] == 'ID Rendez-vous'
    assert [row[1] for row in rows[1:]] == ['Inside']
    assert rows[1][6] == '11:00'
