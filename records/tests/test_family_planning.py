import io

import pytest
from openpyxl import load_workbook

from records.models import FamilyPlanningRecord

pytestmark = pytest.mark.django_db

URL = '/api/maternity/family-planning'


def test_create_and_update(midwife, client_for):
    client = client_for(midwife)
    r = client.post(URL, {'fullName': 'Naima', 'origin': 'DS', 'newMicrolut': 2, 'newIud': ''}, format='json')
    assert r.status_code == 201
    data = r.data['data']
    assert data['isNew'] is True
    assert data['newMicrolut'] == 2
    assert data['newIud'] is None
    r = client.patch(f"{URL}/{data['id']}", {'isNew': False, 'renewalImplants': 1}, format='json')
    assert r.status_code == 200
    assert r.data['data']['isNew'] is False
    assert r.data['data']['renewalImplants'] == 1
    assert r.data['data']['updatedBy'] == midwife.id


def test_filters(midwife, client_for):
    a = FamilyPlanningRecord.objects.create(full_name='Alpha', origin='HD', is_new=True, file_number='PF-1')
    b = FamilyPlanningRecord.objects.create(full_name='Beta', origin='DS', is_new=False, file_number='PF-2')
    client = client_for(midwife)
    ids = lambda params: [x['id'] for x in client.get(URL, params).data['data']]
    # newest first
    assert ids({}) == [b.id, a.id]
    assert ids({'isNew': 'true'}) == [a.id]
    assert ids({'isNew': 'false'}) == [b.id]
    assert ids({'isNew': 'all'}) == [b.id, a.id]
    assert ids({'origin': 'DS'}) == [b.id]
    assert ids({'search': 'alp'}) == [a.id]
    assert ids({'fileNumber': 'PF-2'}) == [b.id]


def test_stats(midwife, client_for):
    FamilyPlanningRecord.objects.create(full_name='A', is_new=True, new_noristerat=2, new_microlut=1)
    FamilyPlanningRecord.objects.create(full_name='B', is_new=False, renewal_iud=1)
    stats = client_for(midwife).get(URL).data['stats']
    assert stats == {'total': 2, 'new': 1, 'renewal': 1, 'newContraceptives': 3, 'renewalContraceptives': 1}


def test_export_summary_sheet(midwife, client_for):
    FamilyPlanningRecord.objects.create(full_name='A', new_noristerat=2, renewal_implants=3)
    FamilyPlanningRecord.objects.create(full_name='B', new_noristerat=1)
    r = client_for(midwife).get(f'{URL}/export')
    assert r.status_code == 200
    assert 'planning_familial_maternite_' in r['Content-Disposition']
    wb = load_workbook(io.BytesIO(r.content))
    assert wb.sheetnames == ['Consultations détaillées', 'Résumé statistique']
    detail = list(wb['Consultations détaillées'].iter_rows(values_only=True))
    assert 'Noristérat (Nouveau)' in detail[0]
    assert 'Implants (Renouvellement)' in detail[0]
    summary = {row[0]: row[1] for row in wb['Résumé statistique'].iter_rows(values_only=True) if row and row[0]}
    assert summary['Nouveaux contraceptifs'] == 3
    assert summary['Renouvellements'] == 3
    assert summary['Total consultations'] == 2
    assert wb['Résumé statistique'].column_dimensions['A'].width == 30


def test_pdf(midwife, client_for):
    r_obj = FamilyPlanningRecord.objects.create(full_name='A')
    r = client_for(midwife).get(f'{URL}/{r_obj.id}/pdf')
    assert r.status_code == 200
    assert r.content.startswith(b'%PDF')
