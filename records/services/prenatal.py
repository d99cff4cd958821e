"""
Prenatal consultation (CPN) register: filters, payloads, PDF and export.
"""
from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Dict, Optional

from django.db.models import Count, Q, QuerySet

from records.models import PrenatalRecord
from records.services import excel, localtime, pdf
from records.services.registers import audit_columns

logger = logging.getLogger(__name__)

VISITS = [
    ('visit_cpn1', 'visitCpn1', 'CPN1'),
    ('visit_cpn2', 'visitCpn2', 'CPN2'),
    ('visit_cpn3', 'visitCpn3', 'CPN3'),
    ('visit_cpn4', 'visitCpn4', 'CPN4'),
]
IRON_DOSES = [
    ('iron_folic_acid_dose1', 'ironFolicAcidDose1', 'Fer/Acide folique - Dose 1'),
    ('iron_folic_acid_dose2', 'ironFolicAcidDose2', 'Fer/Acide folique - Dose 2'),
    ('iron_folic_acid_dose3', 'ironFolicAcidDose3', 'Fer/Acide folique - Dose 3'),
]
SP_DOSES = [
    ('sulfadoxine_pyrimethamine_dose1', 'sulfadoxinePyrimethamineDose1', 'Sulfadoxine/Pyriméthamine - Dose 1'),
    ('sulfadoxine_pyrimethamine_dose2', 'sulfadoxinePyrimethamineDose2', 'Sulfadoxine/Pyriméthamine - Dose 2'),
    ('sulfadoxine_pyrimethamine_dose3', 'sulfadoxinePyrimethamineDose3', 'Sulfadoxine/Pyriméthamine - Dose 3'),
]

ANEMIA_LABELS = dict(PrenatalRecord.ANEMIA_CHOICES)
IRON_FOLIC_LABELS = dict(PrenatalRecord.IRON_FOLIC_CHOICES)


def _has_anemia() -> Q:
    return Q(anemia__isnull=False) & ~Q(anemia__in=['', 'none'])


def _visit_filter(qs: QuerySet, field: str, answer: Optional[str]) -> QuerySet:
    if answer == 'yes':
        return qs.filter(**{f'{field}__isnull': False})
    if answer == 'no':
        return qs.filter(**{f'{field}__isnull': True})
    return qs


def filter_prenatal(qs: QuerySet, params: Dict[str, Any]) -> QuerySet:
    search = (params.get('search') or '').strip()
    if search:
        qs = qs.filter(Q(full_name__icontains=search) | Q(file_number__icontains=search))
    file_number = (params.get('fileNumber') or '').strip()
    if file_number:
        qs = qs.filter(file_number__icontains=file_number)
    qs = _visit_filter(qs, 'visit_cpn1', params.get('hasCPN1'))
    qs = _visit_filter(qs, 'visit_cpn4', params.get('hasCPN4'))
    anemia = params.get('hasAnemia')
    if anemia == 'yes':
        qs = qs.filter(_has_anemia())
    elif anemia == 'no':
        qs = qs.exclude(_has_anemia())
    qs = localtime.filter_range(qs, 'created_at', params.get('start'), params.get('end'))
    return qs.order_by('-created_at', '-id')


def prenatal_stats(qs: QuerySet) -> Dict[str, int]:
    """Visit, dose and anemia counters; a missing anemia value counts as none."""
    all_visits = Q()
    for field, _, _ in VISITS:
        all_visits &= Q(**{f'{field}__isnull': False})
    agg = qs.aggregate(
        total=Count('id'),
        withCPN1=Count('id', filter=Q(visit_cpn1__isnull=False)),
        withCPN2=Count('id', filter=Q(visit_cpn2__isnull=False)),
        withCPN3=Count('id', filter=Q(visit_cpn3__isnull=False)),
        withCPN4=Count('id', filter=Q(visit_cpn4__isnull=False)),
        completedAllVisits=Count('id', filter=all_visits),
        ironDose1=Count('id', filter=Q(iron_folic_acid_dose1=True)),
        ironDose2=Count('id', filter=Q(iron_folic_acid_dose2=True)),
        ironDose3=Count('id', filter=Q(iron_folic_acid_dose3=True)),
        spDose1=Count('id', filter=Q(sulfadoxine_pyrimethamine_dose1=True)),
        spDose2=Count('id', filter=Q(sulfadoxine_pyrimethamine_dose2=True)),
        spDose3=Count('id', filter=Q(sulfadoxine_pyrimethamine_dose3=True)),
        anemiaNone=Count('id', filter=~_has_anemia()),
        anemiaMild=Count('id', filter=Q(anemia='mild')),
        anemiaModerate=Count('id', filter=Q(anemia='moderate')),
        anemiaSevere=Count('id', filter=Q(anemia='severe')),
    )
    stats = {k: v or 0 for k, v in agg.items()}
    stats['withAnemia'] = stats['anemiaMild'] + stats['anemiaModerate'] + stats['anemiaSevere']
    return stats


def serialize_prenatal(r: PrenatalRecord) -> Dict[str, Any]:
    payload = {
        'id': r.id,
        'fileNumber': r.file_number,
        'fullName': r.full_name,
        'patientAge': r.patient_age,
        'pregnancyAge': r.pregnancy_age,
        'anemia': r.anemia,
        'ironFolicAcid': r.iron_folic_acid,
        'observations': r.observations,
    }
    for field, key, _label in VISITS:
        value = getattr(r, field)
        payload[key] = value.isoformat() if value else None
    for field, key, _label in IRON_DOSES + SP_DOSES:
        payload[key] = getattr(r, field)
    payload.update(audit_columns(r))
    return payload


def pdf_sheet(r: PrenatalRecord) -> bytes:
    sections = [
        ('INFORMATIONS DE LA PATIENTE', [
            ('Numéro de dossier', r.file_number),
            ('Nom complet', r.full_name),
            ('Âge de la patiente', r.patient_age),
            ('Âge de la grossesse', r.pregnancy_age),
        ]),
        ('VISITES PRÉNATALES', [
            (label, localtime.french_day_date(getattr(r, field), empty='')) for field, _, label in VISITS
        ]),
        ('TRAITEMENTS', [(label, getattr(r, field)) for field, _, label in IRON_DOSES + SP_DOSES] + [
            ('Traitement Fer/Acide folique', IRON_FOLIC_LABELS.get(r.iron_folic_acid, r.iron_folic_acid)),
        ]),
        ('ÉTAT DE SANTÉ', [
            ('Anémie', ANEMIA_LABELS.get(r.anemia, r.anemia)),
            ('Observations', r.observations),
        ]),
        ('CHRONOLOGIE', [
            ('Créé le', localtime.format_local(r.created_at, excel.DATETIME_FMT)),
            ('Dernière modification', localtime.format_local(r.updated_at, excel.DATETIME_FMT, empty='')),
        ]),
    ]
    return pdf.render_sheet(
        'Fiche de Consultation Prénatale - Maternité',
        sections,
        subtitle=f'Consultation #{r.id}',
        footer=[f'Département de Maternité - CPN #{r.id}'],
    )


EXPORT_HEADERS = (
    ['ID Consultation', 'Numéro de dossier', 'Nom complet', 'Âge patiente', 'Âge grossesse']
    + [f'Date {label}' for _, _, label in VISITS]
    + [label for _, _, label in IRON_DOSES + SP_DOSES]
    + ['Anémie', 'Traitement Fer/Acide folique', 'Observations', 'Date création', 'Dernière modification']
)


def export_rows(qs: QuerySet):
    for r in qs:
        row = {
            'ID Consultation': r.id,
            'Numéro de dossier': excel.text(r.file_number),
            'Nom complet': excel.text(r.full_name),
            'Âge patiente': excel.text(r.patient_age),
            'Âge grossesse': excel.text(r.pregnancy_age),
            'Anémie': ANEMIA_LABELS.get(r.anemia, excel.EMPTY),
            'Traitement Fer/Acide folique': IRON_FOLIC_LABELS.get(r.iron_folic_acid, excel.EMPTY),
            'Observations': excel.text(r.observations),
        }
        for field, _key, label in VISITS:
            row[f'Date {label}'] = localtime.french_day_date(getattr(r, field))
        for field, _key, label in IRON_DOSES + SP_DOSES:
            row[label] = excel.yes_no(getattr(r, field))
        row.update(excel.audit_cells(r))
        yield row


def summary_lines(qs: QuerySet) -> list:
    s = prenatal_stats(qs)
    return [
        ['STATISTIQUES DES CONSULTATIONS PRÉNATALES'],
        [],
        ['TOTAL', 'VALEUR'],
        ['Consultations totales', s['total']],
        ['Consultations avec toutes les visites CPN', s['completedAllVisits']],
        [],
        ['RÉPARTITION DES VISITES CPN'],
        ['CPN1 réalisée', s['withCPN1']],
        ['CPN2 réalisée', s['withCPN2']],
        ['CPN3 réalisée', s['withCPN3']],
        ['CPN4 réalisée', s['withCPN4']],
        [],
        ['TRAITEMENTS ADMINISTRÉS'],
        [IRON_DOSES[0][2], s['ironDose1']],
        [IRON_DOSES[1][2], s['ironDose2']],
        [IRON_DOSES[2][2], s['ironDose3']],
        [SP_DOSES[0][2], s['spDose1']],
        [SP_DOSES[1][2], s['spDose2']],
        [SP_DOSES[2][2], s['spDose3']],
        [],
        ['STATUT ANÉMIQUE'],
        ['Aucune anémie', s['anemiaNone']],
        ['Anémie légère', s['anemiaMild']],
        ['Anémie modérée', s['anemiaModerate']],
        ['Anémie sévère', s['anemiaSevere']],
        ['Total avec anémie', s['withAnemia']],
    ]


def export_workbook(qs: QuerySet, start: Optional[dt.date] = None, end: Optional[dt.date] = None):
    qs = localtime.filter_range(qs, 'created_at', start, end).order_by('-created_at', '-id')
    wb = excel.build_workbook('Consultations détaillées', EXPORT_HEADERS, export_rows(qs),
                              summary=summary_lines(qs), summary_widths=(35, 15))
    logger.info('prenatal export: %s rows', qs.count())
    return wb, excel.export_filename('consultations_prenatales_maternite', start, end)
