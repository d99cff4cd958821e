"""
Family planning register: filters, payloads, PDF sheet and export.

Contraceptive quantities are one nullable counter per method; an empty
counter counts as zero in every total.
"""
from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Dict, Optional

from django.db.models import QuerySet, Sum

from records.models import FamilyPlanningRecord
from records.services import excel, localtime, pdf
from records.services.registers import audit_columns

logger = logging.getLogger(__name__)

# (model field, wire key, label)
NEW_METHODS = [
    ('new_noristerat', 'newNoristerat', 'Noristérat'),
    ('new_microlut', 'newMicrolut', 'Microlut'),
    ('new_microgynon', 'newMicrogynon', 'Microgynon'),
    ('new_emergency_pill', 'newEmergencyPill', 'Pilule du lendemain'),
    ('new_male_condom', 'newMaleCondom', 'Préservatif masculin'),
    ('new_female_condom', 'newFemaleCondom', 'Préservatif féminin'),
    ('new_iud', 'newIud', 'DIU'),
    ('new_implanon_explanon', 'newImplanonExplanon', 'Implanon/Explanon'),
]
RENEWAL_METHODS = [
    ('renewal_noristerat', 'renewalNoristerat', 'Noristérat'),
    ('renewal_microgynon', 'renewalMicrogynon', 'Microgynon'),
    ('renewal_lofemenal', 'renewalLofemenal', 'Loféminal'),
    ('renewal_male_condom', 'renewalMaleCondom', 'Préservatif masculin'),
    ('renewal_female_condom', 'renewalFemaleCondom', 'Préservatif féminin'),
    ('renewal_iud', 'renewalIud', 'DIU'),
    ('renewal_implants', 'renewalImplants', 'Implants'),
]


def type_label(is_new: Optional[bool]) -> str:
    if is_new is None:
        return excel.EMPTY
    return 'Nouveau' if is_new else 'Renouvellement'


def filter_family_planning(qs: QuerySet, params: Dict[str, Any]) -> QuerySet:
    origin = params.get('origin')
    if origin and origin != 'all':
        qs = qs.filter(origin=origin)
    is_new = params.get('isNew')
    if is_new is not None:
        qs = qs.filter(is_new=is_new)
    search = (params.get('search') or '').strip()
    if search:
        qs = qs.filter(full_name__icontains=search)
    file_number = (params.get('fileNumber') or '').strip()
    if file_number:
        qs = qs.filter(file_number__icontains=file_number)
    qs = localtime.filter_range(qs, 'created_at', params.get('start'), params.get('end'))
    return qs.order_by('-created_at', '-id')


def method_totals(qs: QuerySet) -> Dict[str, int]:
    """Sum of every contraceptive counter, keyed by model field."""
    fields = [f for f, _, _ in NEW_METHODS + RENEWAL_METHODS]
    agg = qs.aggregate(**{f: Sum(f) for f in fields})
    return {f: agg[f] or 0 for f in fields}


def family_planning_stats(qs: QuerySet) -> Dict[str, int]:
    totals = method_totals(qs)
    return {
        'total': qs.count(),
        'new': qs.filter(is_new=True).count(),
        'renewal': qs.filter(is_new=False).count(),
        'newContraceptives': sum(totals[f] for f, _, _ in NEW_METHODS),
        'renewalContraceptives': sum(totals[f] for f, _, _ in RENEWAL_METHODS),
    }


def serialize_family_planning(r: FamilyPlanningRecord) -> Dict[str, Any]:
    payload = {
        'id': r.id,
        'fileNumber': r.file_number,
        'fullName': r.full_name,
        'address': r.address,
        'origin': r.origin,
        'age': r.age,
        'isNew': r.is_new,
    }
    for field, key, _label in NEW_METHODS + RENEWAL_METHODS:
        payload[key] = getattr(r, field)
    payload.update(audit_columns(r))
    return payload


def pdf_sheet(r: FamilyPlanningRecord) -> bytes:
    sections = [
        ('INFORMATIONS DE LA PATIENTE', [
            ('Numéro de dossier', r.file_number),
            ('Nom complet', r.full_name),
            ('Âge', r.age),
            ('Adresse', r.address),
            ('Origine', r.origin),
            ('Type de consultation', type_label(r.is_new)),
        ]),
        ('NOUVEAUX CONTRACEPTIFS', [(label, excel.count(getattr(r, f))) for f, _, label in NEW_METHODS]),
        ('RENOUVELLEMENTS', [(label, excel.count(getattr(r, f))) for f, _, label in RENEWAL_METHODS]),
        ('CHRONOLOGIE', [
            ('Créé le', localtime.format_local(r.created_at, excel.DATETIME_FMT)),
            ('Dernière modification', localtime.format_local(r.updated_at, excel.DATETIME_FMT, empty='')),
        ]),
    ]
    return pdf.render_sheet(
        'Fiche de Planning Familial - Maternité',
        sections,
        subtitle=f'Consultation #{r.id}',
        footer=[f'Département de Maternité - Planning familial #{r.id}'],
    )


EXPORT_HEADERS = (
    ['ID Consultation', 'Numéro de dossier', 'Nom complet', 'Âge', 'Adresse', 'Origine', 'Type']
    + [f'{label} (Nouveau)' for _, _, label in NEW_METHODS]
    + [f'{label} (Renouvellement)' for _, _, label in RENEWAL_METHODS]
    + ['Date création', 'Dernière modification']
)


def export_rows(qs: QuerySet):
    for r in qs:
        row = {
            'ID Consultation': r.id,
            'Numéro de dossier': excel.text(r.file_number),
            'Nom complet': excel.text(r.full_name),
            'Âge': excel.text(r.age),
            'Adresse': excel.text(r.address),
            'Origine': excel.text(r.origin),
            'Type': type_label(r.is_new),
        }
        for field, _key, label in NEW_METHODS:
            row[f'{label} (Nouveau)'] = excel.count(getattr(r, field))
        for field, _key, label in RENEWAL_METHODS:
            row[f'{label} (Renouvellement)'] = excel.count(getattr(r, field))
        row.update(excel.audit_cells(r))
        yield row


def summary_lines(qs: QuerySet) -> list:
    totals = method_totals(qs)
    lines = [['RÉSUMÉ DES CONTRACEPTIFS'], [], ['NOUVEAUX CONTRACEPTIFS', 'QUANTITÉ']]
    lines += [[label, totals[f]] for f, _, label in NEW_METHODS]
    lines += [[], ['RENOUVELLEMENTS', 'QUANTITÉ']]
    lines += [[label, totals[f]] for f, _, label in RENEWAL_METHODS]
    lines += [
        [],
        ['TOTAL GÉNÉRAL'],
        ['Nouveaux contraceptifs', sum(totals[f] for f, _, _ in NEW_METHODS)],
        ['Renouvellements', sum(totals[f] for f, _, _ in RENEWAL_METHODS)],
        ['Total consultations', qs.count()],
    ]
    return lines


def export_workbook(qs: QuerySet, start: Optional[dt.date] = None, end: Optional[dt.date] = None):
    """Consultations created within the local day range, with totals."""
    qs = localtime.filter_range(qs, 'created_at', start, end).order_by('-created_at', '-id')
    wb = excel.build_workbook('Consultations détaillées', EXPORT_HEADERS, export_rows(qs),
                              summary=summary_lines(qs), summary_widths=(30, 15))
    logger.info('family planning export: %s rows', qs.count())
    return wb, excel.export_filename('planning_familial_maternite', start, end)
