"""
Medicine ward hospitalizations: filters, payloads, PDF, export and the
diagnostics reference list.
"""
from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.core.cache import cache
from django.db.models import Count, Q, QuerySet

from records.models import Diagnostic, MedicineHospitalization
from records.services import excel, localtime, pdf
from records.services.registers import audit_columns

logger = logging.getLogger(__name__)

LEAVE_FLAGS = MedicineHospitalization.LEAVE_FLAGS
LEAVE_KEYS = [key for _, key, _ in LEAVE_FLAGS]
ACTIVE_LABEL = 'En cours'
SEX_LABELS = dict(MedicineHospitalization.SEX_CHOICES)
DIAGNOSTICS_CACHE_KEY = 'records:diagnostics'

# wire keys of the leave flags
LEAVE_WIRE = {
    'leave_authorized': 'leaveAuthorized',
    'leave_evaded': 'leaveEvaded',
    'leave_transferred': 'leaveTransferred',
    'leave_died_before_48h': 'leaveDiedBefore48h',
    'leave_died_after_48h': 'leaveDiedAfter48h',
}


def _active() -> Q:
    q = Q()
    for field, _, _ in LEAVE_FLAGS:
        q &= Q(**{field: False})
    return q


def leave_status(h: MedicineHospitalization) -> str:
    """Key of the first leave flag set, or ``active``."""
    for field, key, _label in LEAVE_FLAGS:
        if getattr(h, field):
            return key
    return 'active'


def leave_status_label(h: MedicineHospitalization) -> str:
    for field, _key, label in LEAVE_FLAGS:
        if getattr(h, field):
            return label
    return ACTIVE_LABEL


def filter_hospitalizations(qs: QuerySet, params: Dict[str, Any]) -> QuerySet:
    origin = params.get('origin')
    if origin and origin != 'all':
        qs = qs.filter(origin=origin)
    sex = params.get('sex')
    if sex and sex != 'all':
        qs = qs.filter(sex=sex)
    emergency = params.get('emergency')
    if emergency is not None:
        qs = qs.filter(is_emergency=emergency)
    search = (params.get('search') or '').strip()
    if search:
        qs = qs.filter(Q(full_name__icontains=search) | Q(entry_diagnostic__icontains=search)
                       | Q(leaving_diagnostic__icontains=search))
    status = params.get('leaveStatus')
    if status == 'active':
        qs = qs.filter(_active())
    elif status and status != 'all':
        field = next(f for f, key, _ in LEAVE_FLAGS if key == status)
        qs = qs.filter(**{field: True})
    qs = localtime.filter_range(qs, 'created_at', params.get('start'), params.get('end'))
    return qs.order_by('-created_at', '-id')


def hospitalization_stats(qs: QuerySet) -> Dict[str, int]:
    counters = {
        'total': Count('id'),
        'emergency': Count('id', filter=Q(is_emergency=True)),
        'pregnant': Count('id', filter=Q(is_pregnant=True)),
        'male': Count('id', filter=Q(sex='M')),
        'female': Count('id', filter=Q(sex='F')),
        'active': Count('id', filter=_active()),
    }
    for field, key, _label in LEAVE_FLAGS:
        counters[key] = Count('id', filter=Q(**{field: True}))
    stats = {k: v or 0 for k, v in qs.aggregate(**counters).items()}
    stats['totalLeaves'] = sum(stats[k] for k in LEAVE_KEYS)
    stats['totalDeaths'] = stats['died_before_48h'] + stats['died_after_48h']
    return stats


def serialize_hospitalization(h: MedicineHospitalization) -> Dict[str, Any]:
    payload = {
        'id': h.id,
        'fullName': h.full_name,
        'age': h.age,
        'sex': h.sex,
        'origin': h.origin,
        'isEmergency': h.is_emergency,
        'entryDiagnostic': h.entry_diagnostic,
        'leavingDiagnostic': h.leaving_diagnostic,
        'isPregnant': h.is_pregnant,
        'leavingDate': h.leaving_date.isoformat() if h.leaving_date else None,
        'leaveStatus': leave_status(h),
        'leaveStatusLabel': leave_status_label(h),
    }
    for field, _key, _label in LEAVE_FLAGS:
        payload[LEAVE_WIRE[field]] = getattr(h, field)
    payload.update(audit_columns(h))
    return payload


def pdf_sheet(h: MedicineHospitalization) -> bytes:
    sections = [
        ('INFORMATIONS DU PATIENT', [
            ('Nom complet', h.full_name),
            ('Âge', h.age),
            ('Sexe', SEX_LABELS.get(h.sex, h.sex)),
            ('Origine', h.origin),
            ('Urgence', h.is_emergency),
            ('Enceinte', h.is_pregnant),
        ]),
        ('DIAGNOSTICS', [
            ("Diagnostic d'entrée", h.entry_diagnostic),
            ('Diagnostic de sortie', h.leaving_diagnostic),
        ]),
        ('SORTIE', [
            ('Statut de sortie', leave_status_label(h)),
            ('Date de sortie', localtime.format_local(h.leaving_date, excel.DATETIME_FMT, empty='')),
        ]),
        ('CHRONOLOGIE', [
            ('Admis le', localtime.format_local(h.created_at, excel.DATETIME_FMT)),
            ('Dernière modification', localtime.format_local(h.updated_at, excel.DATETIME_FMT, empty='')),
        ]),
    ]
    return pdf.render_sheet(
        "Fiche d'Hospitalisation - Médecine",
        sections,
        subtitle=f'Hospitalisation #{h.id}',
        footer=[f'Département de Médecine - Hospitalisation #{h.id}'],
    )


EXPORT_HEADERS = [
    'ID Hospitalisation', 'Nom complet', 'Âge', 'Sexe', 'Origine', 'Urgence',
    "Diagnostic d'entrée", 'Diagnostic de sortie', 'Enceinte', 'Statut de sortie',
] + [label for _, _, label in LEAVE_FLAGS] + ['Date création', 'Dernière modification']


def export_rows(qs: QuerySet):
    for h in qs:
        row = {
            'ID Hospitalisation': h.id,
            'Nom complet': excel.text(h.full_name),
            'Âge': excel.text(h.age),
            'Sexe': SEX_LABELS.get(h.sex, excel.EMPTY),
            'Origine': excel.text(h.origin),
            'Urgence': excel.yes_no(h.is_emergency),
            "Diagnostic d'entrée": excel.text(h.entry_diagnostic),
            'Diagnostic de sortie': excel.text(h.leaving_diagnostic),
            'Enceinte': excel.yes_no(h.is_pregnant),
            'Statut de sortie': leave_status_label(h),
        }
        for field, _key, label in LEAVE_FLAGS:
            row[label] = excel.yes_no(getattr(h, field))
        row.update(excel.audit_cells(h))
        yield row


def summary_lines(qs: QuerySet) -> list:
    s = hospitalization_stats(qs)
    lines = [
        ['STATISTIQUES DES HOSPITALISATIONS'],
        [],
        ['TOTAL', 'VALEUR'],
        ['Hospitalisations totales', s['total']],
        ["Cas d'urgence", s['emergency']],
        ['Patient(e)s enceintes', s['pregnant']],
        [],
        ['RÉPARTITION PAR SEXE'],
        ['Masculin', s['male']],
        ['Féminin', s['female']],
        [],
        ['STATUT DE SORTIE'],
        ["En cours d'hospitalisation", s['active']],
    ]
    lines += [[label, s[key]] for _, key, label in LEAVE_FLAGS]
    lines += [
        [],
        ['TOTAL SORTIES', s['totalLeaves']],
        ['TOTAL DÉCÈS', s['totalDeaths']],
    ]
    return lines


def export_workbook(qs: QuerySet, start: Optional[dt.date] = None, end: Optional[dt.date] = None):
    qs = localtime.filter_range(qs, 'created_at', start, end).order_by('-created_at', '-id')
    wb = excel.build_workbook('Hospitalisations détaillées', EXPORT_HEADERS, export_rows(qs),
                              summary=summary_lines(qs), summary_widths=(30, 15))
    logger.info('hospitalizations export: %s rows', qs.count())
    return wb, excel.export_filename('hospitalisations_medecine', start, end)


def list_diagnostics() -> List[Dict[str, Any]]:
    """Diagnosis names ordered by name, cached for a few minutes."""
    data = cache.get(DIAGNOSTICS_CACHE_KEY)
    if data is None:
        data = [{'id': d.id, 'name': d.name} for d in Diagnostic.objects.order_by('name')]
        cache.set(DIAGNOSTICS_CACHE_KEY, data, getattr(settings, 'DIAGNOSTICS_CACHE_SECONDS', 300))
    return data


def invalidate_diagnostics() -> None:
    cache.delete(DIAGNOSTICS_CACHE_KEY)
