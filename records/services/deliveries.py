"""
Maternity delivery register: filters, payloads, PDF sheet and export.
"""
from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Dict, Optional

from django.db.models import Q, QuerySet

from records.models import MaternityDelivery
from records.services import excel, localtime, pdf
from records.services.registers import audit_columns

logger = logging.getLogger(__name__)

# Precedence order used when more than one marker is filled.
DELIVERY_TYPES = [
    ('eutocic', 'delivery_eutocic', 'Eutocique'),
    ('dystocic', 'delivery_dystocic', 'Dystocique'),
    ('transfert', 'delivery_transfert', 'Transfert'),
]


def delivery_type(d: MaternityDelivery) -> Optional[str]:
    for key, field, _label in DELIVERY_TYPES:
        if getattr(d, field):
            return key
    return None


def delivery_type_label(d: MaternityDelivery) -> str:
    for _key, field, label in DELIVERY_TYPES:
        if getattr(d, field):
            return label
    return excel.EMPTY


def filter_deliveries(qs: QuerySet, params: Dict[str, Any]) -> QuerySet:
    origin = params.get('origin')
    if origin and origin != 'all':
        qs = qs.filter(origin=origin)
    search = (params.get('search') or '').strip()
    if search:
        qs = qs.filter(Q(full_name__icontains=search) | Q(file_number__icontains=search))
    kind = params.get('deliveryType')
    if kind and kind != 'all':
        field = dict((k, f) for k, f, _ in DELIVERY_TYPES)[kind]
        qs = qs.filter(**{f'{field}__isnull': False}).exclude(**{field: ''})
    mother = params.get('motherStatus')
    if mother == 'dead':
        qs = qs.filter(is_mother_dead=True)
    elif mother == 'alive':
        qs = qs.filter(is_mother_dead=False)
    qs = localtime.filter_range(qs, 'delivery_datetime', params.get('start'), params.get('end'))
    return qs.order_by('-delivery_datetime', '-created_at', '-id')


def delivery_stats(qs: QuerySet) -> Dict[str, int]:
    return {
        'total': qs.count(),
        'motherDeaths': qs.filter(is_mother_dead=True).count(),
        'fromHD': qs.filter(origin='HD').count(),
        'fromDS': qs.filter(origin='DS').count(),
    }


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def serialize_delivery(d: MaternityDelivery) -> Dict[str, Any]:
    payload = {
        'id': d.id,
        'fileNumber': d.file_number,
        'fullName': d.full_name,
        'address': d.address,
        'origin': d.origin,
        'workTime': _iso(d.work_time),
        'deliveryDateTime': _iso(d.delivery_datetime),
        'deliveryEutocic': d.delivery_eutocic,
        'deliveryDystocic': d.delivery_dystocic,
        'deliveryTransfert': d.delivery_transfert,
        'deliveryType': delivery_type(d),
        'weight': d.weight,
        'newbornLiving': d.newborn_living,
        'newbornLessThan2500g': d.newborn_less_than_2_5kg,
        'numberOfDeaths': d.number_of_deaths,
        'numberOfDeathsBefore24h': d.number_of_deaths_before_24h,
        'numberOfDeathsBefore7Days': d.number_of_deaths_before_7_days,
        'isMotherDead': d.is_mother_dead,
        'transfer': d.transfer,
        'leavingDate': _iso(d.leaving_date),
        'observations': d.observations,
        'localDeliveryDateTime': localtime.format_local(d.delivery_datetime, excel.DATETIME_FMT),
    }
    payload.update(audit_columns(d))
    return payload


def pdf_sheet(d: MaternityDelivery) -> bytes:
    label = delivery_type_label(d)
    sections = [
        ('INFORMATIONS DE LA PATIENTE', [
            ('Numéro de dossier', d.file_number),
            ('Nom complet', d.full_name),
            ('Adresse', d.address),
            ('Origine', d.origin),
        ]),
        ("DÉTAILS DE L'ACCOUCHEMENT", [
            ('Début du travail', localtime.format_local(d.work_time, excel.DATETIME_FMT, empty='')),
            ("Date d'accouchement", localtime.format_local(d.delivery_datetime, excel.DATETIME_FMT, empty='')),
            ("Type d'accouchement", '' if label == excel.EMPTY else label),
            ('Poids (kg)', d.weight),
        ]),
        ('NOUVEAU-NÉS ET DÉCÈS', [
            ('Nouveau-né(s) vivant(s)', excel.count(d.newborn_living)),
            ('Nouveau-né(s) < 2.5kg', excel.count(d.newborn_less_than_2_5kg)),
            ('Nombre de décès', excel.count(d.number_of_deaths)),
            ('Décès < 24h', excel.count(d.number_of_deaths_before_24h)),
            ('Décès < 7 jours', excel.count(d.number_of_deaths_before_7_days)),
            ('Mère décédée', d.is_mother_dead),
        ]),
        ('SORTIE', [
            ('Transfert', d.transfer),
            ('Date de sortie', localtime.format_local(d.leaving_date, '%d/%m/%Y', empty='')),
            ('Observations', d.observations),
        ]),
        ('CHRONOLOGIE', [
            ('Créé le', localtime.format_local(d.created_at, excel.DATETIME_FMT)),
            ('Dernière modification', localtime.format_local(d.updated_at, excel.DATETIME_FMT, empty='')),
        ]),
    ]
    return pdf.render_sheet(
        "Fiche d'Accouchement - Maternité",
        sections,
        subtitle=f'Accouchement #{d.id}',
        footer=[f'Département de Maternité - Accouchement #{d.id}'],
    )


EXPORT_HEADERS = [
    'ID Accouchement', 'Numéro de dossier', 'Nom complet', 'Adresse', 'Origine',
    'Date de travail', "Date d'accouchement", "Type d'accouchement", 'Poids (kg)',
    'Nouveau-né(s) vivant(s)', 'Nouveau-né(s) < 2.5kg', 'Nombre de décès', 'Décès < 24h',
    'Décès < 7 jours', 'Mère décédée', 'Transfert', 'Date de sortie', 'Observations',
    'Date création', 'Dernière modification',
]


def export_rows(qs: QuerySet):
    for d in qs:
        row = {
            'ID Accouchement': d.id,
            'Numéro de dossier': excel.text(d.file_number),
            'Nom complet': excel.text(d.full_name),
            'Adresse': excel.text(d.address),
            'Origine': excel.text(d.origin),
            'Date de travail': excel.when(d.work_time),
            "Date d'accouchement": excel.when(d.delivery_datetime),
            "Type d'accouchement": delivery_type_label(d),
            'Poids (kg)': d.weight or excel.EMPTY,
            'Nouveau-né(s) vivant(s)': excel.count(d.newborn_living),
            'Nouveau-né(s) < 2.5kg': excel.count(d.newborn_less_than_2_5kg),
            'Nombre de décès': excel.count(d.number_of_deaths),
            'Décès < 24h': excel.count(d.number_of_deaths_before_24h),
            'Décès < 7 jours': excel.count(d.number_of_deaths_before_7_days),
            'Mère décédée': excel.yes_no(d.is_mother_dead),
            'Transfert': excel.text(d.transfer),
            'Date de sortie': excel.when(d.leaving_date, '%d/%m/%Y'),
            'Observations': excel.text(d.observations),
        }
        row.update(excel.audit_cells(d))
        yield row


def export_workbook(qs: QuerySet, start: Optional[dt.date] = None, end: Optional[dt.date] = None):
    """Deliveries whose delivery date falls in the local day range."""
    qs = localtime.filter_range(qs, 'delivery_datetime', start, end).order_by('-delivery_datetime', '-created_at')
    wb = excel.build_workbook('Accouchements Maternité', EXPORT_HEADERS, export_rows(qs))
    logger.info('deliveries export: %s rows', qs.count())
    return wb, excel.export_filename('accouchements_maternite', start, end)
