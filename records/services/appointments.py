"""
Maternity appointments: display status, list filters and statistics.

Only three statuses are ever stored (scheduled, completed, cancelled).
The fourth one shown to users, *missed*, is derived at read time from the
appointment date and the current time.  :func:`display_status` computes
it for a single row and :func:`filter_by_display_status` expresses the
same rule as a database query, so list filters and row labels agree.
"""
from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.db.models import Count, Q, QuerySet
from django.utils import timezone

from records.models import MaternityAppointment
from records.services import excel, localtime, pdf
from records.services.registers import audit_columns

logger = logging.getLogger(__name__)

STATUS_SCHEDULED = MaternityAppointment.STATUS_SCHEDULED
STATUS_COMPLETED = MaternityAppointment.STATUS_COMPLETED
STATUS_CANCELLED = MaternityAppointment.STATUS_CANCELLED
STATUS_MISSED = 'missed'

DISPLAY_STATUSES = (STATUS_SCHEDULED, STATUS_COMPLETED, STATUS_CANCELLED, STATUS_MISSED)
FINAL_STATUSES = (STATUS_COMPLETED, STATUS_CANCELLED)

STATUS_LABELS = {
    STATUS_SCHEDULED: 'Programmé',
    STATUS_COMPLETED: 'Terminé',
    STATUS_CANCELLED: 'Annulé',
    STATUS_MISSED: 'Manqué',
}

PERIODS = ('all', 'today', 'upcoming', 'past')


def missed_after_days() -> int:
    return getattr(settings, 'APPOINTMENT_MISSED_AFTER_DAYS', 1)


def missed_cutoff(now: dt.datetime) -> dt.datetime:
    """Latest appointment date that counts as missed at ``now``.

    An open appointment is missed when the whole number of days elapsed
    since its date is greater than the threshold, i.e. when at least
    threshold + 1 full days have passed.
    """
    return now - dt.timedelta(days=missed_after_days() + 1)


def display_status(status: Optional[str], appointment_date: Optional[dt.datetime],
                   now: Optional[dt.datetime] = None) -> str:
    if status in FINAL_STATUSES:
        return status
    now = now or timezone.now()
    if appointment_date is not None and appointment_date < now:
        elapsed_days = (now - appointment_date) // dt.timedelta(days=1)
        if elapsed_days > missed_after_days():
            return STATUS_MISSED
    return STATUS_SCHEDULED


def days_missed(status: Optional[str], appointment_date: Optional[dt.datetime],
                now: Optional[dt.datetime] = None) -> Optional[int]:
    """Whole days elapsed since a missed appointment, ``None`` when not missed."""
    now = now or timezone.now()
    if display_status(status, appointment_date, now) != STATUS_MISSED:
        return None
    return (now - appointment_date) // dt.timedelta(days=1)


def status_label(status: Optional[str]) -> str:
    return STATUS_LABELS.get(status or STATUS_SCHEDULED, status or '')


def _open() -> Q:
    # A NULL status behaves as scheduled.
    return Q(status__isnull=True) | Q(status=STATUS_SCHEDULED)


def _missed(now: dt.datetime) -> Q:
    return _open() & Q(appointment_date__lte=missed_cutoff(now))


def filter_by_display_status(qs: QuerySet, status: str, now: dt.datetime) -> QuerySet:
    if status == STATUS_MISSED:
        return qs.filter(_missed(now))
    if status == STATUS_SCHEDULED:
        return qs.filter(_open()).exclude(appointment_date__lte=missed_cutoff(now))
    return qs.filter(status=status)


def filter_by_period(qs: QuerySet, period: str, now: dt.datetime) -> QuerySet:
    if period == 'today':
        start, end = localtime.local_day_bounds(now.astimezone(localtime.local_tz()).date())
        return qs.filter(appointment_date__gte=start, appointment_date__lt=end)
    if period == 'upcoming':
        return qs.filter(appointment_date__gte=now)
    if period == 'past':
        return qs.filter(appointment_date__lt=now)
    return qs


def filter_appointments(qs: QuerySet, params: Dict[str, Any], now: Optional[dt.datetime] = None) -> QuerySet:
    """Apply the list filters of the appointments table.

    ``params`` is the ``validated_data`` of
    :class:`records.serializers.appointments.AppointmentListQuerySerializer`.
    """
    now = now or timezone.now()
    search = (params.get('search') or '').strip()
    if search:
        qs = qs.filter(Q(patient_name__icontains=search) | Q(patient_phone_number__icontains=search))
    status = params.get('status')
    if status and status != 'all':
        qs = filter_by_display_status(qs, status, now)
    period = params.get('period')
    if period:
        qs = filter_by_period(qs, period, now)
    qs = localtime.filter_range(qs, 'appointment_date', params.get('start'), params.get('end'))
    return qs.order_by('appointment_date', 'id')


def appointment_stats(qs: QuerySet, now: Optional[dt.datetime] = None) -> Dict[str, int]:
    """Counters shown above the appointments table."""
    now = now or timezone.now()
    today_start, today_end = localtime.local_day_bounds(now.astimezone(localtime.local_tz()).date())
    open_not_missed = _open() & (Q(appointment_date__isnull=True) | Q(appointment_date__gt=missed_cutoff(now)))
    agg = qs.aggregate(
        total=Count('id'),
        scheduled=Count('id', filter=open_not_missed),
        completed=Count('id', filter=Q(status=STATUS_COMPLETED)),
        cancelled=Count('id', filter=Q(status=STATUS_CANCELLED)),
        missed=Count('id', filter=_missed(now)),
        today=Count('id', filter=Q(appointment_date__gte=today_start, appointment_date__lt=today_end)),
    )
    return {k: v or 0 for k, v in agg.items()}


def serialize_appointment(a: MaternityAppointment, now: Optional[dt.datetime] = None) -> Dict[str, Any]:
    now = now or timezone.now()
    shown = display_status(a.status, a.appointment_date, now)
    payload = {
        'id': a.id,
        'patientName': a.patient_name,
        'patientPhoneNumber': a.patient_phone_number,
        'patientAddress': a.patient_address,
        'appointmentReason': a.appointment_reason,
        'appointmentDate': a.appointment_date.isoformat() if a.appointment_date else None,
        'status': a.status or STATUS_SCHEDULED,
        'displayStatus': shown,
        'displayStatusLabel': status_label(shown),
        'daysMissed': days_missed(a.status, a.appointment_date, now),
        'localDate': localtime.local_date_string(a.appointment_date),
        'localTime': localtime.local_time_string(a.appointment_date),
    }
    payload.update(audit_columns(a))
    return payload


def status_rows(a: MaternityAppointment, now: Optional[dt.datetime] = None) -> list:
    """Status block of the PDF sheet, with a warning line for missed appointments."""
    now = now or timezone.now()
    shown = display_status(a.status, a.appointment_date, now)
    label = status_label(shown)
    rows = [('Statut stocké en base', status_label(a.status))]
    if shown == STATUS_MISSED:
        days = days_missed(a.status, a.appointment_date, now)
        rows.append(('Statut affiché (calculé)', f'{label} ({days}j)'))
        rows.append(('Avertissement', f"Ce rendez-vous a été manqué il y a {days} jour{'s' if days > 1 else ''}"))
    else:
        rows.append(('Statut affiché (calculé)', label))
    return rows


def pdf_sheet(a: MaternityAppointment, now: Optional[dt.datetime] = None) -> bytes:
    now = now or timezone.now()
    offset = getattr(settings, 'LOCAL_UTC_OFFSET_HOURS', 3)
    sections = [
        ('INFORMATIONS DU PATIENT', [
            ('Nom complet', a.patient_name),
            ('Téléphone', a.patient_phone_number),
            ('Adresse', a.patient_address),
        ]),
        ('DÉTAILS DU RENDEZ-VOUS', [
            ('Date', localtime.french_long_date(a.appointment_date, empty='')),
            (f'Heure (GMT+{offset})', localtime.format_local(a.appointment_date, '%H:%M', empty='')),
            ('Motif du rendez-vous', a.appointment_reason),
        ]),
        ('INFORMATIONS DU STATUT', status_rows(a, now)),
    ]
    if a.appointment_date:
        sections.append(('INFORMATIONS TECHNIQUES', [
            ('Date/heure UTC (stockée)', a.appointment_date.astimezone(dt.timezone.utc).strftime('%d/%m/%Y %H:%M')),
            (f'Date/heure locale GMT+{offset} (affichée)', localtime.format_local(a.appointment_date, '%d/%m/%Y %H:%M')),
        ]))
    chronology = [('Créé le (UTC)', a.created_at.astimezone(dt.timezone.utc).strftime('%d/%m/%Y %H:%M'))]
    if a.updated_at:
        chronology.append(('Dernière modification (UTC)',
                           a.updated_at.astimezone(dt.timezone.utc).strftime('%d/%m/%Y %H:%M')))
    sections.append(('CHRONOLOGIE', chronology))
    return pdf.render_sheet(
        'Fiche de Rendez-vous - Maternité',
        sections,
        subtitle=f'Rendez-vous #{a.id}',
        footer=[
            f'Département de Maternité - Rendez-vous #{a.id}',
            f'Fuseau horaire: GMT+{offset}. Les heures affichées sont en heure locale.',
        ],
    )


EXPORT_HEADERS = [
    'ID Rendez-vous', 'Nom du patient', 'Téléphone', 'Adresse', 'Motif',
    'Date', 'Heure', 'Statut', 'Date création', 'Dernière modification',
]


def export_rows(qs: QuerySet, now: Optional[dt.datetime] = None):
    now = now or timezone.now()
    for a in qs:
        row = {
            'ID Rendez-vous': a.id,
            'Nom du patient': excel.text(a.patient_name),
            'Téléphone': excel.text(a.patient_phone_number),
            'Adresse': excel.text(a.patient_address),
            'Motif': excel.text(a.appointment_reason),
            'Date': localtime.format_local(a.appointment_date, '%d/%m/%Y'),
            'Heure': localtime.local_time_string(a.appointment_date),
            'Statut': status_label(display_status(a.status, a.appointment_date, now)),
        }
        row.update(excel.audit_cells(a))
        yield row


def export_workbook(qs: QuerySet, start: Optional[dt.date] = None, end: Optional[dt.date] = None):
    """Workbook and file name for the appointments between two local days."""
    qs = localtime.filter_range(qs, 'appointment_date', start, end).order_by('appointment_date', 'id')
    wb = excel.build_workbook('Rendez-vous Maternité', EXPORT_HEADERS, export_rows(qs))
    logger.info('appointments export: %s rows', qs.count())
    return wb, excel.export_filename('rendez_vous_maternite', start, end)
