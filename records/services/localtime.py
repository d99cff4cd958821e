"""
Conversions between stored UTC timestamps and the hospital wall clock.

The hospital runs on a fixed offset from UTC (GMT+3 for the Comoros, no
daylight saving).  Everything is stored in UTC; this module is the single
place that shifts values to and from local time for display, for
"today"-style filters and for exported documents.
"""
from __future__ import annotations

import datetime as dt
from typing import Optional, Tuple, Union

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

EMPTY = '—'

FRENCH_WEEKDAYS = ['lundi', 'mardi', 'mercredi', 'jeudi', 'vendredi', 'samedi', 'dimanche']
FRENCH_MONTHS = [
    'janvier', 'février', 'mars', 'avril', 'mai', 'juin',
    'juillet', 'août', 'septembre', 'octobre', 'novembre', 'décembre',
]

DateTimeLike = Union[dt.datetime, str, None]


def local_offset() -> dt.timedelta:
    return dt.timedelta(hours=getattr(settings, 'LOCAL_UTC_OFFSET_HOURS', 3))


def local_tz() -> dt.tzinfo:
    return dt.timezone(local_offset())


def _coerce(value: DateTimeLike, naive_tz: dt.tzinfo) -> Optional[dt.datetime]:
    if value is None or value == '':
        return None
    if isinstance(value, str):
        parsed = parse_datetime(value)
        if parsed is None:
            day = parse_date(value)
            if day is None:
                raise ValueError(f'invalid timestamp: {value!r}')
            parsed = dt.datetime.combine(day, dt.time.min)
        value = parsed
    elif isinstance(value, dt.date) and not isinstance(value, dt.datetime):
        value = dt.datetime.combine(value, dt.time.min)
    if timezone.is_naive(value):
        value = value.replace(tzinfo=naive_tz)
    return value


def to_local(value: DateTimeLike) -> Optional[dt.datetime]:
    """Shift a UTC timestamp to the hospital clock.

    Naive datetimes are taken to be UTC, as the database returns them
    when ``USE_TZ`` is off.  ISO strings are accepted.
    """
    value = _coerce(value, dt.timezone.utc)
    if value is None:
        return None
    return value.astimezone(local_tz())


def to_utc(value: DateTimeLike) -> Optional[dt.datetime]:
    """Inverse of :func:`to_local`; naive values are local wall-clock times."""
    value = _coerce(value, local_tz())
    if value is None:
        return None
    return value.astimezone(dt.timezone.utc)


def now_local() -> dt.datetime:
    return timezone.now().astimezone(local_tz())


def local_today() -> dt.date:
    return now_local().date()


def local_day_bounds(day: dt.date) -> Tuple[dt.datetime, dt.datetime]:
    """UTC ``[start, end)`` of a local calendar day.

    With GMT+3 the day starts at 21:00 UTC on the previous date.
    """
    start = dt.datetime.combine(day, dt.time.min, tzinfo=local_tz())
    end = start + dt.timedelta(days=1)
    return start.astimezone(dt.timezone.utc), end.astimezone(dt.timezone.utc)


def local_range_bounds(
    start_day: Optional[dt.date], end_day: Optional[dt.date]
) -> Tuple[Optional[dt.datetime], Optional[dt.datetime]]:
    """UTC ``[start, end)`` covering the local days ``start_day..end_day`` inclusive.

    Either side may be ``None`` for an open range.
    """
    start = local_day_bounds(start_day)[0] if start_day else None
    end = local_day_bounds(end_day)[1] if end_day else None
    return start, end


def filter_range(qs, field: str, start_day: Optional[dt.date], end_day: Optional[dt.date]):
    """Restrict ``qs`` to rows whose ``field`` falls within the local day range."""
    start, end = local_range_bounds(start_day, end_day)
    if start is not None:
        qs = qs.filter(**{f'{field}__gte': start})
    if end is not None:
        qs = qs.filter(**{f'{field}__lt': end})
    return qs


def format_local(value: DateTimeLike, fmt: str, empty: str = EMPTY) -> str:
    local = to_local(value)
    if local is None:
        return empty
    return local.strftime(fmt)


def local_time_string(value: DateTimeLike) -> str:
    return format_local(value, '%H:%M')


def local_date_string(value: DateTimeLike) -> str:
    return format_local(value, '%Y-%m-%d')


def french_long_date(value: DateTimeLike, empty: str = EMPTY) -> str:
    """``lundi 05 mai 2025`` for the local day of ``value``."""
    local = to_local(value)
    if local is None:
        return empty
    return f'{FRENCH_WEEKDAYS[local.weekday()]} {local.day:02d} {FRENCH_MONTHS[local.month - 1]} {local.year}'


def french_day_date(value: Union[dt.date, None], empty: str = EMPTY) -> str:
    """Plain calendar date (no time zone shift) as ``dd/mm/YYYY``."""
    if not value:
        return empty
    return value.strftime('%d/%m/%Y')
