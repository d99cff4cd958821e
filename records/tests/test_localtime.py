import datetime as dt

from django.utils import timezone

from records.services import localtime

UTC = dt.timezone.utc


def test_to_local_shifts_three_hours():
    local = localtime.to_local(dt.datetime(2025, 5, 4, 22, 30, tzinfo=UTC))
    assert (local.year, local.month, local.day, local.hour, local.minute) == (2025, 5, 5, 1, 30)
    assert local.utcoffset() == dt.timedelta(hours=3)


def test_to_local_reads_naive_and_iso_values_as_utc():
    assert localtime.to_local(dt.datetime(2025, 1, 1, 0, 0)).hour == 3
    assert localtime.to_local('2025-01-01T10:00:00Z').hour == 13
    assert localtime.to_local(None) is None
    assert localtime.to_local('') is None


def test_to_utc_reads_naive_values_as_local():
    assert localtime.to_utc(dt.datetime(2025, 1, 1, 2, 0)) == dt.datetime(2024, 12, 31, 23, 0, tzinfo=UTC)


def test_local_day_starts_at_21h_utc_the_day_before():
    start, end = localtime.local_day_bounds(dt.date(2025, 3, 10))
    assert start == dt.datetime(2025, 3, 9, 21, 0, tzinfo=UTC)
    assert end == dt.datetime(2025, 3, 10, 21, 0, tzinfo=UTC)


def test_local_range_bounds_inclusive_and_open_ended():
    start, end = localtime.local_range_bounds(dt.date(2025, 3, 1), dt.date(2025, 3, 31))
    assert start == dt.datetime(2025, 2, 28, 21, 0, tzinfo=UTC)
    assert end == dt.datetime(2025, 3, 31, 21, 0, tzinfo=UTC)
    assert localtime.local_range_bounds(None, None) == (None, None)
    assert localtime.local_range_bounds(None, dt.date(2025, 3, 1))[0] is None


def test_strings_for_display():
    value = dt.datetime(2025, 5, 4, 22, 5, tzinfo=UTC)
    assert localtime.local_time_string(value) == '01:05'
    assert localtime.local_date_string(value) == '2025-05-05'
    assert localtime.local_time_string(None) == '—'
    assert localtime.local_date_string(None) == '—'


def test_french_long_date_uses_local_day():
    # 2025-05-04 22:00 UTC is Monday 5 May in GMT+3
    assert localtime.french_long_date(dt.datetime(2025, 5, 4, 22, 0, tzinfo=UTC)) == 'lundi 05 mai 2025'
    assert localtime.french_day_date(dt.date(2025, 8, 15)) == '15/08/2025'
    assert localtime.french_day_date(None) == '—'


def test_offset_follows_settings(settings):
    settings.LOCAL_UTC_OFFSET_HOURS = 2
    assert localtime.to_local(dt.datetime(2025, 1, 1, 0, 0, tzinfo=UTC)).hour == 2


def test_default_timezone_matches_local_offset(settings):
    tz = timezone.get_default_timezone()
    offset = dt.timedelta(hours=settings.LOCAL_UTC_OFFSET_HOURS)
    assert tz.utcoffset(dt.datetime(2025, 1, 15)) == offset
    assert tz.utcoffset(dt.datetime(2025, 7, 15)) == offset
