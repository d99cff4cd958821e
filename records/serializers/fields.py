"""
Serializer fields shared by the register forms and list filters.

Forms post empty strings for untouched inputs; these fields turn them
into ``None`` so optional columns stay NULL instead of failing
validation.  Free text is stripped of markup with bleach.
"""
import html

import bleach
from rest_framework import serializers
from rest_framework.fields import empty

from records.services import localtime


def clean_text(value):
    if value is None:
        return None
    value = html.unescape(bleach.clean(str(value), tags=[], strip=True)).strip()
    return value or None


class BlankAsNullMixin:
    def validate_empty_values(self, data):
        if isinstance(data, str) and not data.strip():
            data = None
        return super().validate_empty_values(data)


class TextField(serializers.CharField):
    """Optional free text, markup stripped, blank stored as NULL."""

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        kwargs.setdefault('allow_blank', True)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        return clean_text(super().to_internal_value(data))


class RequiredTextField(serializers.CharField):
    def to_internal_value(self, data):
        value = clean_text(super().to_internal_value(data))
        if not value:
            raise serializers.ValidationError('Ce champ est obligatoire.')
        return value


class CountField(BlankAsNullMixin, serializers.IntegerField):
    """Optional non-negative integer."""

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        kwargs.setdefault('min_value', 0)
        super().__init__(**kwargs)


class OptionalFloatField(BlankAsNullMixin, serializers.FloatField):
    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        super().__init__(**kwargs)


class LocalDateTimeField(serializers.DateTimeField):
    """Timestamp; values without an offset are read at LOCAL_UTC_OFFSET_HOURS."""

    def default_timezone(self):
        return localtime.local_tz()


class OptionalDateTimeField(BlankAsNullMixin, LocalDateTimeField):
    """Optional timestamp, blank stored as NULL."""

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        super().__init__(**kwargs)


class OptionalDateField(BlankAsNullMixin, serializers.DateField):
    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        super().__init__(**kwargs)


class OptionalChoiceField(BlankAsNullMixin, serializers.ChoiceField):
    def __init__(self, choices, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        super().__init__(choices, **kwargs)


class FilterBooleanField(serializers.BooleanField):
    """Query-string boolean where absent, blank or ``all`` means no filter."""
    default_empty_html = empty

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        super().__init__(**kwargs)

    def validate_empty_values(self, data):
        if isinstance(data, str) and data.strip().lower() in ('', 'all'):
            data = None
        return super().validate_empty_values(data)


class DateRangeQuerySerializer(serializers.Serializer):
    """``start``/``end`` local calendar days, both inclusive."""
    start = serializers.DateField(required=False)
    end = serializers.DateField(required=False)

    def validate(self, attrs):
        start, end = attrs.get('start'), attrs.get('end')
        if start and end and start > end:
            raise serializers.ValidationError({'end': 'la date de fin précède la date de début'})
        return attrs


class ListQuerySerializer(DateRangeQuerySerializer):
    page = serializers.IntegerField(required=False, min_value=1)
    pageSize = serializers.IntegerField(required=False, min_value=1, max_value=500)
