from rest_framework import serializers

from records.models import ORIGIN_CHOICES
from records.services.family_planning import NEW_METHODS, RENEWAL_METHODS
from .fields import (
    CountField,
    ListQuerySerializer,
    FilterBooleanField,
    OptionalChoiceField,
    RequiredTextField,
    TextField,
)


class FamilyPlanningSerializer(serializers.Serializer):
    fileNumber = TextField(source='file_number', max_length=64)
    fullName = RequiredTextField(source='full_name', max_length=255)
    address = TextField(max_length=255)
    origin = OptionalChoiceField(ORIGIN_CHOICES)
    age = TextField(max_length=16)
    isNew = serializers.BooleanField(source='is_new', required=False)

    def get_fields(self):
        fields = super().get_fields()
        for model_field, key, _label in NEW_METHODS + RENEWAL_METHODS:
            fields[key] = CountField(source=model_field)
        return fields


class FamilyPlanningListQuerySerializer(ListQuerySerializer):
    origin = serializers.ChoiceField(choices=['all', 'HD', 'DS'], required=False, allow_blank=True)
    isNew = FilterBooleanField()
    search = serializers.CharField(required=False, allow_blank=True)
    fileNumber = serializers.CharField(required=False, allow_blank=True)
