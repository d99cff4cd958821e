from rest_framework import serializers

from records.models import PrenatalRecord
from records.services.prenatal import IRON_DOSES, SP_DOSES, VISITS
from .fields import (
    ListQuerySerializer,
    OptionalChoiceField,
    OptionalDateField,
    RequiredTextField,
    TextField,
)

YES_NO = ['all', 'yes', 'no']


class PrenatalSerializer(serializers.Serializer):
    fileNumber = TextField(source='file_number', max_length=64)
    fullName = RequiredTextField(source='full_name', max_length=255)
    patientAge = TextField(source='patient_age', max_length=16)
    pregnancyAge = TextField(source='pregnancy_age', max_length=32)
    anemia = OptionalChoiceField(PrenatalRecord.ANEMIA_CHOICES)
    ironFolicAcid = OptionalChoiceField(PrenatalRecord.IRON_FOLIC_CHOICES, source='iron_folic_acid')
    observations = TextField()

    def get_fields(self):
        fields = super().get_fields()
        for model_field, key, _label in VISITS:
            fields[key] = OptionalDateField(source=model_field)
        for model_field, key, _label in IRON_DOSES + SP_DOSES:
            fields[key] = serializers.BooleanField(source=model_field, required=False)
        return fields


class PrenatalListQuerySerializer(ListQuerySerializer):
    search = serializers.CharField(required=False, allow_blank=True)
    fileNumber = serializers.CharField(required=False, allow_blank=True)
    hasCPN1 = serializers.ChoiceField(choices=YES_NO, required=False, allow_blank=True)
    hasCPN4 = serializers.ChoiceField(choices=YES_NO, required=False, allow_blank=True)
    hasAnemia = serializers.ChoiceField(choices=YES_NO, required=False, allow_blank=True)
