from rest_framework import serializers

from records.models import ORIGIN_CHOICES, MedicineHospitalization
from records.services.hospitalizations import LEAVE_KEYS, LEAVE_WIRE
from .fields import (
    ListQuerySerializer,
    FilterBooleanField,
    OptionalChoiceField,
    OptionalDateTimeField,
    RequiredTextField,
    TextField,
)


class HospitalizationSerializer(serializers.Serializer):
    fullName = RequiredTextField(source='full_name', max_length=255)
    age = TextField(max_length=16)
    sex = OptionalChoiceField(MedicineHospitalization.SEX_CHOICES)
    origin = OptionalChoiceField(ORIGIN_CHOICES)
    isEmergency = serializers.BooleanField(source='is_emergency', required=False)
    entryDiagnostic = TextField(source='entry_diagnostic')
    leavingDiagnostic = TextField(source='leaving_diagnostic')
    isPregnant = serializers.BooleanField(source='is_pregnant', required=False)
    leavingDate = OptionalDateTimeField(source='leaving_date')

    def get_fields(self):
        fields = super().get_fields()
        for model_field, key in LEAVE_WIRE.items():
            fields[key] = serializers.BooleanField(source=model_field, required=False)
        return fields

    def validate(self, attrs):
        # partial updates are checked against the stored values
        sex = attrs.get('sex', getattr(self.instance, 'sex', None))
        pregnant = attrs.get('is_pregnant', getattr(self.instance, 'is_pregnant', False))
        if pregnant and sex == 'M':
            raise serializers.ValidationError({'isPregnant': 'incompatible avec le sexe masculin'})
        return attrs


class HospitalizationListQuerySerializer(ListQuerySerializer):
    origin = serializers.ChoiceField(choices=['all', 'HD', 'DS'], required=False, allow_blank=True)
    sex = serializers.ChoiceField(choices=['all', 'M', 'F'], required=False, allow_blank=True)
    emergency = FilterBooleanField()
    search = serializers.CharField(required=False, allow_blank=True)
    leaveStatus = serializers.ChoiceField(choices=['all', 'active'] + LEAVE_KEYS, required=False, allow_blank=True)


class DiagnosticSerializer(serializers.Serializer):
    name = RequiredTextField(max_length=255)
