from rest_framework import serializers

from records.models import MaternityAppointment
from records.services.appointments import DISPLAY_STATUSES, PERIODS
from .fields import ListQuerySerializer, LocalDateTimeField, RequiredTextField, TextField


class AppointmentSerializer(serializers.Serializer):
    patientName = RequiredTextField(source='patient_name', max_length=255)
    patientPhoneNumber = RequiredTextField(source='patient_phone_number', max_length=32)
    patientAddress = TextField(source='patient_address', max_length=255)
    appointmentReason = TextField(source='appointment_reason')
    appointmentDate = LocalDateTimeField(source='appointment_date')
    # "missed" is derived at read time and can never be stored.
    status = serializers.ChoiceField(choices=MaternityAppointment.STATUS_CHOICES, required=False)


class AppointmentListQuerySerializer(ListQuerySerializer):
    search = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=('all',) + DISPLAY_STATUSES, required=False, allow_blank=True)
    period = serializers.ChoiceField(choices=PERIODS, required=False, allow_blank=True)
