from rest_framework import serializers

from records.models import ORIGIN_CHOICES
from .fields import (
    CountField,
    ListQuerySerializer,
    OptionalChoiceField,
    OptionalDateTimeField,
    OptionalFloatField,
    RequiredTextField,
    TextField,
)


class DeliverySerializer(serializers.Serializer):
    fileNumber = TextField(source='file_number', max_length=64)
    fullName = RequiredTextField(source='full_name', max_length=255)
    address = TextField(max_length=255)
    origin = OptionalChoiceField(ORIGIN_CHOICES)
    workTime = OptionalDateTimeField(source='work_time')
    deliveryDateTime = OptionalDateTimeField(source='delivery_datetime')
    deliveryEutocic = TextField(source='delivery_eutocic', max_length=64)
    deliveryDystocic = TextField(source='delivery_dystocic', max_length=64)
    deliveryTransfert = TextField(source='delivery_transfert', max_length=64)
    weight = OptionalFloatField(min_value=0)
    newbornLiving = CountField(source='newborn_living')
    newbornLessThan2500g = CountField(source='newborn_less_than_2_5kg')
    numberOfDeaths = CountField(source='number_of_deaths')
    numberOfDeathsBefore24h = CountField(source='number_of_deaths_before_24h')
    numberOfDeathsBefore7Days = CountField(source='number_of_deaths_before_7_days')
    isMotherDead = serializers.BooleanField(source='is_mother_dead', required=False)
    transfer = TextField(max_length=255)
    leavingDate = OptionalDateTimeField(source='leaving_date')
    observations = TextField()


class DeliveryListQuerySerializer(ListQuerySerializer):
    origin = serializers.ChoiceField(choices=['all', 'HD', 'DS'], required=False, allow_blank=True)
    search = serializers.CharField(required=False, allow_blank=True)
    deliveryType = serializers.ChoiceField(choices=['all', 'eutocic', 'dystocic', 'transfert'],
                                           required=False, allow_blank=True)
    motherStatus = serializers.ChoiceField(choices=['all', 'dead', 'alive'], required=False, allow_blank=True)
