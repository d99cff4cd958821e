import bleach
from rest_framework import serializers

from records.models import User


def clean_full_name(v):
    v = bleach.clean((v or '').strip(), strip=True)
    if len(v) < 2:
        raise serializers.ValidationError('Le nom complet est requis')
    return v


def clean_phone(v):
    return bleach.clean((v or '').strip(), strip=True)


class UserCreateSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField(required=False, allow_blank=True)
    password = serializers.CharField(min_length=6, write_only=True)
    fullName = serializers.CharField(max_length=150)
    phoneNumber = serializers.CharField(required=False, allow_blank=True, max_length=32)
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES)
    department = serializers.SlugField()

    def validate_fullName(self, v):
        return clean_full_name(v)

    def validate_phoneNumber(self, v):
        return clean_phone(v)


class UserActiveSerializer(serializers.Serializer):
    isActive = serializers.BooleanField()


class UserListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, required=False)
    department = serializers.SlugField(required=False)


class UserUpdateSerializer(serializers.Serializer):
    """Partial profile update; omitted fields are left unchanged."""
    fullName = serializers.CharField(max_length=150, required=False)
    phoneNumber = serializers.CharField(required=False, allow_blank=True, max_length=32)
    email = serializers.EmailField(required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, required=False)

    def validate_fullName(self, v):
        return clean_full_name(v)

    def validate_phoneNumber(self, v):
        return clean_phone(v)


class UserDepartmentSerializer(serializers.Serializer):
    department = serializers.SlugField()
