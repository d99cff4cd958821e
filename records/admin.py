"""
Django admin registrations for the records models.

Registering the registers here lets superusers inspect and correct
entries through ``/admin/`` without going through the API.
"""

from django.contrib import admin

from .models import (
    AuditEvent,
    Department,
    DepartmentMember,
    Diagnostic,
    FamilyPlanningRecord,
    MaternityAppointment,
    MaternityDelivery,
    MedicineHospitalization,
    PrenatalRecord,
    User,
)


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'slug', 'name', 'created_at')
    search_fields = ('slug', 'name')


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'is_active', 'is_staff', 'is_superuser')
    list_filter = ('role', 'is_active')
    search_fields = ('username', 'first_name', 'last_name', 'email')


@admin.register(DepartmentMember)
class DepartmentMemberAdmin(admin.ModelAdmin):
    list_display = ('user', 'department', 'joined_at')
    list_filter = ('department',)
    search_fields = ('user__username', 'department__name')


@admin.register(MaternityAppointment)
class MaternityAppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient_name', 'patient_phone_number', 'appointment_date', 'status')
    list_filter = ('status',)
    search_fields = ('patient_name', 'patient_phone_number')


@admin.register(MaternityDelivery)
class MaternityDeliveryAdmin(admin.ModelAdmin):
    list_display = ('id', 'file_number', 'full_name', 'origin', 'delivery_datetime', 'is_mother_dead')
    list_filter = ('origin', 'is_mother_dead')
    search_fields = ('full_name', 'file_number')


@admin.register(FamilyPlanningRecord)
class FamilyPlanningRecordAdmin(admin.ModelAdmin):
    list_display = ('id', 'file_number', 'full_name', 'origin', 'is_new', 'created_at')
    list_filter = ('origin', 'is_new')
    search_fields = ('full_name', 'file_number')


@admin.register(PrenatalRecord)
class PrenatalRecordAdmin(admin.ModelAdmin):
    list_display = ('id', 'file_number', 'full_name', 'visit_cpn1', 'visit_cpn4', 'anemia')
    list_filter = ('anemia',)
    search_fields = ('full_name', 'file_number')


@admin.register(MedicineHospitalization)
class MedicineHospitalizationAdmin(admin.ModelAdmin):
    list_display = ('id', 'full_name', 'sex', 'origin', 'is_emergency', 'created_at')
    list_filter = ('sex', 'origin', 'is_emergency')
    search_fields = ('full_name', 'entry_diagnostic')


admin.site.register(Diagnostic)


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'object_type', 'object_id', 'user', 'created_at')
    list_filter = ('action', 'object_type')
