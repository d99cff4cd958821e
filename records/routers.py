"""
URL mappings for the hospital records API.

Trailing slashes are deliberately omitted, matching what the front-end
calls.  Every register follows the same shape: a collection path (GET
list, POST create), an item path (GET, PUT, PATCH, DELETE), a PDF sheet
per item and an Excel export of the collection.
"""
from django.urls import path, include

from .auth_views import login_view, jwt_refresh_view, jwt_logout_view
from .views import appointments, deliveries, family_planning, hospitalizations, prenatal, users
from .views.health import healthz

urlpatterns = [
    # Auth
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh_view'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout_view'),
    path('api/auth/me', users.me, name='me'),

    # Maternity: appointments
    path('api/maternity/appointments', appointments.appointments, name='appointments'),
    path('api/maternity/appointments/export', appointments.export_appointments, name='export_appointments'),
    path('api/maternity/appointments/<int:pk>', appointments.appointment_detail, name='appointment_detail'),
    path('api/maternity/appointments/<int:pk>/pdf', appointments.appointment_pdf, name='appointment_pdf'),

    # Maternity: deliveries
    path('api/maternity/deliveries', deliveries.deliveries, name='deliveries'),
    path('api/maternity/deliveries/export', deliveries.export_deliveries, name='export_deliveries'),
    path('api/maternity/deliveries/<int:pk>', deliveries.delivery_detail, name='delivery_detail'),
    path('api/maternity/deliveries/<int:pk>/pdf', deliveries.delivery_pdf, name='delivery_pdf'),

    # Maternity: family planning
    path('api/maternity/family-planning', family_planning.family_planning, name='family_planning'),
    path('api/maternity/family-planning/export', family_planning.export_family_planning,
         name='export_family_planning'),
    path('api/maternity/family-planning/<int:pk>', family_planning.family_planning_detail,
         name='family_planning_detail'),
    path('api/maternity/family-planning/<int:pk>/pdf', family_planning.family_planning_pdf,
         name='family_planning_pdf'),

    # Maternity: prenatal consultations
    path('api/maternity/prenatal', prenatal.prenatal, name='prenatal'),
    path('api/maternity/prenatal/export', prenatal.export_prenatal, name='export_prenatal'),
    path('api/maternity/prenatal/<int:pk>', prenatal.prenatal_detail, name='prenatal_detail'),
    path('api/maternity/prenatal/<int:pk>/pdf', prenatal.prenatal_pdf, name='prenatal_pdf'),

    # Medicine: hospitalizations
    path('api/medicine/hospitalizations', hospitalizations.hospitalizations, name='hospitalizations'),
    path('api/medicine/hospitalizations/export', hospitalizations.export_hospitalizations,
         name='export_hospitalizations'),
    path('api/medicine/hospitalizations/<int:pk>', hospitalizations.hospitalization_detail,
         name='hospitalization_detail'),
    path('api/medicine/hospitalizations/<int:pk>/pdf', hospitalizations.hospitalization_pdf,
         name='hospitalization_pdf'),
    path('api/medicine/diagnostics', hospitalizations.diagnostics, name='diagnostics'),
    path('api/medicine/diagnostics/create', hospitalizations.create_diagnostic, name='create_diagnostic'),

    # Administration
    path('api/admin/users', users.list_users, name='list_users'),
    path('api/admin/users/create', users.create_user, name='create_user'),
    path('api/admin/users/<int:pk>', users.user_detail, name='user_detail'),
    path('api/admin/users/<int:pk>/active', users.set_active, name='set_user_active'),
    path('api/admin/users/<int:pk>/departments', users.user_departments, name='user_departments'),
    path('api/admin/users/<int:pk>/departments/<slug:slug>', users.user_department_remove,
         name='user_department_remove'),
    path('api/departments', users.departments, name='departments'),

    # Health & metrics
    path('healthz', healthz, name='healthz'),
    path('', include('django_prometheus.urls')),
]
