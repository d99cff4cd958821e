"""
Maternity appointment views.

Lists carry each row's display status (missed appointments are derived
at read time) and the counters shown above the table.
"""
from __future__ import annotations

from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.models import MaternityAppointment
from records.permissions import MaternityAccess
from records.serializers.appointments import AppointmentListQuerySerializer, AppointmentSerializer
from records.services import appointments as svc
from records.services.registers import create_record, delete_record, get_record_or_404, update_record

from .common import export_response, list_response, paginate, pdf_download

OBJECT_TYPE = 'appointment'


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, MaternityAccess])
def appointments(request):
    if request.method == 'POST':
        s = AppointmentSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        obj = create_record(MaternityAppointment, user=request.user, data=s.validated_data, object_type=OBJECT_TYPE)
        return Response({'ok': True, 'data': svc.serialize_appointment(obj)}, status=201)

    q = AppointmentListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    now = timezone.now()
    qs = svc.filter_appointments(MaternityAppointment.objects.all(), q.validated_data, now)
    rows, pagination = paginate(qs, q.validated_data)
    stats = svc.appointment_stats(MaternityAppointment.objects.all(), now)
    return list_response([svc.serialize_appointment(a, now) for a in rows], stats, pagination)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, MaternityAccess])
def appointment_detail(request, pk: int):
    obj = get_record_or_404(MaternityAppointment, pk, 'appointment')
    if request.method == 'GET':
        return Response({'ok': True, 'data': svc.serialize_appointment(obj)})
    if request.method == 'DELETE':
        delete_record(obj, user=request.user, object_type=OBJECT_TYPE)
        return Response({'ok': True})
    s = AppointmentSerializer(data=request.data, partial=request.method == 'PATCH')
    s.is_valid(raise_exception=True)
    obj = update_record(obj, user=request.user, data=s.validated_data, object_type=OBJECT_TYPE)
    return Response({'ok': True, 'data': svc.serialize_appointment(obj)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, MaternityAccess])
def appointment_pdf(request, pk: int):
    obj = get_record_or_404(MaternityAppointment, pk, 'appointment')
    return pdf_download(svc.pdf_sheet(obj), 'rendez_vous', obj.pk)


@api_view(['GET'])
@permission_classes([IsAuthenticated, MaternityAccess])
def export_appointments(request):
    return export_response(request, MaternityAppointment.objects.all(), svc.export_workbook)
