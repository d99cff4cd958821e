"""
Medicine ward hospitalization views and the diagnostics reference list.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.models import Diagnostic, MedicineHospitalization
from records.permissions import IsAdminRole, MedicineAccess
from records.serializers.hospitalizations import (
    DiagnosticSerializer,
    HospitalizationListQuerySerializer,
    HospitalizationSerializer,
)
from records.services import hospitalizations as svc
from records.services.audit import log_action
from records.services.registers import create_record, delete_record, get_record_or_404, update_record

from .common import export_response, list_response, paginate, pdf_download

OBJECT_TYPE = 'hospitalization'


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, MedicineAccess])
def hospitalizations(request):
    if request.method == 'POST':
        s = HospitalizationSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        obj = create_record(MedicineHospitalization, user=request.user, data=s.validated_data,
                            object_type=OBJECT_TYPE)
        return Response({'ok': True, 'data': svc.serialize_hospitalization(obj)}, status=201)

    q = HospitalizationListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = svc.filter_hospitalizations(MedicineHospitalization.objects.all(), q.validated_data)
    rows, pagination = paginate(qs, q.validated_data)
    return list_response([svc.serialize_hospitalization(h) for h in rows], svc.hospitalization_stats(qs),
                         pagination)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, MedicineAccess])
def hospitalization_detail(request, pk: int):
    obj = get_record_or_404(MedicineHospitalization, pk, 'hospitalization')
    if request.method == 'GET':
        return Response({'ok': True, 'data': svc.serialize_hospitalization(obj)})
    if request.method == 'DELETE':
        delete_record(obj, user=request.user, object_type=OBJECT_TYPE)
        return Response({'ok': True})
    s = HospitalizationSerializer(obj, data=request.data, partial=request.method == 'PATCH')
    s.is_valid(raise_exception=True)
    obj = update_record(obj, user=request.user, data=s.validated_data, object_type=OBJECT_TYPE)
    return Response({'ok': True, 'data': svc.serialize_hospitalization(obj)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, MedicineAccess])
def hospitalization_pdf(request, pk: int):
    obj = get_record_or_404(MedicineHospitalization, pk, 'hospitalization')
    return pdf_download(svc.pdf_sheet(obj), 'hospitalisation', obj.pk)


@api_view(['GET'])
@permission_classes([IsAuthenticated, MedicineAccess])
def export_hospitalizations(request):
    return export_response(request, MedicineHospitalization.objects.all(), svc.export_workbook)


@api_view(['GET'])
@permission_classes([IsAuthenticated, MedicineAccess])
def diagnostics(request):
    return Response({'ok': True, 'data': svc.list_diagnostics()})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def create_diagnostic(request):
    s = DiagnosticSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    obj, created = Diagnostic.objects.get_or_create(name=s.validated_data['name'])
    if created:
        svc.invalidate_diagnostics()
        log_action(user=request.user, action='diagnostic_create', object_type='diagnostic', object_id=obj.id)
    return Response({'ok': True, 'data': {'id': obj.id, 'name': obj.name}}, status=201 if created else 200)
