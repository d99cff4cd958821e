"""
Family planning register views.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.models import FamilyPlanningRecord
from records.permissions import MaternityAccess
from records.serializers.family_planning import FamilyPlanningListQuerySerializer, FamilyPlanningSerializer
from records.services import family_planning as svc
from records.services.registers import create_record, delete_record, get_record_or_404, update_record

from .common import export_response, list_response, paginate, pdf_download

OBJECT_TYPE = 'family_planning'


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, MaternityAccess])
def family_planning(request):
    if request.method == 'POST':
        s = FamilyPlanningSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        obj = create_record(FamilyPlanningRecord, user=request.user, data=s.validated_data, object_type=OBJECT_TYPE)
        return Response({'ok': True, 'data': svc.serialize_family_planning(obj)}, status=201)

    q = FamilyPlanningListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = svc.filter_family_planning(FamilyPlanningRecord.objects.all(), q.validated_data)
    rows, pagination = paginate(qs, q.validated_data)
    return list_response([svc.serialize_family_planning(r) for r in rows], svc.family_planning_stats(qs), pagination)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, MaternityAccess])
def family_planning_detail(request, pk: int):
    obj = get_record_or_404(FamilyPlanningRecord, pk, 'family planning record')
    if request.method == 'GET':
        return Response({'ok': True, 'data': svc.serialize_family_planning(obj)})
    if request.method == 'DELETE':
        delete_record(obj, user=request.user, object_type=OBJECT_TYPE)
        return Response({'ok': True})
    s = FamilyPlanningSerializer(data=request.data, partial=request.method == 'PATCH')
    s.is_valid(raise_exception=True)
    obj = update_record(obj, user=request.user, data=s.validated_data, object_type=OBJECT_TYPE)
    return Response({'ok': True, 'data': svc.serialize_family_planning(obj)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, MaternityAccess])
def family_planning_pdf(request, pk: int):
    obj = get_record_or_404(FamilyPlanningRecord, pk, 'family planning record')
    return pdf_download(svc.pdf_sheet(obj), 'planning_familial', obj.pk)


@api_view(['GET'])
@permission_classes([IsAuthenticated, MaternityAccess])
def export_family_planning(request):
    return export_response(request, FamilyPlanningRecord.objects.all(), svc.export_workbook)
