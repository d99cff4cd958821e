"""
Prenatal consultation (CPN) views.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.models import PrenatalRecord
from records.permissions import MaternityAccess
from records.serializers.prenatal import PrenatalListQuerySerializer, PrenatalSerializer
from records.services import prenatal as svc
from records.services.registers import create_record, delete_record, get_record_or_404, update_record

from .common import export_response, list_response, paginate, pdf_download

OBJECT_TYPE = 'prenatal'


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, MaternityAccess])
def prenatal(request):
    if request.method == 'POST':
        s = PrenatalSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        obj = create_record(PrenatalRecord, user=request.user, data=s.validated_data, object_type=OBJECT_TYPE)
        return Response({'ok': True, 'data': svc.serialize_prenatal(obj)}, status=201)

    q = PrenatalListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = svc.filter_prenatal(PrenatalRecord.objects.all(), q.validated_data)
    rows, pagination = paginate(qs, q.validated_data)
    return list_response([svc.serialize_prenatal(r) for r in rows], svc.prenatal_stats(qs), pagination)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, MaternityAccess])
def prenatal_detail(request, pk: int):
    obj = get_record_or_404(PrenatalRecord, pk, 'prenatal record')
    if request.method == 'GET':
        return Response({'ok': True, 'data': svc.serialize_prenatal(obj)})
    if request.method == 'DELETE':
        delete_record(obj, user=request.user, object_type=OBJECT_TYPE)
        return Response({'ok': True})
    s = PrenatalSerializer(data=request.data, partial=request.method == 'PATCH')
    s.is_valid(raise_exception=True)
    obj = update_record(obj, user=request.user, data=s.validated_data, object_type=OBJECT_TYPE)
    return Response({'ok': True, 'data': svc.serialize_prenatal(obj)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, MaternityAccess])
def prenatal_pdf(request, pk: int):
    obj = get_record_or_404(PrenatalRecord, pk, 'prenatal record')
    return pdf_download(svc.pdf_sheet(obj), 'cpn', obj.pk)


@api_view(['GET'])
@permission_classes([IsAuthenticated, MaternityAccess])
def export_prenatal(request):
    return export_response(request, PrenatalRecord.objects.all(), svc.export_workbook)
