"""
Maternity delivery register views.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.models import MaternityDelivery
from records.permissions import MaternityAccess
from records.serializers.deliveries import DeliveryListQuerySerializer, DeliverySerializer
from records.services import deliveries as svc
from records.services.registers import create_record, delete_record, get_record_or_404, update_record

from .common import export_response, list_response, paginate, pdf_download

OBJECT_TYPE = 'delivery'


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, MaternityAccess])
def deliveries(request):
    if request.method == 'POST':
        s = DeliverySerializer(data=request.data)
        s.is_valid(raise_exception=True)
        obj = create_record(MaternityDelivery, user=request.user, data=s.validated_data, object_type=OBJECT_TYPE)
        return Response({'ok': True, 'data': svc.serialize_delivery(obj)}, status=201)

    q = DeliveryListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = svc.filter_deliveries(MaternityDelivery.objects.all(), q.validated_data)
    rows, pagination = paginate(qs, q.validated_data)
    return list_response([svc.serialize_delivery(d) for d in rows], svc.delivery_stats(qs), pagination)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, MaternityAccess])
def delivery_detail(request, pk: int):
    obj = get_record_or_404(MaternityDelivery, pk, 'delivery')
    if request.method == 'GET':
        return Response({'ok': True, 'data': svc.serialize_delivery(obj)})
    if request.method == 'DELETE':
        delete_record(obj, user=request.user, object_type=OBJECT_TYPE)
        return Response({'ok': True})
    s = DeliverySerializer(data=request.data, partial=request.method == 'PATCH')
    s.is_valid(raise_exception=True)
    obj = update_record(obj, user=request.user, data=s.validated_data, object_type=OBJECT_TYPE)
    return Response({'ok': True, 'data': svc.serialize_delivery(obj)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, MaternityAccess])
def delivery_pdf(request, pk: int):
    obj = get_record_or_404(MaternityDelivery, pk, 'delivery')
    return pdf_download(svc.pdf_sheet(obj), 'accouchement', obj.pk)


@api_view(['GET'])
@permission_classes([IsAuthenticated, MaternityAccess])
def export_deliveries(request):
    return export_response(request, MaternityDelivery.objects.all(), svc.export_workbook)
