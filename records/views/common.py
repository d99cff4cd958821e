"""
Helpers shared by the register views: paging, exports and PDFs.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from rest_framework.response import Response

from records.serializers.fields import DateRangeQuerySerializer
from records.services import excel, pdf


def paginate(qs, params: Dict[str, Any]) -> Tuple[Any, Optional[dict]]:
    """Slice ``qs`` when ``pageSize`` is given; return rows and paging meta."""
    page_size = params.get('pageSize') or 0
    if not page_size:
        return qs, None
    page = params.get('page') or 1
    total = qs.count()
    start = (page - 1) * page_size
    return qs[start:start + page_size], {'total': total, 'page': page, 'pageSize': page_size}


def list_response(rows, stats: dict, pagination: Optional[dict] = None) -> Response:
    payload = {'ok': True, 'data': rows, 'stats': stats}
    if pagination:
        payload['pagination'] = pagination
    return Response(payload)


def export_response(request, qs, build):
    """Validate ``start``/``end`` and return the workbook produced by ``build``."""
    q = DateRangeQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    wb, filename = build(qs, q.validated_data.get('start'), q.validated_data.get('end'))
    return excel.workbook_response(wb, filename)


def pdf_download(content: bytes, prefix: str, pk: int):
    return pdf.pdf_response(content, f'{prefix}_{pk}.pdf')
