"""
One-page PDF sheets for individual register entries.

A sheet is a title block, a list of labelled sections and a footer.
The register services decide the content; this module only typesets it
with reportlab.
"""
from __future__ import annotations

import io
from typing import Any, List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape

from django.conf import settings
from django.http import HttpResponse
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from records.services import localtime

NOT_PROVIDED = 'Non renseigné'

Section = Tuple[str, Sequence[Tuple[str, Any]]]


def value_or_default(value: Any) -> str:
    if value is None or value == '':
        return NOT_PROVIDED
    if isinstance(value, bool):
        return 'Oui' if value else 'Non'
    return str(value)


def generated_at_line() -> str:
    now = localtime.now_local()
    offset = getattr(settings, 'LOCAL_UTC_OFFSET_HOURS', 3)
    return f"Document généré le: {now.strftime('%d/%m/%Y %H:%M')} (GMT+{offset})"


def _styles():
    base = getSampleStyleSheet()
    return {
        'title': ParagraphStyle('SheetTitle', parent=base['Title'], fontSize=16, spaceAfter=4),
        'subtitle': ParagraphStyle('SheetSubtitle', parent=base['Normal'], alignment=1,
                                   textColor=colors.HexColor('#4b5563')),
        'section': ParagraphStyle('SheetSection', parent=base['Heading4'], spaceBefore=8, spaceAfter=4,
                                  textColor=colors.HexColor('#1e40af')),
        'cell': ParagraphStyle('SheetCell', parent=base['Normal'], fontSize=9, leading=11),
        'label': ParagraphStyle('SheetLabel', parent=base['Normal'], fontSize=9, leading=11,
                                textColor=colors.HexColor('#6b7280')),
        'footer': ParagraphStyle('SheetFooter', parent=base['Normal'], fontSize=8, alignment=1,
                                 textColor=colors.HexColor('#6b7280')),
    }


def render_sheet(title: str, sections: Sequence[Section], subtitle: Optional[str] = None,
                 footer: Sequence[str] = ()) -> bytes:
    """Typeset a sheet and return the PDF bytes."""
    styles = _styles()
    story: List[Any] = [Paragraph(escape(title), styles['title'])]
    if subtitle:
        story.append(Paragraph(escape(subtitle), styles['subtitle']))
    story.append(Spacer(1, 4 * mm))

    for heading, rows in sections:
        story.append(Paragraph(escape(heading), styles['section']))
        data = [
            [Paragraph(escape(label), styles['label']), Paragraph(escape(value_or_default(value)), styles['cell'])]
            for label, value in rows
        ]
        if not data:
            continue
        table = Table(data, colWidths=[60 * mm, 110 * mm])
        table.setStyle(TableStyle([
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('LINEBELOW', (0, 0), (-1, -1), 0.25, colors.HexColor('#e5e7eb')),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 3),
        ]))
        story.append(table)

    hospital = getattr(settings, 'HOSPITAL_NAME', 'Hôpital des Comores')
    story.append(Spacer(1, 8 * mm))
    story.append(Paragraph(escape(f'Document officiel - {hospital}'), styles['footer']))
    for line in footer:
        story.append(Paragraph(escape(line), styles['footer']))
    story.append(Paragraph(escape(generated_at_line()), styles['footer']))

    bio = io.BytesIO()
    doc = SimpleDocTemplate(bio, pagesize=A4, title=title,
                            leftMargin=18 * mm, rightMargin=18 * mm, topMargin=16 * mm, bottomMargin=16 * mm)
    doc.build(story)
    return bio.getvalue()


def pdf_response(content: bytes, filename: str) -> HttpResponse:
    resp = HttpResponse(content, content_type='application/pdf')
    resp['Content-Disposition'] = f'inline; filename="{filename}"'
    return resp
