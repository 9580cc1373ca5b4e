"""점검 보고서 PDF 렌더러 — reportlab (platypus).

Inspection report PDF renderer.
Renders an ``InspectionReport`` document to an A4 PDF held in memory.
Layout follows the report's fixed sections; no data is computed here.
"""

import io
from datetime import datetime
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import KeepTogether, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from safetyhub.schemas.inspection import InspectionReport

BRAND_PRIMARY = HexColor("#3b82f6")
BRAND_DARK = HexColor("#1f2937")
BRAND_GRAY = HexColor("#6b7280")
BRAND_LIGHT = HexColor("#f3f4f6")
STATUS_PASS = HexColor("#10b981")
STATUS_FAIL = HexColor("#ef4444")
FAILED_BG = HexColor("#fef2f2")
NOTICE_BG = HexColor("#fef3c7")
NOTICE_FG = HexColor("#92400e")

_RESULT_COLORS = {"pass": STATUS_PASS, "fail": STATUS_FAIL, "na": BRAND_GRAY}


def _fmt(value: datetime | None) -> str:
    if value is None:
        return "N/A"
    return value.strftime("%B %d, %Y %H:%M")


def _styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "brand": ParagraphStyle("Brand", parent=base["Normal"], fontSize=14, textColor=BRAND_PRIMARY, fontName="Helvetica-Bold"),
        "small": ParagraphStyle("Small", parent=base["Normal"], fontSize=9, textColor=BRAND_GRAY),
        "title": ParagraphStyle("ReportTitle", parent=base["Title"], fontSize=20, textColor=BRAND_DARK, spaceAfter=12),
        "section": ParagraphStyle(
            "Section", parent=base["Heading2"], fontSize=13, textColor=BRAND_DARK,
            backColor=BRAND_LIGHT, borderPadding=4, spaceBefore=10, spaceAfter=8,
        ),
        "cell": ParagraphStyle("Cell", parent=base["Normal"], fontSize=8.5, leading=10.5),
        "cell_bold": ParagraphStyle("CellBold", parent=base["Normal"], fontSize=8.5, leading=10.5, fontName="Helvetica-Bold"),
        "failed": ParagraphStyle("Failed", parent=base["Normal"], fontSize=10, textColor=STATUS_FAIL),
        "notice": ParagraphStyle("Notice", parent=base["Normal"], fontSize=10.5, textColor=NOTICE_FG, backColor=NOTICE_BG, borderPadding=6, leading=14),
    }


def _label_table(rows: list[tuple[str, str]], style: ParagraphStyle) -> Table:
    data = [[Paragraph(f"<b>{escape(label)}</b>", style), Paragraph(escape(value), style)] for label, value in rows]
    table = Table(data, colWidths=[40 * mm, 130 * mm])
    table.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]))
    return table


def render_inspection_report(report: InspectionReport) -> bytes:
    """보고서 문서를 A4 PDF 바이트로 렌더링합니다.

    Render the report document to PDF bytes.

    Args:
        report: 컴파일된 보고서 문서 (Compiled report document)

    Returns:
        bytes: PDF 파일 내용 (PDF file content)
    """
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=18 * mm,
        title=f"{report.header.title} {report.metadata.reference}",
    )
    s = _styles()
    story: list = []

    # 헤더 — Header
    header = Table(
        [[Paragraph(escape(report.header.system_name), s["brand"]),
          Paragraph(f"Report Generated: {_fmt(report.header.generated_at)}", s["small"])]],
        colWidths=[110 * mm, 70 * mm],
    )
    header.setStyle(TableStyle([
        ("LINEBELOW", (0, 0), (-1, 0), 1.5, BRAND_PRIMARY),
        ("ALIGN", (1, 0), (1, 0), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
    ]))
    story += [header, Spacer(1, 6 * mm), Paragraph(escape(report.header.title), s["title"])]

    # 점검 정보 — Inspection information
    meta = report.metadata
    story.append(Paragraph("Inspection Information", s["section"]))
    story.append(_label_table([
        ("Inspection ID:", meta.reference),
        ("Checklist:", meta.checklist_name or "N/A"),
        ("Category:", meta.category or "N/A"),
        ("Inspector:", meta.inspector_name or meta.inspector_id),
        ("Started At:", _fmt(meta.started_at)),
        ("Submitted At:", _fmt(meta.submitted_at)),
    ], s["cell"]))

    # 요약 — Summary counts
    summary = report.summary
    story.append(Paragraph("Inspection Summary", s["section"]))
    story.append(_label_table([
        ("Total Items:", str(summary.total)),
        ("Passed:", str(summary.passed)),
        ("Failed:", str(summary.failed)),
        ("Not Applicable:", str(summary.na)),
        ("Critical Fails:", str(summary.critical_fails)),
    ], s["cell"]))

    # 결과 표 — Per-item results table
    story.append(Paragraph("Inspection Results", s["section"]))
    data = [[Paragraph(h, s["cell_bold"]) for h in ("#", "Item", "Result", "Critical", "Notes")]]
    row_styles: list[tuple] = []
    for row in report.results:
        data.append([
            Paragraph(str(row.index), s["cell"]),
            Paragraph(escape(row.item_text), s["cell"]),
            Paragraph(row.result.upper(), s["cell_bold"]),
            Paragraph("CRITICAL" if row.critical else "No", s["cell_bold"] if row.critical else s["cell"]),
            Paragraph(escape(row.note) if row.note else "-", s["cell"]),
        ])
        line = len(data) - 1
        row_styles.append(("TEXTCOLOR", (2, line), (2, line), _RESULT_COLORS[row.result]))
        if row.critical:
            row_styles.append(("TEXTCOLOR", (3, line), (3, line), STATUS_FAIL))
    results = Table(data, colWidths=[10 * mm, 85 * mm, 18 * mm, 22 * mm, 45 * mm], repeatRows=1)
    results.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), BRAND_LIGHT),
        ("LINEBELOW", (0, 0), (-1, -1), 0.5, colors.lightgrey),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        *row_styles,
    ]))
    story.append(results)

    # 실패 항목 상세 — Failed item details
    if report.failed_items:
        story.append(Paragraph(f"Failed Items ({len(report.failed_items)})", s["section"]))
        for failed in report.failed_items:
            rows = [("Item:", failed.item_text)]
            if failed.critical:
                rows.append(("Status:", "CRITICAL FAILURE"))
            if failed.note:
                rows.append(("Notes:", failed.note))
            if failed.photo_count:
                rows.append(("Photos:", f"{failed.photo_count} photo(s) attached"))
            block = _label_table(rows, s["failed"])
            block.setStyle(TableStyle([("BACKGROUND", (0, 0), (-1, -1), FAILED_BG)]))
            story.append(KeepTogether([block, Spacer(1, 3 * mm)]))

    if report.actions_notice:
        story.append(Paragraph("Auto-Generated Actions", s["section"]))
        story.append(Paragraph(escape(report.actions_notice), s["notice"]))

    footer_text = (
        f"This report was generated by the {report.header.system_name} "
        f"on {report.header.generated_at.strftime('%B %d, %Y')}"
    )

    def _footer(canvas, _doc) -> None:  # noqa: ANN001
        canvas.saveState()
        canvas.setFont("Helvetica", 8)
        canvas.setFillColor(BRAND_GRAY)
        canvas.drawCentredString(A4[0] / 2, 10 * mm, footer_text)
        canvas.drawRightString(A4[0] - 15 * mm, 10 * mm, f"Page {canvas.getPageNumber()}")
        canvas.restoreState()

    doc.build(story, onFirstPage=_footer, onLaterPages=_footer)
    return buffer.getvalue()
