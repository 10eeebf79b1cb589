"""PDF rendering of manager reports."""

from __future__ import annotations

from io import BytesIO
from typing import Any

from hostel_food.services.report_service import Report
from hostel_food.utils.pdf_fonts import register_pdf_font

REPORT_TITLES: dict[str, str] = {
    "orders": "Orders report",
    "students": "Students report",
    "revenue": "Revenue report",
    "menu-performance": "Menu performance report",
}


def _reportlab():
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4, landscape
    from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
    from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

    return {
        "colors": colors,
        "A4": A4,
        "landscape": landscape,
        "ParagraphStyle": ParagraphStyle,
        "getSampleStyleSheet": getSampleStyleSheet,
        "Paragraph": Paragraph,
        "SimpleDocTemplate": SimpleDocTemplate,
        "Spacer": Spacer,
        "Table": Table,
        "TableStyle": TableStyle,
    }


def _build_styles() -> dict[str, Any]:
    font_name = register_pdf_font()
    rl = _reportlab()
    styles = rl["getSampleStyleSheet"]()
    return {
        "font_name": font_name,
        "title": rl["ParagraphStyle"]("ReportTitle", parent=styles["Title"], fontName=font_name),
        "normal": rl["ParagraphStyle"]("ReportNormal", parent=styles["Normal"], fontName=font_name),
        "cell": rl["ParagraphStyle"]("ReportCell", parent=styles["Normal"], fontName=font_name, fontSize=8, leading=10),
    }


def render_report_pdf(report: Report, meta: dict[str, Any]) -> bytes:
    """Render a report as a single landscape table, header row first."""
    styles = _build_styles()
    rl = _reportlab()

    story: list[Any] = [
        rl["Paragraph"](f"{REPORT_TITLES.get(report.report_type, 'Report')}: {meta.get('university', '-')}", styles["title"]),
        rl["Paragraph"](f"Period: {meta.get('start_date', '-')} to {meta.get('end_date', '-')}", styles["normal"]),
        rl["Paragraph"](f"Generated: {meta.get('generated_at', '-')}", styles["normal"]),
        rl["Spacer"](1, 12),
    ]

    if not report.rows:
        story.append(rl["Paragraph"]("No data for the selected period.", styles["normal"]))
    else:
        table_data = [[rl["Paragraph"](header, styles["cell"]) for header in report.headers]]
        for row in report.rows:
            table_data.append([rl["Paragraph"](str(row.get(header, "")), styles["cell"]) for header in report.headers])
        table = rl["Table"](table_data, repeatRows=1)
        table.setStyle(
            rl["TableStyle"](
                [
                    ("BACKGROUND", (0, 0), (-1, 0), rl["colors"].lightgrey),
                    ("GRID", (0, 0), (-1, -1), 0.5, rl["colors"].black),
                    ("FONTNAME", (0, 0), (-1, -1), styles["font_name"]),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ]
            )
        )
        story.append(table)

    buffer = BytesIO()
    rl["SimpleDocTemplate"](buffer, pagesize=rl["landscape"](rl["A4"])).build(story)
    return buffer.getvalue()
