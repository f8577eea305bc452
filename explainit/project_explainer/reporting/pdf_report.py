"""
PDF export of a normalized project analysis.

- Table column headers have WHITE background, BLACK + BOLD text
- Header rows repeat on every page (repeatRows=1)
- Long lists follow the same "+N more" truncation as the HTML report
"""

from __future__ import annotations

import io
from typing import Any, Dict, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..normalizer.models import Analysis
from ..presentation import detection_label, format_mb, more_label, truncate


def _as_str(x: Any, default: str = "—") -> str:
    if x is None:
        return default
    s = str(x).strip()
    return escape(s) if s else default


def _join(items: Any, default: str = "None detected") -> str:
    items = list(items or [])
    return escape(", ".join(items)) if items else default


def _styles() -> Dict[str, ParagraphStyle]:
    styles = getSampleStyleSheet()
    cell = ParagraphStyle(
        "cell",
        parent=styles["BodyText"],
        fontName="Helvetica",
        fontSize=9,
        leading=11,
        textColor=colors.black,
    )
    return {
        "title": ParagraphStyle(
            "title",
            parent=styles["Title"],
            fontName="Helvetica-Bold",
            fontSize=20,
            leading=24,
            alignment=1,  # center
            textColor=colors.black,
        ),
        "h2": ParagraphStyle(
            "h2",
            parent=styles["Heading2"],
            fontName="Helvetica-Bold",
            fontSize=14,
            leading=18,
            textColor=colors.black,
            spaceBefore=10,
            spaceAfter=6,
        ),
        "body": ParagraphStyle(
            "body",
            parent=styles["BodyText"],
            fontName="Helvetica",
            fontSize=10,
            leading=13,
            textColor=colors.black,
        ),
        "cell": cell,
        "header": ParagraphStyle(
            "header_cell",
            parent=cell,
            fontName="Helvetica-Bold",
            textColor=colors.black,
        ),
    }


GRID = colors.HexColor("#9CA3AF")    # gray-400
ALT_ROW = colors.HexColor("#F3F4F6") # gray-100
WHITE = colors.white


def _table(header: List[str], rows: List[List[str]], col_widths: List[float], st: Dict[str, ParagraphStyle]) -> Table:
    data: List[List[Any]] = [[Paragraph(h, st["header"]) for h in header]]
    for row in rows:
        data.append([Paragraph(cell, st["cell"]) for cell in row])

    tbl = Table(data, colWidths=col_widths, repeatRows=1)
    tbl.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), WHITE),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.black),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("LINEBELOW", (0, 0), (-1, 0), 1.2, colors.black),
        ("GRID", (0, 0), (-1, -1), 0.6, GRID),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("TOPPADDING", (0, 0), (-1, -1), 5),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
        ("LEFTPADDING", (0, 0), (-1, -1), 6),
        ("RIGHTPADDING", (0, 0), (-1, -1), 6),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [WHITE, ALT_ROW]),
    ]))
    return tbl


def generate_pdf_bytes(
    analysis: Analysis,
    *,
    report_id: str = "",
    meta: Optional[Dict[str, Any]] = None,
    limit: int = 100,
) -> bytes:
    meta = meta or {}
    a = analysis
    st = _styles()

    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=16 * mm,
        rightMargin=16 * mm,
        topMargin=14 * mm,
        bottomMargin=14 * mm,
        title="Project Analysis Report",
        author="ExplainIt",
    )

    story: List[Any] = []
    story.append(Paragraph("Project Analysis Report", st["title"]))
    story.append(Spacer(1, 10))

    meta_lines = [
        f"<b>Report ID:</b> {_as_str(report_id)}",
        f"<b>Archive:</b> {_as_str(meta.get('project_name'))}",
        f"<b>Project Type:</b> {_as_str(a.project_type)}",
        f"<b>Languages:</b> {_join(a.languages)}",
        f"<b>Frameworks:</b> {_join(a.frameworks)}",
        f"<b>Summary:</b> {_as_str(a.summary)}",
    ]
    for line in meta_lines:
        story.append(Paragraph(line, st["body"]))
    if a.is_empty:
        story.append(Spacer(1, 6))
        story.append(Paragraph("Nothing was detected in this archive.", st["body"]))
    story.append(Spacer(1, 12))

    if a.build_info:
        b = a.build_info
        story.append(Paragraph("Build Information", st["h2"]))
        rows = [["Build Tool", _as_str(b.build_tool)]]
        for label, value in (
            ("Java Version", b.java_version),
            ("Spring Boot Version", b.spring_boot_version),
            ("Node Version", b.node_version),
            ("Python Version", b.python_version),
        ):
            if value:
                rows.append([label, _as_str(value)])
        deps, hidden = truncate(b.dependencies, limit)
        rows.append(["Dependencies", _join(deps) + (f" ({more_label(hidden)})" if hidden else "")])
        story.append(_table(["Field", "Value"], rows, [45 * mm, 133 * mm], st))

    if a.entry_points:
        story.append(Paragraph("Entry Points", st["h2"]))
        shown, hidden = truncate(a.entry_points, limit)
        rows = [[_as_str(e.file_path), _as_str(f"{e.class_name}.{e.method_name}()")] for e in shown]
        story.append(_table(["File", "Entry"], rows, [100 * mm, 78 * mm], st))
        if hidden:
            story.append(Paragraph(more_label(hidden), st["body"]))

    if a.api_routes:
        story.append(Paragraph("API Routes", st["h2"]))
        shown, hidden = truncate(a.api_routes, limit)
        rows = [[_as_str(r.method), _as_str(r.display_path), _as_str(r.display_controller)] for r in shown]
        story.append(_table(["Method", "Path", "Controller"], rows, [22 * mm, 96 * mm, 60 * mm], st))
        if hidden:
            story.append(Paragraph(more_label(hidden), st["body"]))

    for title, hints, detections in (
        ("Security Analysis", a.security_hints, a.security_detections),
        ("Data Layer Analysis", a.data_layer_hints, a.data_layer_detections),
    ):
        if not hints and not detections:
            continue
        story.append(Paragraph(title, st["h2"]))
        if hints:
            story.append(Paragraph(f"<b>Hints:</b> {_join(hints)}", st["body"]))
        shown, hidden = truncate(detections, limit)
        if shown:
            rows = [
                [_as_str(detection_label(d)), _as_str(d.confidence, ""), _as_str(d.source_file, "")]
                for d in shown
            ]
            story.append(_table(["Finding", "Confidence", "Source"], rows, [100 * mm, 25 * mm, 53 * mm], st))
        if hidden:
            story.append(Paragraph(more_label(hidden), st["body"]))

    if a.project_size:
        p = a.project_size
        story.append(Paragraph("Project Size", st["h2"]))
        story.append(Paragraph(f"<b>Total Size:</b> {format_mb(p.total_size_kb * 1024)}", st["body"]))
        story.append(Paragraph(f"<b>Total Lines:</b> {_as_str(p.total_lines)}", st["body"]))
        story.append(Paragraph(f"<b>Files:</b> {_as_str(p.file_count)}", st["body"]))

    if a.project_structure:
        s = a.project_structure
        story.append(Paragraph("Project Structure", st["h2"]))
        story.append(Paragraph(f"<b>Files:</b> {_as_str(s.file_count)}", st["body"]))
        story.append(Paragraph(f"<b>Total Size:</b> {format_mb(s.total_size)}", st["body"]))
        story.append(Paragraph(f"<b>Directories:</b> {len(s.directories)}", st["body"]))
        story.append(Paragraph(f"<b>Source Directories:</b> {_join(s.source_directories)}", st["body"]))
        story.append(Paragraph(f"<b>Test Directories:</b> {_join(s.test_directories)}", st["body"]))

    doc.build(story)
    return buf.getvalue()
