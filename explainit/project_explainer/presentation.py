# explainit/project_explainer/presentation.py
"""
Template shaping for a normalized Analysis.

Everything here is display-only: truncation and formatting never feed back
into the Analysis, and placeholders already set by the normalizer are used
as they are.
"""
from __future__ import annotations

import os
from typing import Any, Dict, List, Optional, Sequence, Tuple, TypeVar

from .normalizer.models import Analysis, DetectionResult

T = TypeVar("T")

RENDER_LIST_LIMIT = int(os.getenv("RENDER_LIST_LIMIT", "25"))

NO_DETECTION_TYPE = "Issue"
NO_DETECTION_DETAILS = "No details"


def truncate(items: Sequence[T], limit: int = RENDER_LIST_LIMIT) -> Tuple[List[T], int]:
    """Return (visible items, hidden count). limit <= 0 shows everything."""
    items = list(items or [])
    if limit <= 0 or len(items) <= limit:
        return items, 0
    return items[:limit], len(items) - limit


def more_label(hidden: int) -> str:
    return f"+{hidden} more" if hidden > 0 else ""


def detection_label(d: DetectionResult) -> str:
    return f"{d.type or NO_DETECTION_TYPE}: {d.description or NO_DETECTION_DETAILS}"


def format_mb(size_bytes: float) -> str:
    return f"{(size_bytes or 0) / 1024 / 1024:.2f} MB"


def _tags(items: Sequence[str], limit: int) -> Dict[str, Any]:
    shown, hidden = truncate(items, limit)
    return {"items": shown, "more": more_label(hidden)}


def _detections(detections: Sequence[DetectionResult], limit: int) -> Dict[str, Any]:
    shown, hidden = truncate(detections, limit)
    rows = []
    for d in shown:
        rows.append(
            {
                "label": detection_label(d),
                "confidence": "" if d.confidence is None else str(d.confidence),
                "source_file": d.source_file or "",
            }
        )
    return {"items": rows, "more": more_label(hidden)}


def report_for_template(analysis: Analysis, limit: Optional[int] = None) -> Dict[str, Any]:
    """Flatten an Analysis into the dict report.html expects."""
    lim = RENDER_LIST_LIMIT if limit is None else limit
    a = analysis

    entry_rows, entry_hidden = truncate(a.entry_points, lim)
    route_rows, route_hidden = truncate(a.api_routes, lim)
    config_rows, config_hidden = truncate(a.config_files, lim)

    report: Dict[str, Any] = {
        "is_empty": a.is_empty,
        "summary": a.summary,
        "project_type": a.project_type,
        "project_root_name": a.project_root_name or "",
        "languages": _tags(a.languages, lim),
        "frameworks": _tags(a.frameworks, lim),
        "entry_points": {
            "items": [
                {"file": e.file_path, "signature": f"{e.class_name}.{e.method_name}()", "type": e.type or ""}
                for e in entry_rows
            ],
            "more": more_label(entry_hidden),
        },
        "api_routes": {
            "items": [
                {"method": r.method, "path": r.display_path, "controller": r.display_controller}
                for r in route_rows
            ],
            "more": more_label(route_hidden),
        },
        "config_files": {
            "items": [
                {"file": c.file_path, "type": c.file_type or "", "purpose": c.purpose or ""}
                for c in config_rows
            ],
            "more": more_label(config_hidden),
        },
        "build_info": None,
        "project_structure": None,
        "project_size": None,
        "security": None,
        "data_layer": None,
        "framework_detection": None,
    }

    if a.build_info:
        b = a.build_info
        versions = [
            ("Java Version", b.java_version),
            ("Spring Boot Version", b.spring_boot_version),
            ("Node Version", b.node_version),
            ("Python Version", b.python_version),
        ]
        report["build_info"] = {
            "build_tool": b.build_tool,
            "versions": [(label, v) for label, v in versions if v],
            "dependencies": _tags(b.dependencies, lim),
        }

    if a.project_structure:
        s = a.project_structure
        report["project_structure"] = {
            "root_path": s.root_path or "",
            "file_count": s.file_count,
            "total_size": format_mb(s.total_size),
            "directory_count": len(s.directories),
            "source_directories": _tags(s.source_directories, lim),
            "resource_directories": _tags(s.resource_directories, lim),
            "test_directories": _tags(s.test_directories, lim),
            "class_count": s.class_count,
        }

    if a.project_size:
        p = a.project_size
        report["project_size"] = {
            "file_count": p.file_count,
            "total_lines": p.total_lines,
            "total_size": format_mb(p.total_size_kb * 1024),
        }

    if a.security_hints or a.security_detections:
        report["security"] = {
            "hints": _tags(a.security_hints, lim),
            "detections": _detections(a.security_detections, lim),
        }

    if a.data_layer_hints or a.data_layer_detections:
        report["data_layer"] = {
            "hints": _tags(a.data_layer_hints, lim),
            "detections": _detections(a.data_layer_detections, lim),
        }

    if a.framework_detection:
        f = a.framework_detection
        report["framework_detection"] = {
            "primary_language": f.primary_language or "",
            "language_version": f.language_version or "",
            "build_system": detection_label(f.build_system) if f.build_system else "",
            "frameworks": _detections(f.frameworks, lim),
        }

    return report
