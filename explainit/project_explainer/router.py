# explainit/project_explainer/router.py
from __future__ import annotations

import logging
import os
import time
import uuid
from typing import Any, Dict, Optional

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse, StreamingResponse

from .errors import TransportError, UserFacingError
from .normalizer.models import Analysis
from .normalizer.resolver import normalize
from .presentation import report_for_template
from .render import render
from .reporting.pdf_report import generate_pdf_bytes
from .services import transport
from .utils.zip_reader import archive_summary, check_zip_upload

logger = logging.getLogger(__name__)


# ============================================================
# Router (NO prefix – mounted by suite at /explain-it)
# ============================================================
router = APIRouter(tags=["Project Explainer"])


# ============================================================
# Cache & limits
# ============================================================
REPORT_TTL_SECONDS = int(os.getenv("REPORT_TTL_SECONDS", str(30 * 60)))
REPORT_CACHE: Dict[str, Dict[str, Any]] = {}
MAX_ZIP_MB_UPLOAD = int(os.getenv("MAX_ZIP_MB_UPLOAD", "50"))

# Off: an empty detected list is a real answer. On: fall through to older keys.
EXPLAIN_EMPTY_FALLBACK = os.getenv("EXPLAIN_EMPTY_FALLBACK", "0").strip().lower() in ("1", "true", "yes")


def _cleanup_cache() -> None:
    now = time.time()
    # Sync routes run in the threadpool; another cleanup may pop a key first.
    for k in list(REPORT_CACHE.keys()):
        item = REPORT_CACHE.get(k)
        if item is not None and now - item["created"] > REPORT_TTL_SECONDS:
            REPORT_CACHE.pop(k, None)


def _cached(report_id: str) -> Dict[str, Any]:
    _cleanup_cache()
    item = REPORT_CACHE.get(report_id)
    if not item:
        raise HTTPException(status_code=404, detail="Report expired")
    return item


def _report_context(report_id: str, item: Dict[str, Any]) -> Dict[str, Any]:
    analysis: Analysis = item["analysis"]
    return {
        "report_id": report_id,
        "meta": item["meta"],
        "report": report_for_template(analysis),
        "raw": item["raw"],
    }


# ============================================================
# Routes
# ============================================================
@router.get("/", response_class=HTMLResponse)
def home_page(request: Request):
    return render(request, "index.html", {"max_mb": MAX_ZIP_MB_UPLOAD})


@router.post("/analyze", response_class=HTMLResponse)
async def analyze(request: Request, file: Optional[UploadFile] = File(default=None)):
    _cleanup_cache()
    form_ctx: Dict[str, Any] = {"max_mb": MAX_ZIP_MB_UPLOAD}

    try:
        if file is None:
            raise UserFacingError("Please choose a ZIP file.")
        data = await file.read()
        filename = file.filename or ""
        check_zip_upload(filename, data, MAX_ZIP_MB_UPLOAD)
        summary = archive_summary(data)

        raw = await transport.submit(filename, data)

    except TransportError as e:
        return render(request, "index.html", {**form_ctx, "error": str(e)}, status_code=502)
    except UserFacingError as e:
        return render(request, "index.html", {**form_ctx, "error": str(e)}, status_code=400)
    except Exception:
        logger.exception("Unexpected failure while analyzing upload")
        return render(
            request,
            "index.html",
            {**form_ctx, "error": "Something went wrong while processing your request. Please try again."},
            status_code=500,
        )

    analysis = normalize(raw, empty_is_present=not EXPLAIN_EMPTY_FALLBACK)
    if analysis.is_empty:
        logger.info("Analysis of %s came back with nothing detected", filename)

    report_id = str(uuid.uuid4())
    meta: Dict[str, Any] = {
        "project_name": analysis.project_root_name or filename,
        "archive_name": filename,
        "archive_files": summary["file_count"],
        "top_files": "\n".join(summary["top_files"]),
    }
    REPORT_CACHE[report_id] = {"created": time.time(), "analysis": analysis, "raw": raw, "meta": meta}

    return render(request, "report.html", _report_context(report_id, REPORT_CACHE[report_id]))


@router.get("/report/{report_id}", response_class=HTMLResponse)
def report_html(request: Request, report_id: str):
    item = _cached(report_id)
    return render(request, "report.html", _report_context(report_id, item))


@router.get("/report/{report_id}/json")
def report_json(report_id: str):
    item = _cached(report_id)
    return JSONResponse({"analysis": item["analysis"].to_dict(), "raw": item["raw"]})


@router.get("/report/{report_id}/pdf")
def report_pdf(report_id: str):
    item = _cached(report_id)
    pdf_bytes = generate_pdf_bytes(item["analysis"], report_id=report_id, meta=item["meta"])
    return StreamingResponse(
        iter([pdf_bytes]),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=project_analysis_{report_id}.pdf"},
    )


@router.get("/health")
def health():
    return {"status": "ok", "backend": transport.health_check()}
