# explainit/project_explainer/utils/zip_reader.py
from __future__ import annotations

import io
import zipfile
from typing import Dict, List

from ..errors import UserFacingError


def check_zip_upload(filename: str, data: bytes, max_mb: int) -> None:
    """
    Reject uploads the analyzer would refuse anyway, before the round trip.
    Mirrors the backend checks: non-empty, *.zip name, and a readable archive.
    """
    name = (filename or "").strip()
    if not name:
        raise UserFacingError("Please choose a ZIP file.")
    if not name.lower().endswith(".zip"):
        raise UserFacingError("Only ZIP files are accepted.")
    if not data:
        raise UserFacingError("Uploaded ZIP is empty.")
    if len(data) > max_mb * 1024 * 1024:
        raise UserFacingError(f"ZIP too large. Max allowed is {max_mb} MB.")
    if not zipfile.is_zipfile(io.BytesIO(data)):
        raise UserFacingError("The uploaded file is not a valid ZIP archive.")


def archive_summary(data: bytes, top_n: int = 20) -> Dict[str, object]:
    """
    File count and the first few entry paths, for the report header.
    Contents are not inspected; the analyzer owns that.
    """
    names: List[str] = []
    try:
        with zipfile.ZipFile(io.BytesIO(data), "r") as z:
            for info in z.infolist():
                if info.is_dir():
                    continue
                name = (info.filename or "").replace("\\", "/").lstrip("/")
                if name:
                    names.append(name)
    except zipfile.BadZipFile:
        raise UserFacingError("The uploaded file is not a valid ZIP archive.")

    names.sort()
    return {"file_count": len(names), "top_files": names[:top_n]}
