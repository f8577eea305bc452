# explainit/project_explainer/services/transport.py
from __future__ import annotations

import logging
import os
from typing import Any

import requests
from fastapi.concurrency import run_in_threadpool

from ..errors import TransportError

logger = logging.getLogger(__name__)

EXPLAIN_API_URL = os.getenv("EXPLAIN_API_URL", "http://localhost:8080/api/explain").rstrip("/")
EXPLAIN_TIMEOUT_SECONDS = float(os.getenv("EXPLAIN_TIMEOUT_SECONDS", "120"))


def _error_message(resp: requests.Response) -> str:
    """
    Pull a readable message out of an error body.
    The backend sends {"error": ..., "message": ...}; either may be missing.
    """
    try:
        body = resp.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("message", "error"):
            msg = body.get(key)
            if isinstance(msg, str) and msg.strip():
                return msg.strip()
    return f"Server error: {resp.status_code}"


def post_archive(filename: str, data: bytes, base_url: str = "", timeout: float = 0) -> Any:
    """
    Blocking multipart POST of the archive to {base_url}/analyze.
    Returns the decoded JSON body; raises TransportError on any failure.
    """
    url = f"{(base_url or EXPLAIN_API_URL).rstrip('/')}/analyze"
    files = {"file": (filename, data, "application/zip")}

    try:
        resp = requests.post(url, files=files, timeout=timeout or EXPLAIN_TIMEOUT_SECONDS)
    except requests.Timeout:
        raise TransportError("The analysis service took too long to respond. Please try again.")
    except requests.RequestException as e:
        logger.warning("Analyze request to %s failed: %s", url, e)
        raise TransportError(
            "Could not reach the analysis service. Please check that it is running and try again."
        )

    if not resp.ok:
        msg = _error_message(resp)
        logger.info("Analyze request returned HTTP %s: %s", resp.status_code, msg)
        raise TransportError(msg, status_code=resp.status_code)

    try:
        return resp.json()
    except ValueError:
        raise TransportError(
            "The analysis service returned a response that is not valid JSON.",
            status_code=resp.status_code,
        )


async def submit(filename: str, data: bytes, base_url: str = "", timeout: float = 0) -> Any:
    """Run post_archive off the event loop; the result goes straight to normalize()."""
    return await run_in_threadpool(post_archive, filename, data, base_url, timeout)


def health_check(base_url: str = "", timeout: float = 5) -> bool:
    url = f"{(base_url or EXPLAIN_API_URL).rstrip('/')}/health"
    try:
        resp = requests.get(url, timeout=timeout)
    except requests.RequestException:
        return False
    return resp.ok
