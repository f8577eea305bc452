"""
End-to-end tests for the Project Explainer routes.

The analyzer call is replaced with an async fake so the full request path
(upload checks, normalization, caching, rendering) runs without a backend.
"""

import time

import pytest
from fastapi.testclient import TestClient

from explainit.project_explainer import router as explainer_router
from explainit.project_explainer.errors import TransportError
from explainit.project_explainer.main import app
from explainit.project_explainer.services import transport


@pytest.fixture
def client():
    explainer_router.REPORT_CACHE.clear()
    return TestClient(app)


@pytest.fixture
def analyzer(monkeypatch):
    """Fake analyzer; set .response or .error before posting."""

    class FakeAnalyzer:
        response = {}
        error = None
        calls = []

        async def submit(self, filename, data, base_url="", timeout=0):
            self.calls.append(filename)
            if self.error is not None:
                raise self.error
            return self.response

    fake = FakeAnalyzer()
    fake.calls = []
    monkeypatch.setattr(transport, "submit", fake.submit)
    return fake


def _upload(client, data, filename="demo.zip"):
    return client.post("/analyze", files={"file": (filename, data, "application/zip")})


def _only_report_id():
    assert len(explainer_router.REPORT_CACHE) == 1
    return next(iter(explainer_router.REPORT_CACHE))


def test_home_page(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert 'name="file"' in resp.text


class TestAnalyze:
    def test_nested_response_renders_report(self, client, analyzer, nested_response, zip_bytes):
        analyzer.response = nested_response
        resp = _upload(client, zip_bytes)

        assert resp.status_code == 200
        assert "Spring Boot" in resp.text
        assert "/orders" in resp.text
        assert "Nothing was detected" not in resp.text
        assert analyzer.calls == ["demo.zip"]

        item = explainer_router.REPORT_CACHE[_only_report_id()]
        assert item["meta"]["project_name"] == "orders-service"
        assert item["meta"]["archive_files"] == 2
        assert item["raw"] == nested_response

    def test_flat_response_renders_report(self, client, analyzer, flat_response, zip_bytes):
        analyzer.response = flat_response
        resp = _upload(client, zip_bytes)
        assert resp.status_code == 200
        assert "Express" in resp.text
        assert "TypeScript" in resp.text

    def test_empty_result_shows_notice(self, client, analyzer, zip_bytes):
        analyzer.response = {}
        resp = _upload(client, zip_bytes)
        assert resp.status_code == 200
        assert "Nothing was detected" in resp.text
        item = explainer_router.REPORT_CACHE[_only_report_id()]
        assert item["meta"]["project_name"] == "demo.zip"

    def test_non_object_body_still_renders(self, client, analyzer, zip_bytes):
        analyzer.response = ["unexpected"]
        resp = _upload(client, zip_bytes)
        assert resp.status_code == 200
        assert "Nothing was detected" in resp.text

    def test_missing_file(self, client, analyzer):
        resp = client.post("/analyze")
        assert resp.status_code == 400
        assert "Please choose a ZIP file." in resp.text
        assert analyzer.calls == []

    def test_wrong_extension(self, client, analyzer, zip_bytes):
        resp = _upload(client, zip_bytes, filename="demo.rar")
        assert resp.status_code == 400
        assert "Only ZIP files are accepted." in resp.text
        assert analyzer.calls == []

    def test_not_a_zip(self, client, analyzer):
        resp = _upload(client, b"plain text")
        assert resp.status_code == 400
        assert "not a valid ZIP archive" in resp.text

    def test_backend_error_is_shown(self, client, analyzer, zip_bytes):
        analyzer.error = TransportError("File must be a ZIP", status_code=400)
        resp = _upload(client, zip_bytes)
        assert resp.status_code == 502
        assert "File must be a ZIP" in resp.text
        assert explainer_router.REPORT_CACHE == {}

    def test_unexpected_failure_is_generic(self, client, analyzer, zip_bytes):
        analyzer.error = RuntimeError("boom")
        resp = _upload(client, zip_bytes)
        assert resp.status_code == 500
        assert "Something went wrong" in resp.text
        assert "boom" not in resp.text


class TestCachedReport:
    def test_report_views(self, client, analyzer, nested_response, zip_bytes):
        analyzer.response = nested_response
        _upload(client, zip_bytes)
        report_id = _only_report_id()

        html = client.get(f"/report/{report_id}")
        assert html.status_code == 200
        assert "orders-service" in html.text

        body = client.get(f"/report/{report_id}/json").json()
        assert body["analysis"]["projectType"] == "Spring Boot"
        assert body["analysis"]["isEmpty"] is False
        assert body["raw"] == nested_response

        pdf = client.get(f"/report/{report_id}/pdf")
        assert pdf.status_code == 200
        assert pdf.headers["content-type"] == "application/pdf"
        assert f"project_analysis_{report_id}.pdf" in pdf.headers["content-disposition"]
        assert pdf.content.startswith(b"%PDF")

    def test_unknown_report(self, client):
        assert client.get("/report/nope").status_code == 404
        assert client.get("/report/nope/json").status_code == 404
        assert client.get("/report/nope/pdf").status_code == 404

    def test_expired_report(self, client, analyzer, zip_bytes):
        analyzer.response = {"projectType": "Go"}
        _upload(client, zip_bytes)
        report_id = _only_report_id()
        explainer_router.REPORT_CACHE[report_id]["created"] = time.time() - explainer_router.REPORT_TTL_SECONDS - 1

        resp = client.get(f"/report/{report_id}/json")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Report expired"
        assert explainer_router.REPORT_CACHE == {}

    def test_cleanup_tolerates_keys_removed_concurrently(self, monkeypatch):
        class StaleKeys(dict):
            # keys() snapshot still lists an entry another thread already popped
            def keys(self):
                return list(super().keys()) + ["popped-elsewhere"]

        now = time.time()
        cache = StaleKeys(
            fresh={"created": now},
            old={"created": now - explainer_router.REPORT_TTL_SECONDS - 1},
        )
        monkeypatch.setattr(explainer_router, "REPORT_CACHE", cache)

        explainer_router._cleanup_cache()

        assert set(dict.keys(cache)) == {"fresh"}


def test_health(client, monkeypatch):
    monkeypatch.setattr(transport, "health_check", lambda: False)
    assert client.get("/health").json() == {"status": "ok", "backend": False}


def test_empty_fallback_setting(client, analyzer, zip_bytes, monkeypatch):
    monkeypatch.setattr(explainer_router, "EXPLAIN_EMPTY_FALLBACK", True)
    analyzer.response = {"projectMetadata": {"detectedLanguages": []}, "languages": ["Go"]}
    _upload(client, zip_bytes)
    item = explainer_router.REPORT_CACHE[_only_report_id()]
    assert item["analysis"].languages == ("Go",)
