"""Tests for display shaping: placeholders at the boundary, truncation, sizes."""

from explainit.project_explainer.normalizer.models import UNKNOWN_CONTROLLER, ApiRoute, DetectionResult
from explainit.project_explainer.normalizer.resolver import normalize
from explainit.project_explainer.presentation import (
    detection_label,
    format_mb,
    more_label,
    report_for_template,
    truncate,
)


def test_truncate_under_limit():
    assert truncate([1, 2, 3], 5) == ([1, 2, 3], 0)


def test_truncate_over_limit():
    shown, hidden = truncate(list(range(30)), 25)
    assert shown == list(range(25))
    assert hidden == 5
    assert more_label(hidden) == "+5 more"


def test_truncate_without_limit():
    assert truncate(list(range(30)), 0) == (list(range(30)), 0)
    assert more_label(0) == ""


def test_detection_label_placeholders():
    assert detection_label(DetectionResult()) == "Issue: No details"
    assert detection_label(DetectionResult(type="CSRF")) == "CSRF: No details"
    assert detection_label(DetectionResult(description="Open endpoint")) == "Issue: Open endpoint"


def test_format_mb():
    assert format_mb(1048576) == "1.00 MB"
    assert format_mb(0) == "0.00 MB"


def test_truncation_does_not_touch_analysis():
    a = normalize({"apiRoutes": [{"method": "GET", "path": f"/r{i}"} for i in range(40)]})
    report = report_for_template(a, limit=10)
    assert len(report["api_routes"]["items"]) == 10
    assert report["api_routes"]["more"] == "+30 more"
    assert len(a.api_routes) == 40


def test_optional_sections_absent(flat_response):
    report = report_for_template(normalize(flat_response))
    assert report["security"] is None
    assert report["data_layer"] is None
    assert report["project_size"] is None
    assert report["build_info"]["build_tool"] == "npm"
    assert report["build_info"]["versions"] == [("Node Version", "20")]


def test_nested_report_sections(nested_response):
    report = report_for_template(normalize(nested_response))
    assert report["entry_points"]["items"][0]["signature"] == "OrdersApplication.main()"
    assert report["api_routes"]["items"][0] == {"method": "GET", "path": "/orders", "controller": "Unknown"}
    assert report["data_layer"]["detections"]["items"][0]["label"] == "Database: postgresql driver in pom.xml"
    assert report["data_layer"]["detections"]["items"][0]["confidence"] == "HIGH"
    assert report["project_size"]["total_size"] == "2.00 MB"
    assert report["project_structure"]["class_count"] == 42
    assert report["security"] is None


def test_route_display_falls_back_to_handler():
    a = normalize({"apiRoutes": [{"handler": "Ctrl.index"}]})
    assert report_for_template(a)["api_routes"]["items"][0]["path"] == "Ctrl.index"


def test_empty_flag_passed_through():
    assert report_for_template(normalize({}))["is_empty"] is True


def test_missing_controller_uses_model_placeholder():
    assert ApiRoute().display_controller == UNKNOWN_CONTROLLER
    assert ApiRoute(controller="UserController").display_controller == "UserController"
    a = normalize({"apiRoutes": [{"method": "GET", "path": "/a"}]})
    assert report_for_template(a)["api_routes"]["items"][0]["controller"] == UNKNOWN_CONTROLLER
