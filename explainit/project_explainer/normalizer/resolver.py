from __future__ import annotations

import math
from typing import Any, Callable, Dict, List, Tuple

from . import aliases
from .aliases import Candidate, Convert
from .models import (
    DEFAULT_SUMMARY,
    UNKNOWN_BUILD_TOOL,
    UNKNOWN_CLASS,
    UNKNOWN_FILE,
    UNKNOWN_HTTP_METHOD,
    UNKNOWN_METHOD,
    UNKNOWN_PROJECT_TYPE,
    UNKNOWN_ROUTE_PATH,
    Analysis,
    ApiRoute,
    BuildInfo,
    ConfigFile,
    DetectionResult,
    EntryPoint,
    FrameworkDetection,
    ProjectSizeInfo,
    ProjectStructure,
)

HTTP_METHODS = {"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "TRACE", "ANY"}

# Sentinel for "no usable value here", distinct from a legitimate None.
MISSING = object()

Source = Dict[str, Any]
Coercer = Callable[[Any], Any]


# -------------------------
# Coercers: value -> canonical value, or MISSING when the JSON type is wrong
# -------------------------
def _number(v: Any) -> Any:
    if isinstance(v, bool):
        return MISSING
    if isinstance(v, int):
        return v
    if isinstance(v, float) and math.isfinite(v):
        return v
    return MISSING


def _text(v: Any) -> Any:
    if isinstance(v, str):
        return v
    if _number(v) is not MISSING:
        try:
            return str(v)
        except ValueError:
            # int too large for str()
            return MISSING
    return MISSING


def _label(v: Any) -> Any:
    """Per-element text that gets a placeholder; blank strings count as absent."""
    s = _text(v)
    if s is MISSING or not s.strip():
        return MISSING
    return s


def _flag(v: Any) -> Any:
    return v if isinstance(v, bool) else MISSING


def _confidence(v: Any) -> Any:
    # Numeric scores and level labels ("HIGH") both pass through, unclamped.
    if isinstance(v, str):
        return v
    return _number(v)


def _text_list(v: Any) -> Any:
    if isinstance(v, str):
        return (v,)
    if not isinstance(v, list):
        return MISSING
    out: List[str] = []
    for item in v:
        s = _text(item)
        if s is not MISSING:
            out.append(s)
    return tuple(out)


def _record(v: Any) -> Any:
    return v if isinstance(v, dict) else MISSING


class Normalizer:
    """
    Generic resolver driven by the tables in ``aliases``.

    ``empty_is_present`` decides whether an empty list stops resolution
    (default) or falls through to the next candidate, which is how some
    older consumers treated ``detectedFrameworks: []``.
    """

    def __init__(self, empty_is_present: bool = True) -> None:
        self.empty_is_present = empty_is_present

    # -------------------------
    # Generic resolution
    # -------------------------
    def first(self, sources: List[Source], candidates: Tuple[Candidate, ...], coerce: Coercer) -> Any:
        for source in sources:
            for candidate in candidates:
                key = candidate.key if isinstance(candidate, Convert) else candidate
                if source.get(key) is None:
                    continue

                value = coerce(source[key])
                if value is MISSING:
                    continue

                if isinstance(candidate, Convert):
                    try:
                        value = coerce(candidate.func(value))
                    except OverflowError:
                        continue
                    if value is MISSING:
                        continue

                if not self.empty_is_present and isinstance(value, tuple) and not value:
                    continue
                return value
        return MISSING

    def field(
        self,
        sources: List[Source],
        table: Dict[str, Tuple[Candidate, ...]],
        name: str,
        coerce: Coercer,
        default: Any = None,
    ) -> Any:
        value = self.first(sources, table[name], coerce)
        return default if value is MISSING else value

    def records(
        self,
        sources: List[Source],
        table: Dict[str, Tuple[Candidate, ...]],
        name: str,
        element: Callable[[Any], Any],
    ) -> Tuple[Any, ...]:
        value = self.field(sources, table, name, _list_of_any, ())
        return tuple(element(item) for item in value)

    # -------------------------
    # Per-element defaulting
    # -------------------------
    def entry_point(self, item: Any) -> EntryPoint:
        if isinstance(item, str) and item.strip():
            return EntryPoint(file_path=item)
        src = [item] if isinstance(item, dict) else []
        t = aliases.ENTRY_POINT
        return EntryPoint(
            file_path=self.field(src, t, "file_path", _label, UNKNOWN_FILE),
            class_name=self.field(src, t, "class_name", _label, UNKNOWN_CLASS),
            method_name=self.field(src, t, "method_name", _label, UNKNOWN_METHOD),
            type=self.field(src, t, "type", _text),
        )

    def config_file(self, item: Any) -> ConfigFile:
        if isinstance(item, str) and item.strip():
            return ConfigFile(file_path=item)
        src = [item] if isinstance(item, dict) else []
        t = aliases.CONFIG_FILE
        return ConfigFile(
            file_path=self.field(src, t, "file_path", _label, UNKNOWN_FILE),
            file_type=self.field(src, t, "file_type", _text),
            content=self.field(src, t, "content", _text),
            purpose=self.field(src, t, "purpose", _text),
        )

    def api_route(self, item: Any) -> ApiRoute:
        if isinstance(item, str):
            return _route_from_string(item)
        src = [item] if isinstance(item, dict) else []
        t = aliases.API_ROUTE
        path = self.field(src, t, "path", _label)
        handler = self.field(src, t, "handler", _label)
        if path is None and handler is None:
            path = UNKNOWN_ROUTE_PATH
        return ApiRoute(
            method=self.field(src, t, "method", _label, UNKNOWN_HTTP_METHOD),
            path=path,
            handler=handler,
            controller=self.field(src, t, "controller", _text),
        )

    def detection(self, item: Any) -> DetectionResult:
        if isinstance(item, str):
            return DetectionResult(description=item)
        src = [item] if isinstance(item, dict) else []
        t = aliases.DETECTION
        return DetectionResult(
            type=self.field(src, t, "type", _text),
            confidence=self.field(src, t, "confidence", _confidence),
            description=self.field(src, t, "description", _text),
            source_file=self.field(src, t, "source_file", _text),
            name=self.field(src, t, "name", _text),
            version=self.field(src, t, "version", _text),
            evidence=self.field(src, t, "evidence", _text_list, ()),
        )

    # -------------------------
    # Whole-object sections: one winning object, never field-merged
    # -------------------------
    def build_info(self, obj: Source) -> BuildInfo:
        src, t = [obj], aliases.BUILD_INFO
        return BuildInfo(
            build_tool=self.field(src, t, "build_tool", _text, UNKNOWN_BUILD_TOOL),
            java_version=self.field(src, t, "java_version", _text),
            spring_boot_version=self.field(src, t, "spring_boot_version", _text),
            node_version=self.field(src, t, "node_version", _text),
            python_version=self.field(src, t, "python_version", _text),
            dependencies=self.field(src, t, "dependencies", _text_list, ()),
        )

    def project_structure(self, obj: Source) -> ProjectStructure:
        src, t = [obj], aliases.PROJECT_STRUCTURE
        return ProjectStructure(
            root_path=self.field(src, t, "root_path", _text),
            directories=self.field(src, t, "directories", _text_list, ()),
            source_directories=self.field(src, t, "source_directories", _text_list, ()),
            resource_directories=self.field(src, t, "resource_directories", _text_list, ()),
            test_directories=self.field(src, t, "test_directories", _text_list, ()),
            file_count=self.field(src, t, "file_count", _number, 0),
            total_size=self.field(src, t, "total_size", _number, 0),
            class_count=self.field(src, t, "class_count", _number, 0),
        )

    def project_size(self, obj: Source) -> ProjectSizeInfo:
        src, t = [obj], aliases.PROJECT_SIZE
        return ProjectSizeInfo(
            file_count=self.field(src, t, "file_count", _number, 0),
            total_lines=self.field(src, t, "total_lines", _number, 0),
            total_size_kb=self.field(src, t, "total_size_kb", _number, 0),
            excluded_dirs=self.field(src, t, "excluded_dirs", _text_list, ()),
        )

    def framework_detection(self, obj: Source) -> FrameworkDetection:
        src, t = [obj], aliases.FRAMEWORK_DETECTION
        build_system = self.field(src, t, "build_system", _record)
        return FrameworkDetection(
            primary_language=self.field(src, t, "primary_language", _text),
            language_version=self.field(src, t, "language_version", _text),
            frameworks=self.records(src, t, "frameworks", self.detection),
            build_system=self.detection(build_system) if build_system is not None else None,
            all_detected_languages=self.field(src, t, "all_detected_languages", _text_list, ()),
        )

    def section(self, sources: List[Source], name: str, build: Callable[[Source], Any]) -> Any:
        obj = self.field(sources, aliases.ANALYSIS, name, _record)
        return build(obj) if obj is not None else None

    # -------------------------
    # Entry point
    # -------------------------
    def normalize(self, raw: Any) -> Analysis:
        if isinstance(raw, Analysis):
            return raw

        sources = _sources(raw)
        t = aliases.ANALYSIS

        project_type = self.field(sources, t, "project_type", _text, UNKNOWN_PROJECT_TYPE)
        languages = self.field(sources, t, "languages", _text_list, ())
        frameworks = self.field(sources, t, "frameworks", _text_list, ())
        api_routes = self.records(sources, t, "api_routes", self.api_route)

        return Analysis(
            project_type=project_type,
            languages=languages,
            frameworks=frameworks,
            summary=self.field(sources, t, "summary", _text, DEFAULT_SUMMARY),
            entry_points=self.records(sources, t, "entry_points", self.entry_point),
            config_files=self.records(sources, t, "config_files", self.config_file),
            api_routes=api_routes,
            build_info=self.section(sources, "build_info", self.build_info),
            project_structure=self.section(sources, "project_structure", self.project_structure),
            security_hints=self.field(sources, t, "security_hints", _text_list, ()),
            security_detections=self.records(sources, t, "security_detections", self.detection),
            data_layer_hints=self.field(sources, t, "data_layer_hints", _text_list, ()),
            data_layer_detections=self.records(sources, t, "data_layer_detections", self.detection),
            project_size=self.section(sources, "project_size", self.project_size),
            project_root_name=self.field(sources, t, "project_root_name", _text),
            api_detected=self.field(sources, t, "api_detected", _flag, bool(api_routes)),
            framework_detection=self.section(sources, "framework_detection", self.framework_detection),
            is_empty=(project_type == UNKNOWN_PROJECT_TYPE and not languages and not frameworks),
        )


def _list_of_any(v: Any) -> Any:
    return tuple(v) if isinstance(v, list) else MISSING


def _sources(raw: Any) -> List[Source]:
    """Nested container first (when it is an object), then the root."""
    root = raw if isinstance(raw, dict) else {}
    nested = root.get(aliases.NESTED_CONTAINER)
    if isinstance(nested, dict):
        return [nested, root]
    return [root]


def _route_from_string(value: str) -> ApiRoute:
    # Historical shape: routes as display strings, e.g. "GET /api/users".
    parts = value.strip().split(None, 1)
    if len(parts) == 2 and parts[0].upper() in HTTP_METHODS:
        return ApiRoute(method=parts[0].upper(), path=parts[1].strip())
    if parts and parts[0].upper() not in HTTP_METHODS:
        return ApiRoute(path=value.strip())
    if parts:
        return ApiRoute(method=parts[0].upper())
    return ApiRoute()


def normalize(raw: Any, *, empty_is_present: bool = True) -> Analysis:
    """
    Reconcile any analyze response shape into one canonical Analysis.

    Never raises: unknown keys are ignored, wrong types degrade to defaults,
    and ``None`` or non-object input yields an empty Analysis.
    """
    return Normalizer(empty_is_present=empty_is_present).normalize(raw)
