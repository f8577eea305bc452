"""
Resolution table for the analyze response.

The backend has shipped at least three response shapes:

  nested  {"projectMetadata": {"projectType": ..., "languages": [...], ...}}
  flat    {"projectType": ..., "detectedLanguages": [...], ...}
  hybrid  a mix of both, with either side missing or null

Every canonical field lists its candidate keys in precedence order. The
resolver tries all candidates in the nested ``projectMetadata`` container
first, then all candidates on the root object, then falls back to the
field's default. A candidate is either a plain key or a ``Convert`` that
maps the value found under a legacy key into the canonical unit.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, NamedTuple, Tuple, Union

NESTED_CONTAINER = "projectMetadata"


class Convert(NamedTuple):
    key: str
    func: Callable[[Any], Any]


Candidate = Union[str, Convert]


def _bytes_to_kb(value: Union[int, float]) -> float:
    return value / 1024


def _mb_to_kb(value: Union[int, float]) -> float:
    return value * 1024


# Analysis (top level). "detected*" names came with the newer backend and win
# over the plain names when both sit in the same container.
ANALYSIS: Dict[str, Tuple[Candidate, ...]] = {
    "project_type": ("projectType",),
    "languages": ("detectedLanguages", "languages"),
    "frameworks": ("detectedFrameworks", "frameworks"),
    "summary": ("summary",),
    "entry_points": ("entryPoints",),
    "config_files": ("configFiles",),
    "api_routes": ("apiRoutes", "routes"),
    "build_info": ("buildInfo",),
    "project_structure": ("projectStructure", "structure"),
    "security_hints": ("securityHints", "security"),
    "security_detections": ("securityDetections",),
    "data_layer_hints": ("dataLayerHints", "databaseHints"),
    "data_layer_detections": ("dataLayerDetections",),
    "project_size": ("projectSize",),
    "project_root_name": ("projectRootName",),
    "api_detected": ("apiDetected",),
    "framework_detection": ("frameworkDetection",),
}

ENTRY_POINT: Dict[str, Tuple[Candidate, ...]] = {
    "file_path": ("filePath", "file", "path"),
    "class_name": ("className", "class"),
    "method_name": ("methodName", "method"),
    "type": ("type",),
}

CONFIG_FILE: Dict[str, Tuple[Candidate, ...]] = {
    "file_path": ("filePath", "file", "filename"),
    "file_type": ("fileType", "type"),
    "content": ("content",),
    "purpose": ("purpose",),
}

API_ROUTE: Dict[str, Tuple[Candidate, ...]] = {
    "method": ("method",),
    "path": ("path",),
    "handler": ("handler",),
    "controller": ("controller",),
}

BUILD_INFO: Dict[str, Tuple[Candidate, ...]] = {
    "build_tool": ("buildTool", "buildSystem", "tool"),
    "java_version": ("javaVersion",),
    "spring_boot_version": ("springBootVersion",),
    "node_version": ("nodeVersion",),
    "python_version": ("pythonVersion",),
    "dependencies": ("dependencies",),
}

PROJECT_STRUCTURE: Dict[str, Tuple[Candidate, ...]] = {
    "root_path": ("rootPath",),
    "directories": ("directories",),
    "source_directories": ("sourceDirectories", "sourceDirectory"),
    "resource_directories": ("resourceDirectories", "resourcesDirectory"),
    "test_directories": ("testDirectories", "testDirectory"),
    "file_count": ("fileCount",),
    "total_size": ("totalSize",),
    "class_count": ("classCount", "currentClasses", "totalClasses"),
}

DETECTION: Dict[str, Tuple[Candidate, ...]] = {
    "type": ("type", "category"),
    "confidence": ("confidence",),
    "description": ("description", "reason"),
    "source_file": ("sourceFile", "file"),
    "name": ("name",),
    "version": ("version",),
    "evidence": ("evidence",),
}

PROJECT_SIZE: Dict[str, Tuple[Candidate, ...]] = {
    "file_count": ("fileCount", "totalFileCount"),
    "total_lines": ("totalLines",),
    "total_size_kb": (
        "totalSizeKb",
        Convert("totalSizeBytes", _bytes_to_kb),
        Convert("totalSizeMB", _mb_to_kb),
    ),
    "excluded_dirs": ("excludedDirs",),
}

FRAMEWORK_DETECTION: Dict[str, Tuple[Candidate, ...]] = {
    "primary_language": ("primaryLanguage",),
    "language_version": ("languageVersion",),
    "frameworks": ("frameworks",),
    "build_system": ("buildSystem",),
    "all_detected_languages": ("allDetectedLanguages",),
}
