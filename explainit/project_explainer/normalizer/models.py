from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

# Placeholders shown instead of a missing value. The presentation layer uses
# these as-is and never derives its own.
UNKNOWN_PROJECT_TYPE = "Unknown"
DEFAULT_SUMMARY = "Backend project analysis"
UNKNOWN_FILE = "Unknown file"
UNKNOWN_CLASS = "Class"
UNKNOWN_METHOD = "method"
UNKNOWN_HTTP_METHOD = "UNKNOWN"
UNKNOWN_ROUTE_PATH = "Unknown path"
UNKNOWN_BUILD_TOOL = "Unknown"
UNKNOWN_CONTROLLER = "Unknown"

Confidence = Union[int, float, str]


@dataclass(frozen=True)
class EntryPoint:
    file_path: str = UNKNOWN_FILE
    class_name: str = UNKNOWN_CLASS
    method_name: str = UNKNOWN_METHOD
    type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filePath": self.file_path,
            "className": self.class_name,
            "methodName": self.method_name,
            "type": self.type,
        }


@dataclass(frozen=True)
class ConfigFile:
    file_path: str = UNKNOWN_FILE
    file_type: Optional[str] = None
    content: Optional[str] = None
    purpose: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filePath": self.file_path,
            "fileType": self.file_type,
            "content": self.content,
            "purpose": self.purpose,
        }


@dataclass(frozen=True)
class ApiRoute:
    method: str = UNKNOWN_HTTP_METHOD
    path: Optional[str] = UNKNOWN_ROUTE_PATH
    handler: Optional[str] = None
    controller: Optional[str] = None

    @property
    def display_path(self) -> str:
        """Path if known, else the handler; one of them is always set."""
        return self.path or self.handler or UNKNOWN_ROUTE_PATH

    @property
    def display_controller(self) -> str:
        return self.controller or UNKNOWN_CONTROLLER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "path": self.path,
            "handler": self.handler,
            "controller": self.controller,
        }


@dataclass(frozen=True)
class BuildInfo:
    build_tool: str = UNKNOWN_BUILD_TOOL
    java_version: Optional[str] = None
    spring_boot_version: Optional[str] = None
    node_version: Optional[str] = None
    python_version: Optional[str] = None
    dependencies: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "buildTool": self.build_tool,
            "javaVersion": self.java_version,
            "springBootVersion": self.spring_boot_version,
            "nodeVersion": self.node_version,
            "pythonVersion": self.python_version,
            "dependencies": list(self.dependencies),
        }


@dataclass(frozen=True)
class ProjectStructure:
    root_path: Optional[str] = None
    directories: Tuple[str, ...] = ()
    source_directories: Tuple[str, ...] = ()
    resource_directories: Tuple[str, ...] = ()
    test_directories: Tuple[str, ...] = ()
    file_count: Union[int, float] = 0
    total_size: Union[int, float] = 0
    class_count: Union[int, float] = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rootPath": self.root_path,
            "directories": list(self.directories),
            "sourceDirectories": list(self.source_directories),
            "resourceDirectories": list(self.resource_directories),
            "testDirectories": list(self.test_directories),
            "fileCount": self.file_count,
            "totalSize": self.total_size,
            "classCount": self.class_count,
        }


@dataclass(frozen=True)
class DetectionResult:
    """
    A single security / data-layer finding.

    Optionality is kept exactly as received: a detection without type or
    description stays that way here and only gets "Issue: No details" when
    rendered.
    """

    type: Optional[str] = None
    confidence: Optional[Confidence] = None
    description: Optional[str] = None
    source_file: Optional[str] = None
    name: Optional[str] = None
    version: Optional[str] = None
    evidence: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "confidence": self.confidence,
            "description": self.description,
            "sourceFile": self.source_file,
            "name": self.name,
            "version": self.version,
            "evidence": list(self.evidence),
        }


@dataclass(frozen=True)
class ProjectSizeInfo:
    file_count: Union[int, float] = 0
    total_lines: Union[int, float] = 0
    total_size_kb: Union[int, float] = 0
    excluded_dirs: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fileCount": self.file_count,
            "totalLines": self.total_lines,
            "totalSizeKb": self.total_size_kb,
            "excludedDirs": list(self.excluded_dirs),
        }


@dataclass(frozen=True)
class FrameworkDetection:
    primary_language: Optional[str] = None
    language_version: Optional[str] = None
    frameworks: Tuple[DetectionResult, ...] = ()
    build_system: Optional[DetectionResult] = None
    all_detected_languages: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "primaryLanguage": self.primary_language,
            "languageVersion": self.language_version,
            "frameworks": [d.to_dict() for d in self.frameworks],
            "buildSystem": self.build_system.to_dict() if self.build_system else None,
            "allDetectedLanguages": list(self.all_detected_languages),
        }


@dataclass(frozen=True)
class Analysis:
    """
    Canonical, fully-defaulted view of one analyze response.

    Built once per successful upload and never mutated. Optional sections
    (build_info, project_structure, project_size, framework_detection) are
    None when the backend sent nothing usable for them.
    """

    project_type: str = UNKNOWN_PROJECT_TYPE
    languages: Tuple[str, ...] = ()
    frameworks: Tuple[str, ...] = ()
    summary: str = DEFAULT_SUMMARY
    entry_points: Tuple[EntryPoint, ...] = ()
    config_files: Tuple[ConfigFile, ...] = ()
    api_routes: Tuple[ApiRoute, ...] = ()
    build_info: Optional[BuildInfo] = None
    project_structure: Optional[ProjectStructure] = None
    security_hints: Tuple[str, ...] = ()
    security_detections: Tuple[DetectionResult, ...] = ()
    data_layer_hints: Tuple[str, ...] = ()
    data_layer_detections: Tuple[DetectionResult, ...] = ()
    project_size: Optional[ProjectSizeInfo] = None
    project_root_name: Optional[str] = None
    api_detected: bool = False
    framework_detection: Optional[FrameworkDetection] = None
    is_empty: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Canonical camelCase JSON; feeding it back to normalize() is a no-op."""
        return {
            "projectType": self.project_type,
            "languages": list(self.languages),
            "frameworks": list(self.frameworks),
            "summary": self.summary,
            "entryPoints": [e.to_dict() for e in self.entry_points],
            "configFiles": [c.to_dict() for c in self.config_files],
            "apiRoutes": [r.to_dict() for r in self.api_routes],
            "buildInfo": self.build_info.to_dict() if self.build_info else None,
            "projectStructure": self.project_structure.to_dict() if self.project_structure else None,
            "securityHints": list(self.security_hints),
            "securityDetections": [d.to_dict() for d in self.security_detections],
            "dataLayerHints": list(self.data_layer_hints),
            "dataLayerDetections": [d.to_dict() for d in self.data_layer_detections],
            "projectSize": self.project_size.to_dict() if self.project_size else None,
            "projectRootName": self.project_root_name,
            "apiDetected": self.api_detected,
            "frameworkDetection": self.framework_detection.to_dict() if self.framework_detection else None,
            "isEmpty": self.is_empty,
        }
