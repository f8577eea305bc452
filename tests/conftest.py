"""Shared fixtures: analyze responses in each historical shape, and zip bytes."""

import io
import zipfile

import pytest


@pytest.fixture
def nested_response() -> dict:
    """Current backend: everything under projectMetadata, Java-side key names."""
    return {
        "projectMetadata": {
            "projectRootName": "orders-service",
            "projectType": "Spring Boot",
            "languages": ["Java"],
            "frameworks": ["Spring Boot", "Spring Data JPA"],
            "entryPoints": [
                {"file": "src/main/java/io/shop/OrdersApplication.java", "class": "OrdersApplication", "method": "main", "type": "SPRING_BOOT"}
            ],
            "configFiles": [
                {"file": "src/main/resources/application.yml", "type": "YAML", "purpose": "Spring configuration"}
            ],
            "apiDetected": True,
            "apiRoutes": [
                {"method": "GET", "path": "/orders", "handler": "OrderController.list"},
                {"method": "POST", "path": "/orders", "handler": "OrderController.create"},
            ],
            "dataLayerHints": ["JPA repositories"],
            "dataLayerDetections": [
                {"name": "PostgreSQL", "type": "Database", "confidence": "HIGH", "reason": "postgresql driver in pom.xml", "evidence": ["pom.xml"]}
            ],
            "securityHints": [],
            "securityDetections": [],
            "buildInfo": {"buildTool": "Maven", "javaVersion": "17", "springBootVersion": "3.2.1"},
            "projectStructure": {
                "sourceDirectory": "src/main/java",
                "resourcesDirectory": "src/main/resources",
                "testDirectory": "src/test/java",
                "currentClasses": 42,
            },
            "projectSize": {"totalSizeBytes": 2097152, "totalSizeMB": 2.0, "totalFileCount": 120, "excludedDirs": [".git", "target"]},
            "summary": "Spring Boot REST service for orders",
        }
    }


@pytest.fixture
def flat_response() -> dict:
    """Older backend: fields on the root, detected* names, TS-side keys."""
    return {
        "projectType": "Express",
        "detectedLanguages": ["JavaScript", "TypeScript"],
        "detectedFrameworks": ["Express"],
        "entryPoints": [{"filePath": "src/index.ts", "className": "App", "methodName": "listen"}],
        "apiRoutes": ["GET /health", "POST /users"],
        "buildInfo": {"buildTool": "npm", "nodeVersion": "20", "dependencies": ["express", "zod"]},
        "projectStructure": {"rootPath": "/", "directories": ["src", "test"], "fileCount": 30, "totalSize": 1048576},
        "summary": "Node API",
    }


@pytest.fixture
def hybrid_response() -> dict:
    """Mix of both: partial nested container, rest on root, some nulls."""
    return {
        "projectMetadata": {
            "projectType": None,
            "detectedLanguages": ["Python"],
            "buildInfo": None,
        },
        "projectType": "FastAPI",
        "languages": ["Go"],
        "frameworks": ["FastAPI"],
        "buildInfo": {"buildTool": "pip", "pythonVersion": "3.12"},
    }


def make_zip(files: dict) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as z:
        for name, content in files.items():
            z.writestr(name, content)
    return buf.getvalue()


@pytest.fixture
def zip_bytes() -> bytes:
    return make_zip(
        {
            "demo/pom.xml": "<project/>",
            "demo/src/main/java/Demo.java": "class Demo {}",
        }
    )


@pytest.fixture
def zip_factory():
    return make_zip
