from __future__ import annotations

import importlib
import logging
import os
from pathlib import Path

from fastapi import FastAPI, Request, Response
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ------------------------------------------------------------
# Paths
# ------------------------------------------------------------
SUITE_APP_DIR = Path(__file__).resolve().parent


def stub_app(name: str, expected: str) -> FastAPI:
    """
    Fallback app so the suite starts even if a module fails to import.
    """
    a = FastAPI(title=f"{name} (Missing)")

    @a.get("/", response_class=HTMLResponse)
    def _missing():
        return HTMLResponse(
            f"""
            <html>
              <head><title>{name} missing</title></head>
              <body style="font-family: Arial; padding: 24px;">
                <h2>{name} module could not be loaded</h2>
                <pre>{expected}</pre>
              </body>
            </html>
            """
        )

    return a


def load_module_app(display_name: str, package_import: str) -> FastAPI:
    """
    Import a FastAPI `app` from a package module path like
    explainit.project_explainer.main. On failure, log and return a stub app.
    """
    try:
        mod = importlib.import_module(package_import)
        if not hasattr(mod, "app"):
            raise AttributeError(f"{package_import} does not define a FastAPI variable named 'app'")
        return getattr(mod, "app")
    except Exception as e:
        logger.exception("Failed to load %s from %s", display_name, package_import)
        return stub_app(display_name, f"{package_import}\n\nImport error:\n{e}")


# ------------------------------------------------------------
# Suite app
# ------------------------------------------------------------
suite = FastAPI(title="ExplainIt")
templates = Jinja2Templates(directory=str(SUITE_APP_DIR / "templates"))


@suite.get("/healthz")
def healthz_get():
    return {"status": "ok"}


@suite.head("/healthz")
def healthz_head():
    return Response(status_code=200)


# Some hosts probe HEAD /
@suite.head("/")
def head_root():
    return Response(status_code=200)


@suite.get("/", response_class=HTMLResponse)
def home(request: Request):
    return templates.TemplateResponse(request=request, name="index.html", context={"request": request})


# ------------------------------------------------------------
# Mount sub-apps
# ------------------------------------------------------------
explainer_app = load_module_app("Project Explainer", "explainit.project_explainer.main")
suite.mount("/explain-it", explainer_app)

app = suite
