"""FastAPI application entry point."""

import os
import sys
import logging
import tomllib
from pathlib import Path
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

# Load environment variables from .env file
# Must be called before importing modules that read env vars
load_dotenv()

# Add src to path
# main.py is at src/api/main.py, src is two levels up
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.middleware.cors import AdminOriginCORSMiddleware
from api.responses import error_response, success_response
from api.routes import ai_mod, comics, health, site
from utils.logging import setup_structured_logging
from utils.settings import get_settings

SERVICE_NAME = "Webcomic API"

setup_structured_logging(get_settings().log_level, service=SERVICE_NAME)

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]


app = FastAPI(
    title=SERVICE_NAME,
    description="Comic CRUD against the content store and AI site modifications via GitHub",
    version=VERSION,
)

# Only the configured admin origin may call the API cross-origin.
app.add_middleware(
    AdminOriginCORSMiddleware,
    admin_origin=lambda: get_settings().admin_origin,
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc: StarletteHTTPException):
    # An unknown path and a known path with the wrong method are both "not found"
    if exc.status_code in (404, 405):
        return error_response("Not found", 404)
    return error_response(str(exc.detail), exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    logger.info("Rejected malformed request", extra={"path": request.url.path})
    return error_response("Invalid request", 400, details=str(exc.errors()))


app.include_router(comics.router)
app.include_router(site.router)
app.include_router(ai_mod.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return success_response({
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    })


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    # Access logs off; application logs go through the structured logger
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False
    )
