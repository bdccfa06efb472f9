"""
FileAPI: a proxy for text files in Google Drive.

All files live in the drive folder FileApi/{projectName}. Files and folders are addressed by path,
e.g. `notes/2025/todo.txt`; a path ending with `/` denotes a folder.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fileapi.api.files import app_files
from fileapi.api.info import app_info
from fileapi.config import get_settings, validate_settings
from fileapi.drive import DriveCredentialsMissing, RemoteFault


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.info(f"Serving files from drive folder {settings.root_name!r}, auth={settings.auth.name}")
    if warning := validate_settings():
        logging.warning(warning)
    yield


app = FastAPI(
    title="FileAPI",
    description=__doc__ if __doc__ else "",
    openapi_tags=[
        dict(name="files", description="Endpoints to list, read, write, move and remove text files"),
        dict(name="informational", description="Endpoints for server information and configuration"),
    ],
    lifespan=lifespan,
)
app.include_router(app_info)
app.include_router(app_files)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": message}, headers=headers)


@app.exception_handler(ValueError)
async def value_error_exception_handler(request: Request, exc: ValueError):
    return error_response(400, str(exc))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(DriveCredentialsMissing)
async def credentials_exception_handler(request: Request, exc: DriveCredentialsMissing):
    return error_response(401, str(exc))


@app.exception_handler(RemoteFault)
async def remote_fault_exception_handler(request: Request, exc: RemoteFault):
    logging.warning(f"Drive error on {request.method} {request.url.path}: {exc}")
    return error_response(502, f"Drive error: {exc}")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"ok": False, "error": "There was an issue with the data you sent.", "fields_invalid": exc.errors()},
    )
