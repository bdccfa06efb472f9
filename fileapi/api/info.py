"""API Endpoints for server information and configuration."""

from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError, version
from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import Field

from fileapi.config import get_settings, validate_settings
from fileapi.models import CamelModel
from fileapi.paths import validate_project_name

app_info = APIRouter(tags=["informational"])


def api_version() -> str:
    try:
        return version("fileapi")
    except PackageNotFoundError:
        return "unknown"


# RESPONSE MODELS
class PingResponse(CamelModel):
    ok: bool = True
    now: datetime = Field(description="Current server time (UTC)")
    project_name: str = Field(description="The (validated) project name")


class ConfigResponse(CamelModel):
    """Response for the server configuration."""

    root_name: str = Field(description="Name of the drive folder that holds the project folders")
    authorization: str = Field(description="The authorization mode")
    warnings: list[str] = Field(description="A list of configuration warnings")
    api_version: str = Field(description="The version of the FileAPI")


@app_info.get("/ping", tags=["files"])
def ping(project_name: Annotated[str, Query(alias="projectName", description="Name of the project")]) -> PingResponse:
    """Check that the server is up and the project name is valid. Does not contact the drive."""
    validate_project_name(project_name)
    return PingResponse(now=datetime.now(timezone.utc), project_name=project_name)


@app_info.get("/config")
def get_config() -> ConfigResponse:
    """Get the configuration of this FileAPI instance."""
    settings = get_settings()
    return ConfigResponse(
        root_name=settings.root_name,
        authorization=settings.auth.name,
        warnings=[w for w in [validate_settings()] if w],
        api_version=api_version(),
    )
