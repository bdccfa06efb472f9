"""
FileAPI Configuration

We read configuration from 2 sources, in order of precedence (higher is more priority)
- Environment variables
- A .env file, either in the current working directory or in a location specified
  by the FILEAPI_ENV_FILE environment variable
"""

import functools
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

from class_doc import extract_docs_from_cls_obj
from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "fileapi_"
DEFAULT_ROOT_NAME = "FileApi"


class AuthOptions(str, Enum):
    #: everyone (that can reach the server) can use the server's drive credentials
    no_auth = "no_auth"

    #: callers need to send the configured key in the X-API-Key header
    api_key = "api_key"

    #: callers need to send their own google access token as a bearer token,
    #: which is used to access their own drive
    user_token = "user_token"

    @classmethod
    def validate(cls, value: str):
        if value not in cls.__members__:
            options = ", ".join(AuthOptions.__members__.keys())
            return f"{value} is not a valid authorization option. Choose one of {{{options}}}"


for field, doc in extract_docs_from_cls_obj(AuthOptions).items():
    AuthOptions[field].__doc__ = "\n".join(doc)


class Settings(BaseSettings):
    env_file: Annotated[
        Path,
        Field(
            description="Location of a .env file (if used) relative to working directory",
        ),
    ] = Path(".env")

    root_name: Annotated[
        str,
        Field(
            description="Name of the drive folder that holds all project folders",
        ),
    ] = DEFAULT_ROOT_NAME

    auth: Annotated[AuthOptions, Field(description="Do we require authorization?")] = AuthOptions.no_auth

    api_key: Annotated[
        str | None,
        Field(
            description="Key callers must send in the X-API-Key header (if auth is api_key)",
        ),
    ] = None

    google_client_id: Annotated[str | None, Field(description="OAuth2 client id of the google cloud app")] = None
    google_client_secret: Annotated[str | None, Field(description="OAuth2 client secret of the google cloud app")] = None
    google_refresh_token: Annotated[
        str | None,
        Field(
            description="Refresh token of the drive account the server uses when callers do not send their own token",
        ),
    ] = None
    google_token_url: Annotated[
        str,
        Field(description="OAuth2 token endpoint used to exchange the refresh token"),
    ] = "https://oauth2.googleapis.com/token"

    drive_api_url: Annotated[str, Field(description="Base URL of the Drive v3 API")] = "https://www.googleapis.com/drive/v3"
    drive_upload_url: Annotated[
        str, Field(description="Base URL of the Drive v3 upload API")
    ] = "https://www.googleapis.com/upload/drive/v3"
    drive_timeout: Annotated[float, Field(description="Timeout (seconds) of requests to the drive API")] = 30.0

    @model_validator(mode="after")
    def set_root_name(self: Any) -> "Settings":
        if not self.root_name or not self.root_name.strip():
            self.root_name = DEFAULT_ROOT_NAME
        return self

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX)


@functools.lru_cache()
def get_settings() -> Settings:
    temp = Settings()
    load_dotenv(temp.env_file, override=False)
    return Settings()


def has_server_credentials() -> bool:
    settings = get_settings()
    return all([settings.google_client_id, settings.google_client_secret, settings.google_refresh_token])


def validate_settings():
    settings = get_settings()
    if settings.auth == AuthOptions.api_key and not settings.api_key:
        return "Authorization is set to api_key, but no fileapi_api_key is configured: all requests will be refused."
    if settings.auth != AuthOptions.user_token and not has_server_credentials():
        return (
            "No google credentials (fileapi_google_client_id, fileapi_google_client_secret, fileapi_google_refresh_token)"
            " are configured: only callers that send their own bearer token can reach the drive."
        )


if __name__ == "__main__":
    # Echo the settings
    for k, v in get_settings().model_dump().items():
        print(f"{ENV_PREFIX.upper()}{k.upper()}={v}")
