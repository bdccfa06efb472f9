"""Helper methods for authentication."""

import logging
import secrets

from fastapi import HTTPException, Security
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from fileapi.config import AuthOptions, get_settings

api_key_scheme = APIKeyHeader(name="X-API-Key", scheme_name="API Key Header", auto_error=False)
bearer_scheme = HTTPBearer(
    scheme_name="Google access token",
    description="A google OAuth2 access token with drive scope, used to access the caller's own drive",
    auto_error=False,
)


def _valid_api_key(api_key: str | None) -> bool:
    expected = get_settings().api_key
    return bool(api_key and expected and secrets.compare_digest(api_key, expected))


async def drive_token(
    api_key: str | None = Security(api_key_scheme),
    bearer: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
) -> str | None:
    """
    Check the caller is allowed to use this server.

    Returns the caller's own access token if one was sent, or None if the server credentials should be used.
    """
    token = bearer.credentials if bearer else None
    match get_settings().auth:
        case AuthOptions.api_key:
            if not _valid_api_key(api_key):
                logging.warning("Request with missing or invalid API key refused")
                raise HTTPException(status_code=401, detail="Invalid or missing API key (X-API-Key header)")
        case AuthOptions.user_token:
            if token is None:
                raise HTTPException(
                    status_code=401,
                    detail="This server requires a google access token. Please provide it as a bearer token",
                )
    return token
