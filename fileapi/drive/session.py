"""
Provide an authorized drive client for a single request.

Nothing is shared between requests: every session gets its own http client, and (when
the server credentials are used) its own access token.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from authlib.integrations.base_client import OAuthError
from authlib.integrations.httpx_client import AsyncOAuth2Client

from fileapi.config import get_settings, has_server_credentials
from fileapi.drive.client import DriveClient, RemoteFault


class DriveCredentialsMissing(Exception):
    pass


async def _server_client() -> httpx.AsyncClient:
    settings = get_settings()
    if not has_server_credentials():
        raise DriveCredentialsMissing("No drive credentials configured, please provide a bearer token")
    client = AsyncOAuth2Client(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        token_endpoint=settings.google_token_url,
        timeout=settings.drive_timeout,
    )
    try:
        await client.refresh_token(settings.google_token_url, refresh_token=settings.google_refresh_token)
    except (OAuthError, httpx.HTTPError) as e:
        await client.aclose()
        logging.exception("Could not refresh the drive access token")
        raise RemoteFault(f"Could not obtain a drive access token: {e}") from e
    return client


@asynccontextmanager
async def drive_session(access_token: str | None = None) -> AsyncIterator[DriveClient]:
    """
    Open a drive session, using the given access token or, if not given, the server credentials.
    The http client is closed when the context exits.
    """
    settings = get_settings()
    if access_token:
        http = httpx.AsyncClient(headers={"Authorization": f"Bearer {access_token}"}, timeout=settings.drive_timeout)
    else:
        http = await _server_client()
    try:
        yield DriveClient(http, settings.drive_api_url, settings.drive_upload_url)
    finally:
        await http.aclose()
