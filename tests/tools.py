from contextlib import contextmanager
from typing import Optional

from httpx import AsyncClient, Response

from fileapi.config import AuthOptions, get_settings


async def get_json(client: AsyncClient, url: str, expected=200, headers=None, **kargs) -> dict:
    """Get the given URL. If expected is 2xx, return the result as parsed json"""
    response = await client.get(url, headers=headers, **kargs)
    content = response.json() if response.content else None
    assert response.status_code == expected, f"GET {url} returned {response.status_code}, expected {expected}, {content}"
    return {} if content is None else content


async def post_json(client: AsyncClient, url, expected=200, headers=None, **kargs) -> dict:
    response = await client.post(url, headers=headers, **kargs)
    assert response.status_code == expected, (
        f"POST {url} returned {response.status_code}, expected {expected}\n{response.json() if response.content else ''}"
    )
    return response.json()


async def adelete(client: AsyncClient, url, expected=200, headers=None, **kargs) -> dict:
    response = await client.delete(url, headers=headers, **kargs)
    assert response.status_code == expected, (
        f"DELETE {url} returned {response.status_code}, expected {expected}\n{response.json()}"
    )
    return response.json()


def check(response: Response, expected: int, msg: Optional[str] = None):
    try:
        content = response.json()
    except Exception:
        content = response.content
    assert response.status_code == expected, (
        f"{msg or ''}{': ' if msg else ''}Unexpected status: received {response.status_code} != expected {expected};"
        f" reply: {content}"
    )


@contextmanager
def set_auth(level: AuthOptions = AuthOptions.api_key):
    """Context manager to set auth option"""
    old_auth = get_settings().auth
    get_settings().auth = level
    try:
        yield level
    finally:
        get_settings().auth = old_auth


@contextmanager
def fileapi_settings(**kargs):
    settings = get_settings()
    old_settings = settings.model_dump()
    try:
        for k, v in kargs.items():
            setattr(settings, k, v)
        yield settings
    finally:
        for k, v in old_settings.items():
            setattr(settings, k, v)
