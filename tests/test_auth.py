import re

import pytest
from httpx import AsyncClient
from pytest_httpx import HTTPXMock

from fileapi.config import AuthOptions, validate_settings
from fileapi.models import FOLDER_MIME_TYPE
from tests.conftest import PROJECT
from tests.fake_drive import FakeDrive
from tests.tools import fileapi_settings, get_json, post_json, set_auth

LIST_URL = "/files/list"
PARAMS = {"projectName": PROJECT}


@pytest.mark.anyio
async def test_no_auth(client: AsyncClient, drive: FakeDrive):
    with set_auth(AuthOptions.no_auth):
        await get_json(client, LIST_URL, params=PARAMS)
        await get_json(client, LIST_URL, params=PARAMS, headers={"Authorization": "Bearer user-token"})
    # a bearer token is passed on to the drive if given
    assert drive.tokens == [None, "user-token"]


@pytest.mark.anyio
async def test_api_key(client: AsyncClient, drive: FakeDrive):
    with set_auth(AuthOptions.api_key), fileapi_settings(api_key="secret"):
        result = await get_json(client, LIST_URL, expected=401, params=PARAMS)
        assert result == {"ok": False, "error": "Invalid or missing API key (X-API-Key header)"}
        await get_json(client, LIST_URL, expected=401, params=PARAMS, headers={"X-API-Key": "wrong"})
        await get_json(client, LIST_URL, params=PARAMS, headers={"X-API-Key": "secret"})
        body = {"projectName": PROJECT, "fileName": "a.txt", "content": "x"}
        await post_json(client, "/files/save", expected=401, json=body)
        await post_json(client, "/files/save", expected=201, json=body, headers={"X-API-Key": "secret"})
    # refused requests never open a drive session
    assert drive.tokens == [None, None]


@pytest.mark.anyio
async def test_api_key_not_configured(client: AsyncClient):
    with set_auth(AuthOptions.api_key), fileapi_settings(api_key=None):
        assert "api_key" in (validate_settings() or "")
        await get_json(client, LIST_URL, expected=401, params=PARAMS, headers={"X-API-Key": ""})
        await get_json(client, LIST_URL, expected=401, params=PARAMS, headers={"X-API-Key": "anything"})


@pytest.mark.anyio
async def test_user_token(client: AsyncClient, drive: FakeDrive):
    with set_auth(AuthOptions.user_token):
        result = await get_json(client, LIST_URL, expected=401, params=PARAMS)
        assert result["ok"] is False
        assert "bearer" in result["error"]
        await get_json(client, LIST_URL, params=PARAMS, headers={"Authorization": "Bearer user-token"})
    assert drive.tokens == ["user-token"]


@pytest.mark.anyio
async def test_ping_needs_no_auth(client: AsyncClient):
    with set_auth(AuthOptions.api_key), fileapi_settings(api_key="secret"):
        await get_json(client, "/ping", params=PARAMS)


@pytest.mark.anyio
async def test_no_drive_credentials(real_client: AsyncClient):
    with set_auth(AuthOptions.no_auth), fileapi_settings(google_refresh_token=None):
        result = await get_json(real_client, LIST_URL, expected=401, params=PARAMS)
        assert result["ok"] is False
        assert "bearer token" in result["error"]


@pytest.mark.anyio
async def test_user_token_reaches_drive(real_client: AsyncClient, httpx_mock: HTTPXMock):
    api_url = "https://drive.test/drive/v3"
    files_url = re.compile(re.escape(f"{api_url}/files") + r"(\?.*)?$")
    httpx_mock.add_response(method="GET", url=files_url, json={"files": []})
    httpx_mock.add_response(method="GET", url=files_url, json={"files": []})
    httpx_mock.add_response(
        method="POST", url=files_url, json={"id": "root1", "name": "FileApi", "mimeType": FOLDER_MIME_TYPE}
    )
    httpx_mock.add_response(
        method="POST", url=files_url, json={"id": "proj1", "name": PROJECT, "mimeType": FOLDER_MIME_TYPE}
    )

    with set_auth(AuthOptions.user_token), fileapi_settings(drive_api_url=api_url):
        result = await post_json(
            real_client,
            "/files/mkdir",
            json={"projectName": PROJECT, "fileName": "/"},
            headers={"Authorization": "Bearer user-token"},
        )
    assert result == {"ok": True, "folderId": "proj1"}

    requests = httpx_mock.get_requests()
    assert len(requests) == 4
    assert all(r.headers["authorization"] == "Bearer user-token" for r in requests)
    find_root, create_root, find_project, create_project = requests
    assert "'root' in parents" in find_root.url.params["q"]
    assert "'root1' in parents" in find_project.url.params["q"]
    assert f"name = '{PROJECT}'" in find_project.url.params["q"]
