from contextlib import asynccontextmanager

import pytest
from fastapi import Depends
from httpx import ASGITransport, AsyncClient

from fileapi import api
from fileapi.api.auth import drive_token
from fileapi.api.files import drive_opener
from fileapi.hierarchy import HierarchyStore
from tests.fake_drive import FakeDrive

ROOT_NAME = "FileApi"
PROJECT = "unittest_project"


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture(scope="function")
def drive():
    return FakeDrive()


@pytest.fixture(scope="function")
def store(drive):
    return HierarchyStore(drive, ROOT_NAME)


@pytest.fixture(scope="function")
def project():
    return PROJECT


def fake_drive_opener(drive: FakeDrive):
    """Replaces the drive_opener dependency, so requests use the in-memory drive (but still check auth)"""

    @asynccontextmanager
    async def open_fake_drive():
        yield drive

    async def opener(token: str | None = Depends(drive_token)):
        drive.tokens.append(token)
        return open_fake_drive

    return opener


@pytest.fixture(scope="function")
async def client(drive):
    api.app.dependency_overrides[drive_opener] = fake_drive_opener(drive)
    try:
        async with AsyncClient(transport=ASGITransport(app=api.app), base_url="http://test") as client:
            yield client
    finally:
        api.app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def real_client():
    """A client on the app without the fake drive, to test the actual drive session setup"""
    async with AsyncClient(transport=ASGITransport(app=api.app), base_url="http://test") as client:
        yield client
