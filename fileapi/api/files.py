"""API Endpoints for reading and writing text files in a project."""

import functools
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Annotated, AsyncIterator, Callable

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status
from pydantic import Field

from fileapi.api.auth import drive_token
from fileapi.config import get_settings
from fileapi.drive import DriveClient, drive_session
from fileapi.hierarchy import HierarchyStore
from fileapi.models import CamelModel, ListResult, MkdirResult, SaveResult
from fileapi.paths import InvalidPath, ProjectPath, resolve_path, validate_leaf_name, validate_project_name

app_files = APIRouter(prefix="/files", tags=["files"])

DriveOpener = Callable[[], AbstractAsyncContextManager[DriveClient]]


async def drive_opener(token: str | None = Depends(drive_token)) -> DriveOpener:
    """
    Returns a function that opens a fresh drive session for this request.
    Endpoints validate their input before opening the session, so invalid requests never reach the drive.
    """
    return functools.partial(drive_session, token)


@asynccontextmanager
async def open_store(open_drive: DriveOpener) -> AsyncIterator[HierarchyStore]:
    async with open_drive() as drive:
        yield HierarchyStore(drive, get_settings().root_name)


def resolve_file_path(file_name: str | None) -> ProjectPath:
    path = resolve_path(file_name)
    if path.is_folder or not path.leaf:
        raise InvalidPath("fileName must be a file")
    return path


def HTTPException_if_not_found(found: bool, message: str = "file not found"):
    if not found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)


ProjectNameQuery = Annotated[str, Query(alias="projectName", description="Name of the project")]
FileNameQuery = Annotated[str, Query(alias="fileName", description="Path of the file within the project")]


# REQUEST MODELS
class FileBody(CamelModel):
    project_name: str = Field(description="Name of the project")
    file_name: str = Field(description="Path of the file within the project, e.g. notes/todo.txt")


class SaveBody(FileBody):
    content: str = Field(default="", description="New content of the file")


class AppendBody(FileBody):
    content_to_append: str = Field(default="", description="Text to add at the end of the file")
    newline: bool = Field(default=True, description="Add a newline before the text (if the file has content)")


class RenameBody(FileBody):
    new_name: str = Field(description="New name of the file (without folder)")


class MoveBody(FileBody):
    dest_folder: str = Field(default="", description="Destination folder, e.g. archive/2025/")
    create_parents: bool = Field(default=True, description="Create the destination folder if it does not exist")


class MkdirBody(FileBody):
    file_name: str = Field(description="Path of the folder within the project, ending with a /")


# RESPONSE MODELS
class OkResponse(CamelModel):
    ok: bool = True


class ReadResponse(CamelModel):
    ok: bool = True
    name: str = Field(description="Name of the file")
    content: str = Field(description="Full text content of the file")
    file_id: str = Field(description="Drive id of the file")


@app_files.get("/list")
async def list_files(
    project_name: ProjectNameQuery,
    file_name: Annotated[
        str | None, Query(alias="fileName", description="Folder to list, defaults to the project root")
    ] = None,
    open_drive: DriveOpener = Depends(drive_opener),
) -> ListResult:
    """List the folders and files in a folder of the project."""
    validate_project_name(project_name)
    path = resolve_path(file_name)
    async with open_store(open_drive) as store:
        result = await store.list_folder(project_name, path.folder_chain)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="folder not found")
    return result


@app_files.get("/read")
async def read_file(
    project_name: ProjectNameQuery,
    file_name: FileNameQuery,
    open_drive: DriveOpener = Depends(drive_opener),
) -> ReadResponse:
    """Read a text file."""
    validate_project_name(project_name)
    path = resolve_file_path(file_name)
    async with open_store(open_drive) as store:
        result = await store.read_text(project_name, path.folders, path.leaf)
    if not result.found or result.file_id is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="file not found")
    return ReadResponse(name=path.leaf, content=result.content or "", file_id=result.file_id)


@app_files.post("/save")
async def save_file(
    body: Annotated[SaveBody, Body(...)],
    response: Response,
    open_drive: DriveOpener = Depends(drive_opener),
) -> SaveResult:
    """Save a text file, creating it (and its folders) or replacing the content of the existing file."""
    validate_project_name(body.project_name)
    path = resolve_file_path(body.file_name)
    async with open_store(open_drive) as store:
        result = await store.save_text(body.project_name, path.folders, path.leaf, body.content)
    if result.created:
        response.status_code = status.HTTP_201_CREATED
    return result


@app_files.post("/append")
async def append_file(
    body: Annotated[AppendBody, Body(...)],
    response: Response,
    open_drive: DriveOpener = Depends(drive_opener),
) -> SaveResult:
    """Append text to a file, creating it if it does not exist."""
    validate_project_name(body.project_name)
    path = resolve_file_path(body.file_name)
    async with open_store(open_drive) as store:
        result = await store.append_text(
            body.project_name, path.folders, path.leaf, body.content_to_append, body.newline
        )
    if result.created:
        response.status_code = status.HTTP_201_CREATED
    return result


@app_files.delete("/remove")
async def remove_file(
    project_name: ProjectNameQuery,
    file_name: FileNameQuery,
    open_drive: DriveOpener = Depends(drive_opener),
) -> OkResponse:
    """Move a file to the drive trash."""
    validate_project_name(project_name)
    path = resolve_file_path(file_name)
    async with open_store(open_drive) as store:
        removed = await store.remove_file(project_name, path.folders, path.leaf)
    HTTPException_if_not_found(removed)
    return OkResponse()


@app_files.post("/rename")
async def rename_file(
    body: Annotated[RenameBody, Body(...)],
    open_drive: DriveOpener = Depends(drive_opener),
) -> OkResponse:
    """Rename a file, keeping it in the same folder."""
    validate_project_name(body.project_name)
    path = resolve_file_path(body.file_name)
    validate_leaf_name(body.new_name)
    async with open_store(open_drive) as store:
        renamed = await store.rename_file(body.project_name, path.folders, path.leaf, body.new_name)
    HTTPException_if_not_found(renamed)
    return OkResponse()


@app_files.post("/move")
async def move_file(
    body: Annotated[MoveBody, Body(...)],
    open_drive: DriveOpener = Depends(drive_opener),
) -> OkResponse:
    """Move a file to another folder of the project."""
    validate_project_name(body.project_name)
    path = resolve_file_path(body.file_name)
    destination = resolve_path(body.dest_folder)
    if not destination.is_folder and destination.leaf:
        raise InvalidPath("destFolder must be a folder path (end with '/')")
    async with open_store(open_drive) as store:
        moved = await store.move_file(
            body.project_name, path.folders, path.leaf, destination.folders, create_parents=body.create_parents
        )
    HTTPException_if_not_found(moved, "file or destination folder not found")
    return OkResponse()


@app_files.post("/mkdir")
async def make_folder(
    body: Annotated[MkdirBody, Body(...)],
    open_drive: DriveOpener = Depends(drive_opener),
) -> MkdirResult:
    """Create a folder, including any missing parent folders."""
    validate_project_name(body.project_name)
    path = resolve_path(body.file_name)
    if not path.is_folder:
        raise InvalidPath("fileName must end with '/'")
    async with open_store(open_drive) as store:
        return await store.make_folder(body.project_name, path.folders)
