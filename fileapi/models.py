from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
TEXT_MIME_TYPE = "text/plain"

NodeKind = Literal["folder", "file"]


class CamelModel(BaseModel):
    """Base model for everything that goes over the wire: snake_case in python, camelCase in json"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DriveNode(CamelModel):
    """A file or folder as returned by the drive API."""

    id: str
    name: str = ""
    mime_type: str | None = None
    parents: list[str] | None = None
    web_view_link: str | None = None

    @property
    def is_folder(self) -> bool:
        return self.mime_type == FOLDER_MIME_TYPE


######################## RESULTS #########################


class FolderEntry(CamelModel):
    name: str = Field(description="Name of the folder")
    id: str = Field(description="Drive id of the folder")
    web_url: str | None = Field(default=None, description="Link to the folder in the drive web interface")


class FileEntry(CamelModel):
    name: str = Field(description="Name of the file")
    id: str = Field(description="Drive id of the file")
    mime_type: str = Field(description="Mime type of the file")
    web_url: str | None = Field(default=None, description="Link to the file in the drive web interface")


class ListResult(CamelModel):
    ok: bool = True
    path: str = Field(description="Path of the listed folder, starting with the root and project folder")
    folders: list[FolderEntry] = Field(default_factory=list)
    files: list[FileEntry] = Field(default_factory=list)


class ReadResult(CamelModel):
    found: bool
    name: str | None = None
    content: str | None = None
    file_id: str | None = None


class SaveResult(CamelModel):
    ok: bool = True
    created: bool = Field(description="True if a new file was created, False if an existing file was replaced")
    file_id: str = Field(description="Drive id of the file")
    web_url: str | None = Field(default=None, description="Link to the file in the drive web interface")


class MkdirResult(CamelModel):
    ok: bool = True
    folder_id: str = Field(description="Drive id of the (existing or created) folder")
