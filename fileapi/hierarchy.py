"""
Folders and text files addressed by path, on top of the flat drive node store.

All projects live in <root_name>/<project_name> in the drive. Drive does not know
about paths, so every path is resolved by looking up each segment by name under the
previous one. Nothing is cached: every call re-resolves the path against the drive.

Drive does not enforce unique names within a folder. If two nodes with the same name
exist under one parent, the first one returned by drive is used. Two concurrent calls
that create the same missing folder can both create it; this is not detected.
"""

import logging
from typing import Sequence

from fileapi.drive.client import DRIVE_ROOT, DriveClient
from fileapi.models import (
    FileEntry,
    FolderEntry,
    ListResult,
    MkdirResult,
    ReadResult,
    SaveResult,
    TEXT_MIME_TYPE,
)

ENCODING = "utf-8"


class HierarchyStore:
    def __init__(self, drive: DriveClient, root_name: str):
        self.drive = drive
        self.root_name = root_name

    ######################## FOLDER RESOLUTION #########################

    async def _find_or_create_folder(self, parent_id: str, name: str) -> str:
        node = await self.drive.find_child(parent_id, name, kind="folder")
        if node is None:
            node = await self.drive.create_folder(parent_id, name)
        return node.id

    async def ensure_project_root(self, project_name: str) -> str:
        """Get the id of the <root>/<project> folder, creating either folder if needed"""
        root_id = await self._find_or_create_folder(DRIVE_ROOT, self.root_name)
        return await self._find_or_create_folder(root_id, project_name)

    async def ensure_folder_chain(self, project_name: str, segments: Sequence[str]) -> str:
        """Get the id of the folder at this path in the project, creating missing folders on the way"""
        current = await self.ensure_project_root(project_name)
        for segment in segments:
            current = await self._find_or_create_folder(current, segment)
        return current

    async def find_folder_chain(self, project_name: str, segments: Sequence[str]) -> str | None:
        """Get the id of the folder at this path in the project, or None if any folder on the way is missing"""
        current = await self.ensure_project_root(project_name)
        for segment in segments:
            node = await self.drive.find_child(current, segment, kind="folder")
            if node is None:
                logging.debug(f"Folder {segment!r} not found in {project_name}/{'/'.join(segments)}")
                return None
            current = node.id
        return current

    async def _find_file_id(self, project_name: str, folders: Sequence[str], name: str) -> str | None:
        parent_id = await self.find_folder_chain(project_name, folders)
        if parent_id is None:
            return None
        node = await self.drive.find_child(parent_id, name, kind="file")
        return node.id if node else None

    def display_path(self, project_name: str, segments: Sequence[str] = ()) -> str:
        return "/".join([self.root_name, project_name, *segments])

    ######################## OPERATIONS #########################

    async def list_folder(self, project_name: str, segments: Sequence[str]) -> ListResult | None:
        """List the folders and files directly in this folder, or None if the folder does not exist"""
        folder_id = await self.find_folder_chain(project_name, segments)
        if folder_id is None:
            return None
        result = ListResult(path=self.display_path(project_name, segments))
        for node in await self.drive.list_children(folder_id):
            if node.is_folder:
                result.folders.append(FolderEntry(name=node.name, id=node.id, web_url=node.web_view_link))
            else:
                result.files.append(
                    FileEntry(
                        name=node.name,
                        id=node.id,
                        mime_type=node.mime_type or "application/octet-stream",
                        web_url=node.web_view_link,
                    )
                )
        return result

    async def read_text(self, project_name: str, folders: Sequence[str], name: str) -> ReadResult:
        file_id = await self._find_file_id(project_name, folders, name)
        if file_id is None:
            return ReadResult(found=False)
        content = await self.drive.download(file_id)
        return ReadResult(found=True, name=name, content=content.decode(ENCODING, errors="replace"), file_id=file_id)

    async def save_text(self, project_name: str, folders: Sequence[str], name: str, content: str) -> SaveResult:
        """Create the file (and its folders) or replace the content of the existing file, keeping its id"""
        parent_id = await self.ensure_folder_chain(project_name, folders)
        existing = await self.drive.find_child(parent_id, name, kind="file")
        data = content.encode(ENCODING)
        if existing is None:
            node = await self.drive.create_file(parent_id, name, data, TEXT_MIME_TYPE)
            return SaveResult(created=True, file_id=node.id, web_url=node.web_view_link)
        node = await self.drive.update_file_content(existing.id, data, TEXT_MIME_TYPE, name=name)
        return SaveResult(created=False, file_id=node.id, web_url=node.web_view_link)

    async def append_text(
        self, project_name: str, folders: Sequence[str], name: str, text: str, newline: bool = True
    ) -> SaveResult:
        """
        Append text to the file, creating it if it does not exist.
        If newline is True and the file has content, a newline is added before the text.

        Note that this reads and then writes the file: concurrent appends can overwrite each other.
        """
        current = await self.read_text(project_name, folders, name)
        previous = current.content if current.found and current.content else ""
        separator = "\n" if newline and previous else ""
        return await self.save_text(project_name, folders, name, previous + separator + text)

    async def remove_file(self, project_name: str, folders: Sequence[str], name: str) -> bool:
        """Move the file to the drive trash. Returns False if the file was not found"""
        file_id = await self._find_file_id(project_name, folders, name)
        if file_id is None:
            return False
        await self.drive.trash(file_id)
        return True

    async def rename_file(self, project_name: str, folders: Sequence[str], name: str, new_name: str) -> bool:
        """Rename the file within its folder. new_name should be a plain name (see paths.validate_leaf_name)"""
        file_id = await self._find_file_id(project_name, folders, name)
        if file_id is None:
            return False
        await self.drive.rename(file_id, new_name)
        return True

    async def move_file(
        self,
        project_name: str,
        folders: Sequence[str],
        name: str,
        destination: Sequence[str],
        create_parents: bool = True,
    ) -> bool:
        """
        Move the file to the destination folder. The destination is created if create_parents is True.
        Returns False if the source folder, the file, or the (not created) destination cannot be found.
        """
        source_id = await self.find_folder_chain(project_name, folders)
        if source_id is None:
            return False
        node = await self.drive.find_child(source_id, name, kind="file")
        if node is None:
            return False
        if create_parents:
            destination_id = await self.ensure_folder_chain(project_name, destination)
        else:
            destination_id = await self.find_folder_chain(project_name, destination)
        if destination_id is None:
            return False
        parents = await self.drive.get_parents(node.id)
        await self.drive.reparent(node.id, destination_id, parents)
        return True

    async def make_folder(self, project_name: str, segments: Sequence[str]) -> MkdirResult:
        return MkdirResult(folder_id=await self.ensure_folder_chain(project_name, segments))
