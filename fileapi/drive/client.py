"""
Interact with the Google Drive v3 REST API.

Drive has no paths: every file and folder is a node with an opaque id and a set of
parent ids. This module only offers the primitive node operations; resolving paths
is done in fileapi.hierarchy.
"""

import json
import logging
import secrets

import httpx

from fileapi.drive.query import child_query
from fileapi.models import FOLDER_MIME_TYPE, TEXT_MIME_TYPE, DriveNode, NodeKind

# The alias drive uses for the root folder of "My Drive"
DRIVE_ROOT = "root"

NODE_FIELDS = "id,name,mimeType,webViewLink"
PAGE_SIZE = 1000


class RemoteFault(Exception):
    """The drive (or the token endpoint) could not be reached or returned an error"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def multipart_body(metadata: dict, content: bytes, mime_type: str) -> tuple[bytes, str]:
    """
    Create a multipart/related body with the json metadata and the content of a file.

    :return: a tuple of the body and the value for the Content-Type header
    """
    boundary = secrets.token_hex(16)
    body = b"".join(
        [
            f"--{boundary}\r\nContent-Type: application/json; charset=UTF-8\r\n\r\n".encode("utf-8"),
            json.dumps(metadata).encode("utf-8"),
            f"\r\n--{boundary}\r\nContent-Type: {mime_type}\r\n\r\n".encode("utf-8"),
            content,
            f"\r\n--{boundary}--\r\n".encode("utf-8"),
        ]
    )
    return body, f"multipart/related; boundary={boundary}"


class DriveClient:
    def __init__(self, http: httpx.AsyncClient, api_url: str, upload_url: str):
        self.http = http
        self.api_url = api_url.rstrip("/")
        self.upload_url = upload_url.rstrip("/")

    async def _request(self, method: str, url: str, **kargs) -> httpx.Response:
        try:
            r = await self.http.request(method, url, **kargs)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise RemoteFault(f"Drive request {method} {url} failed with status {status}: {e.response.text}", status) from e
        except httpx.RequestError as e:
            raise RemoteFault(f"Could not reach drive ({method} {url}): {e!r}") from e
        return r

    async def _list(self, q: str, page_token: str | None = None) -> tuple[list[DriveNode], str | None]:
        params = {
            "q": q,
            "fields": f"nextPageToken,files({NODE_FIELDS})",
            "spaces": "drive",
            "pageSize": PAGE_SIZE,
        }
        if page_token:
            params["pageToken"] = page_token
        res = (await self._request("GET", f"{self.api_url}/files", params=params)).json()
        nodes = [DriveNode.model_validate(f) for f in res.get("files", [])]
        return nodes, res.get("nextPageToken")

    async def find_child(self, parent_id: str, name: str, kind: NodeKind | None = None) -> DriveNode | None:
        """
        Find a (non-trashed) child of parent_id with exactly this name.
        If there are more, the first one returned by drive is used.
        """
        nodes, _ = await self._list(child_query(parent_id, name=name, kind=kind))
        logging.debug(f"Lookup {name!r} ({kind or 'any'}) in {parent_id}: {len(nodes)} match(es)")
        return nodes[0] if nodes else None

    async def list_children(self, parent_id: str) -> list[DriveNode]:
        result: list[DriveNode] = []
        page_token = None
        while True:
            nodes, page_token = await self._list(child_query(parent_id), page_token)
            result += nodes
            if not page_token:
                return result

    async def create_folder(self, parent_id: str, name: str) -> DriveNode:
        metadata = dict(name=name, mimeType=FOLDER_MIME_TYPE, parents=[parent_id])
        r = await self._request("POST", f"{self.api_url}/files", params={"fields": NODE_FIELDS}, json=metadata)
        node = DriveNode.model_validate(r.json())
        logging.info(f"Created folder {name!r} ({node.id}) in {parent_id}")
        return node

    async def create_file(
        self, parent_id: str, name: str, content: bytes, mime_type: str = TEXT_MIME_TYPE
    ) -> DriveNode:
        body, content_type = multipart_body(dict(name=name, parents=[parent_id]), content, mime_type)
        r = await self._request(
            "POST",
            f"{self.upload_url}/files",
            params={"uploadType": "multipart", "fields": NODE_FIELDS},
            content=body,
            headers={"Content-Type": content_type},
        )
        node = DriveNode.model_validate(r.json())
        logging.info(f"Created file {name!r} ({node.id}, {len(content)} bytes) in {parent_id}")
        return node

    async def update_file_content(
        self, file_id: str, content: bytes, mime_type: str = TEXT_MIME_TYPE, name: str | None = None
    ) -> DriveNode:
        """Replace the content of a file, keeping its id"""
        metadata = dict(name=name) if name else {}
        body, content_type = multipart_body(metadata, content, mime_type)
        r = await self._request(
            "PATCH",
            f"{self.upload_url}/files/{file_id}",
            params={"uploadType": "multipart", "fields": NODE_FIELDS},
            content=body,
            headers={"Content-Type": content_type},
        )
        logging.info(f"Replaced content of file {file_id} ({len(content)} bytes)")
        return DriveNode.model_validate(r.json())

    async def download(self, file_id: str) -> bytes:
        r = await self._request("GET", f"{self.api_url}/files/{file_id}", params={"alt": "media"})
        return r.content

    async def _update(self, file_id: str, metadata: dict, **params) -> DriveNode:
        params.setdefault("fields", NODE_FIELDS)
        r = await self._request("PATCH", f"{self.api_url}/files/{file_id}", params=params, json=metadata)
        return DriveNode.model_validate(r.json())

    async def trash(self, file_id: str) -> None:
        await self._update(file_id, dict(trashed=True))
        logging.info(f"Moved {file_id} to the trash")

    async def rename(self, file_id: str, new_name: str) -> None:
        await self._update(file_id, dict(name=new_name))
        logging.info(f"Renamed {file_id} to {new_name!r}")

    async def get_parents(self, file_id: str) -> list[str]:
        r = await self._request("GET", f"{self.api_url}/files/{file_id}", params={"fields": "id,parents"})
        return DriveNode.model_validate(r.json()).parents or []

    async def reparent(self, file_id: str, new_parent_id: str, old_parent_ids: list[str]) -> None:
        """Add the new parent and remove all old parents in a single request"""
        params = {"addParents": new_parent_id}
        if remove := [p for p in old_parent_ids if p != new_parent_id]:
            params["removeParents"] = ",".join(remove)
        await self._update(file_id, {}, **params)
        logging.info(f"Moved {file_id} from {old_parent_ids} to {new_parent_id}")
