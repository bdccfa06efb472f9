"""
Connection between FileAPI and the google drive backend

Use drive_session() to get a DriveClient for a single request; the client offers the
node primitives (find, create, update, trash, rename, reparent) that fileapi.hierarchy
builds paths from.
"""

from fileapi.drive.client import DRIVE_ROOT, DriveClient, RemoteFault
from fileapi.drive.session import DriveCredentialsMissing, drive_session

__all__ = ["DRIVE_ROOT", "DriveClient", "DriveCredentialsMissing", "RemoteFault", "drive_session"]
