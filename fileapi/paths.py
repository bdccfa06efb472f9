"""
Turn client supplied path strings into the folder chain and leaf name they describe.

Paths are always relative to the project root. A trailing separator means the path
denotes a folder, backslashes are accepted as separators, and repeated separators
collapse. Segments "." and ".." are never accepted.
"""

import re
from typing import NamedTuple

SEPARATOR = "/"

PROJECT_NAME_RE = re.compile(r"^[A-Za-z0-9_\-]{1,64}$")
CLEAN_SEGMENT_RE = re.compile(r"^[^/\\]+$")


class InvalidPath(ValueError):
    pass


class InvalidProjectName(ValueError):
    pass


class ProjectPath(NamedTuple):
    folders: tuple[str, ...]
    leaf: str
    is_folder: bool

    @property
    def is_root(self) -> bool:
        return not self.folders and not self.leaf

    @property
    def folder_chain(self) -> tuple[str, ...]:
        """The folder this path points at when it is used as a folder (e.g. for listing)"""
        return self.folders + (self.leaf,) if self.leaf else self.folders

    def as_string(self) -> str:
        """The canonical form of this path, which resolves to the same ProjectPath"""
        s = SEPARATOR.join(self.folder_chain)
        if self.is_folder and s:
            s += SEPARATOR
        return s


PROJECT_ROOT = ProjectPath(folders=(), leaf="", is_folder=True)


def validate_project_name(name: str | None) -> str:
    if not name or not PROJECT_NAME_RE.fullmatch(name):
        raise InvalidProjectName(
            "invalid projectName: use 1-64 characters from letters, digits, underscore and hyphen"
        )
    return name


def validate_leaf_name(name: str | None) -> str:
    """Check that name is a plain file name, i.e. usable as the new name of a file"""
    if not name or not name.strip() or not CLEAN_SEGMENT_RE.fullmatch(name) or name in {".", ".."}:
        raise InvalidPath("newName must be a plain file name")
    return name


def resolve_path(raw: str | None) -> ProjectPath:
    """
    Normalize and split a path string.

    - "" or "/" denote the project root
    - "a/b/c" is the file c in folder a/b
    - "a/b/c/" is the folder a/b/c

    :raises InvalidPath: if a segment is "." or ".."
    """
    p = (raw or "").replace("\\", SEPARATOR).strip()
    if p.startswith(SEPARATOR):
        p = p[1:]

    is_folder = p.endswith(SEPARATOR)
    if is_folder:
        p = p.rstrip(SEPARATOR)

    if not p:
        return PROJECT_ROOT

    segments = [seg for seg in p.split(SEPARATOR) if seg]
    for seg in segments:
        if seg in {".", ".."}:
            raise InvalidPath(f"invalid path: segment {seg!r} is not allowed")
        if not CLEAN_SEGMENT_RE.fullmatch(seg):
            raise InvalidPath(f"invalid path segment: {seg!r}")

    if is_folder:
        return ProjectPath(folders=tuple(segments), leaf="", is_folder=True)
    return ProjectPath(folders=tuple(segments[:-1]), leaf=segments[-1], is_folder=False)
