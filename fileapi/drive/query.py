"""Build search queries for the drive files.list endpoint."""

from fileapi.models import FOLDER_MIME_TYPE, NodeKind

NOT_TRASHED = "trashed = false"


def literal(value: str) -> str:
    """Quote a string for use in a query, escaping backslashes and single quotes"""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def q_and(*clauses: str | None) -> str:
    return " and ".join(c for c in clauses if c and c.strip())


def in_parent(parent_id: str) -> str:
    return f"{literal(parent_id)} in parents"


def name_is(name: str) -> str:
    return f"name = {literal(name)}"


def kind_is(kind: NodeKind | None) -> str | None:
    match kind:
        case "folder":
            return f"mimeType = {literal(FOLDER_MIME_TYPE)}"
        case "file":
            return f"mimeType != {literal(FOLDER_MIME_TYPE)}"
        case _:
            return None


def child_query(parent_id: str, name: str | None = None, kind: NodeKind | None = None) -> str:
    """Query for the (non-trashed) children of parent_id, optionally with the given name and kind"""
    return q_and(
        kind_is(kind),
        name_is(name) if name is not None else None,
        in_parent(parent_id),
        NOT_TRASHED,
    )
