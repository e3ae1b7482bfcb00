"""Building change-event trees from flat change lists."""

import posixpath
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .._security import validate_project_relative_path
from ..models.delta_models import ChangeEntry, ChangeKind, ResourceDelta, ResourceType
from .workspace import split_workspace_path


def normalize_change_path(path: str) -> str:
    """Collapse ``.`` and ``..`` segments of a project-relative path.

    ``"./res/values/../layout/main.xml"`` becomes ``"res/layout/main.xml"``; the
    project root itself becomes ``""``.

    Raises:
        ValueError: when the path climbs out of the project.
    """
    normalized = posixpath.normpath(path.replace("\\", "/").lstrip("/"))
    if normalized == ".." or normalized.startswith("../"):
        raise ValueError(f"Path outside project root: {path}")
    return "" if normalized == "." else normalized


def parse_change_entries(
    raw_changes: Iterable[dict[str, Any]],
    project_dir: Path | None = None,
) -> list[ChangeEntry]:
    """Validate tool input such as ``{"path": "res/a.xml", "kind": "added"}``.

    ``type`` defaults to ``"file"``. Paths are normalized; with ``project_dir``
    they are also resolved on disk so symlinks cannot lead out of the project.

    Raises:
        ValueError: on a missing or escaping path or an unknown kind/type.
    """
    entries = []
    for index, raw in enumerate(raw_changes):
        if not isinstance(raw, dict):
            raise ValueError(f"Change #{index} must be an object, got {type(raw).__name__}")

        path = raw.get("path")
        if isinstance(path, str):
            try:
                path = normalize_change_path(path)
            except ValueError as e:
                raise ValueError(f"Change #{index}: {e}") from None
        if not isinstance(path, str) or not split_workspace_path(path):
            raise ValueError(f"Change #{index} is missing a non-empty 'path'")

        if project_dir is not None:
            validation = validate_project_relative_path(path, project_dir)
            if not validation["valid"]:
                raise ValueError(f"Change #{index}: {validation['error']}")

        try:
            kind = ChangeKind(str(raw.get("kind", "changed")).lower())
        except ValueError:
            valid = ", ".join(k.value for k in ChangeKind)
            raise ValueError(f"Change #{index} has invalid kind '{raw.get('kind')}'. Valid: {valid}") from None

        try:
            resource_type = ResourceType(str(raw.get("type", "file")).lower())
        except ValueError:
            valid = ", ".join(t.value for t in ResourceType)
            raise ValueError(f"Change #{index} has invalid type '{raw.get('type')}'. Valid: {valid}") from None

        entries.append(ChangeEntry(path=path, kind=kind, resource_type=resource_type))
    return entries


def build_delta_tree(project: str, changes: Iterable[ChangeEntry]) -> ResourceDelta:
    """Assemble a change-event tree rooted at the project.

    Ancestors that were not reported themselves become CHANGED folders. When the
    same path is reported twice the last entry wins. Children are ordered by name
    so traversal order does not depend on the order of ``changes``.
    """
    root = ResourceDelta(path=(project,), kind=ChangeKind.CHANGED, resource_type=ResourceType.PROJECT)
    nodes: dict[tuple[str, ...], ResourceDelta] = {root.path: root}

    for change in changes:
        segments = split_workspace_path(change.path)
        parent = root
        for depth in range(1, len(segments) + 1):
            path = (project,) + segments[:depth]
            node = nodes.get(path)
            if node is None:
                node = ResourceDelta(path=path, kind=ChangeKind.CHANGED, resource_type=ResourceType.FOLDER)
                nodes[path] = node
                parent.children.append(node)
            parent = node

        parent.kind = change.kind
        parent.resource_type = change.resource_type

    for node in nodes.values():
        node.children.sort(key=lambda child: child.name)

    return root
