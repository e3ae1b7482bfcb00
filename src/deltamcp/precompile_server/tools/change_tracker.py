"""Snapshot-based change tracking for projects on disk."""

import json
import logging
import os
from pathlib import Path
from typing import Any

from ..errors import ResourceReadError
from ..models.delta_models import ChangeEntry, ChangeKind, ResourceType

logger = logging.getLogger(__name__)

SNAPSHOT_FILE = "snapshot.json"
SNAPSHOT_VERSION = 1

# relative path -> {"type": "file" | "folder", "size": int, "mtime_ns": int}
Snapshot = dict[str, dict[str, Any]]


def scan_project(project_dir: Path, ignore_dirs: set[str] | None = None) -> Snapshot:
    """Record type, size and modification time of everything below ``project_dir``."""
    ignore_dirs = ignore_dirs or set()
    snapshot: Snapshot = {}

    for dirpath, dirnames, filenames in os.walk(project_dir):
        current = Path(dirpath)
        at_top = current == project_dir

        # Filter dirnames in-place so os.walk doesn't descend
        dirnames[:] = sorted(d for d in dirnames if not (at_top and d in ignore_dirs))

        for d in dirnames:
            rel = (current / d).relative_to(project_dir).as_posix()
            snapshot[rel] = {"type": ResourceType.FOLDER.value, "size": 0, "mtime_ns": 0}

        for fn in filenames:
            full = current / fn
            try:
                stat = full.stat()
            except OSError:
                # vanished between listing and stat
                continue
            rel = full.relative_to(project_dir).as_posix()
            snapshot[rel] = {
                "type": ResourceType.FILE.value,
                "size": stat.st_size,
                "mtime_ns": stat.st_mtime_ns,
            }

    return snapshot


def _is_snapshot_entry(entry: Any) -> bool:
    if not isinstance(entry, dict):
        return False
    if entry.get("type") not in (ResourceType.FILE.value, ResourceType.FOLDER.value):
        return False
    return all(isinstance(entry.get(key), int) for key in ("size", "mtime_ns"))


def diff_snapshots(old: Snapshot, new: Snapshot) -> list[ChangeEntry]:
    """Turn two snapshots into change entries, ordered by path."""
    changes = []

    for rel in sorted(set(old) | set(new)):
        before = old.get(rel)
        after = new.get(rel)

        if before is None:
            changes.append(ChangeEntry(rel, ChangeKind.ADDED, ResourceType(after["type"])))
        elif after is None:
            changes.append(ChangeEntry(rel, ChangeKind.REMOVED, ResourceType(before["type"])))
        elif before["type"] != after["type"]:
            changes.append(ChangeEntry(rel, ChangeKind.ADDED, ResourceType(after["type"])))
        elif after["type"] == ResourceType.FILE.value and (
            before["size"] != after["size"] or before["mtime_ns"] != after["mtime_ns"]
        ):
            changes.append(ChangeEntry(rel, ChangeKind.CHANGED, ResourceType.FILE))

    return changes


class ChangeTracker:
    """Detects changes of a project since the last saved snapshot.

    The snapshot lives in ``<project>/<state_dir>/snapshot.json``; the state
    directory itself is never reported as changed.
    """

    def __init__(self, project_dir: str | Path, state_dir: str = ".deltamcp"):
        self.project_dir = Path(project_dir).resolve()
        self.state_dir = state_dir

    @property
    def snapshot_path(self) -> Path:
        return self.project_dir / self.state_dir / SNAPSHOT_FILE

    def scan(self) -> Snapshot:
        return scan_project(self.project_dir, {self.state_dir})

    def load(self) -> Snapshot:
        """Return the saved snapshot, or an empty one when none was saved yet.

        A snapshot that cannot be used (corrupt, foreign or outdated) is
        discarded, which makes the next detection a full build.
        """
        path = self.snapshot_path
        if not path.exists():
            return {}

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ResourceReadError(str(path), e.strerror or str(e)) from e
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Discarding corrupt snapshot %s", path)
            return {}

        if not isinstance(data, dict):
            logger.warning("Discarding snapshot %s: expected an object", path)
            return {}

        if data.get("version") != SNAPSHOT_VERSION:
            logger.info("Snapshot version %s is outdated, starting over", data.get("version"))
            return {}

        entries = data.get("entries", {})
        if not isinstance(entries, dict) or not all(_is_snapshot_entry(e) for e in entries.values()):
            logger.warning("Discarding snapshot %s: malformed entries", path)
            return {}
        return entries

    def save(self, snapshot: Snapshot) -> None:
        path = self.snapshot_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps({"version": SNAPSHOT_VERSION, "entries": snapshot}, indent=2, sort_keys=True),
            encoding="utf-8",
        )

    def detect(self) -> tuple[list[ChangeEntry], Snapshot]:
        """Return the changes since the saved snapshot plus the current snapshot."""
        current = self.scan()
        changes = diff_snapshots(self.load(), current)
        logger.debug("Detected %d changes in %s", len(changes), self.project_dir)
        return changes, current
