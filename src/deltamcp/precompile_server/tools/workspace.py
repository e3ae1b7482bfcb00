"""Workspace handles mapping workspace paths to the local filesystem."""

from dataclasses import dataclass
from pathlib import Path

from ..errors import ResourceReadError


def split_workspace_path(path: str) -> tuple[str, ...]:
    """Split ``"/MyApp/res/values"`` style paths into segments."""
    return tuple(s for s in path.replace("\\", "/").split("/") if s and s != ".")


def join_workspace_path(path: tuple[str, ...]) -> str:
    return "/" + "/".join(path)


@dataclass(frozen=True)
class ProjectFolder:
    """Handle to an existing folder of the workspace."""

    path: tuple[str, ...]
    location: Path

    @property
    def name(self) -> str:
        return self.path[-1]

    def __str__(self) -> str:
        return join_workspace_path(self.path)


@dataclass(frozen=True)
class ProjectFile:
    """Handle to a (possibly deleted) file of the workspace."""

    path: tuple[str, ...]
    location: Path

    @property
    def name(self) -> str:
        return self.path[-1]

    @property
    def extension(self) -> str | None:
        if "." not in self.name:
            return None
        return self.name.rsplit(".", 1)[1]

    @property
    def project_relative_path(self) -> str:
        return "/".join(self.path[1:])

    def exists(self) -> bool:
        return self.location.is_file()

    def read_bytes(self) -> bytes:
        try:
            return self.location.read_bytes()
        except OSError as e:
            raise ResourceReadError(str(self), e.strerror or str(e)) from e

    def __str__(self) -> str:
        return join_workspace_path(self.path)


class Workspace:
    """Resolves workspace paths (``<project>/...``) below a root directory.

    The root directory holds one sub-directory per project, so the workspace path
    ``("MyApp", "res")`` maps to ``<root_dir>/MyApp/res``.
    """

    def __init__(self, root_dir: str | Path):
        self.root_dir = Path(root_dir).resolve()

    @classmethod
    def for_project(cls, project_dir: str | Path) -> "Workspace":
        """Workspace whose root is the parent of a single project directory."""
        return cls(Path(project_dir).resolve().parent)

    def location_of(self, path: tuple[str, ...]) -> Path:
        return self.root_dir.joinpath(*path)

    def resolve_folder(self, path: tuple[str, ...]) -> ProjectFolder | None:
        """Return a folder handle only if the folder exists and is a directory."""
        location = self.location_of(path)
        if not location.is_dir():
            return None
        return ProjectFolder(path=tuple(path), location=location)

    def get_file(self, path: tuple[str, ...]) -> ProjectFile:
        return ProjectFile(path=tuple(path), location=self.location_of(path))
