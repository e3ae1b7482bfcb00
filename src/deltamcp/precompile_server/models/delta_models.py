"""Dataclass models for change-event trees and classification results."""

from dataclasses import dataclass, field
from enum import Enum


class ChangeKind(Enum):
    """Kind of change reported for a resource since the last build."""
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"


class ResourceType(Enum):
    """Type of the resource a change event is about."""
    PROJECT = "project"
    FOLDER = "folder"
    FILE = "file"
    OTHER = "other"


class MessageSeverity(Enum):
    """Severity of a build console message."""
    VERBOSE = "verbose"
    INFO = "info"
    ERROR = "error"


class MarkerCategory(Enum):
    """Categories of diagnostic markers attached to project files."""
    XML = "xml"          # well-formedness problems
    ANDROID = "android"  # semantic problems (missing package, bad sdk version)


class MarkerScope(Enum):
    """How far a marker clear operation reaches."""
    SELF_ONLY = "self_only"
    SUBTREE = "subtree"


@dataclass
class ResourceDelta:
    """One node of a change-event tree.

    ``path`` is a workspace path: segment 0 is the project name, so the project
    root itself has a single segment.
    """

    path: tuple[str, ...]
    kind: ChangeKind
    resource_type: ResourceType
    children: list["ResourceDelta"] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.path[-1] if self.path else ""

    @property
    def extension(self) -> str | None:
        """Text after the last dot of the name, None when there is no dot."""
        name = self.name
        if "." not in name:
            return None
        return name.rsplit(".", 1)[1]

    @property
    def depth(self) -> int:
        """Number of segments below the project root (root is 0)."""
        return len(self.path) - 1


@dataclass(frozen=True)
class ChangeEntry:
    """A single reported change, path relative to the project ("res/values/strings.xml")."""

    path: str
    kind: ChangeKind
    resource_type: ResourceType = ResourceType.FILE


@dataclass
class ManifestData:
    """Data gathered from a manifest parse."""

    package: str | None = None
    min_sdk_version: str | None = None
    target_sdk_version: str | None = None


@dataclass
class ClassificationResult:
    """Outcome of one traversal of a change-event tree.

    Flags only ever go from False to True during a traversal; the manifest fields
    are written at most once, when the manifest is parsed.
    """

    compile_resources: bool = False
    manifest_checked: bool = False
    manifest_package: str | None = None
    min_sdk_version: str | None = None
    target_sdk_version: str | None = None
    xml_error_found: bool = False


@dataclass(frozen=True)
class ProjectLayout:
    """Names of the well-known project entries plus the configured source folders."""

    resources_folder: str = "res"
    manifest_file: str = "AndroidManifest.xml"
    generated_folder: str = "gen"
    source_folders: tuple[str, ...] = ("src", "gen")
    generators: tuple[str, ...] = ("aidl", "renderscript")
