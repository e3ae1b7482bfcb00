"""Dataclass models for pre-compiler MCP tool output schemas."""

from dataclasses import dataclass, field


@dataclass
class BuildMessageItem:
    """Build console message."""

    severity: str  # "verbose", "info", "error"
    text: str


@dataclass
class MarkerItem:
    """Diagnostic marker left on a project file."""

    file: str
    category: str  # "xml", "android"
    severity: str
    message: str
    line: int | None = None


@dataclass
class GeneratorWork:
    """Pending work of one source generator."""

    name: str
    files_to_compile: list[str]
    removed_files: list[str]


@dataclass
class ClassifyChangesResponse:
    """Response schema for classify_changes and detect_changes tools."""

    compile_resources: bool
    manifest_checked: bool
    manifest_package: str | None
    min_sdk_version: str | None
    target_sdk_version: str | None
    xml_error_found: bool
    phases: list[str]
    generators: list[GeneratorWork]
    messages: list[BuildMessageItem]
    markers: list[MarkerItem]
    changes_count: int
    success: bool = True


@dataclass
class ProjectLayoutResponse:
    """Response schema for get_project_layout tool."""

    project: str
    resources_folder: str
    manifest_file: str
    generated_folder: str
    source_folders: list[str] = field(default_factory=list)
    generators: list[str] = field(default_factory=list)
