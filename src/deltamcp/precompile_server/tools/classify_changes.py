"""Classify changes tool implementation for the pre-compiler server."""

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from .._security import get_project_root, validate_project_dir, validate_project_relative_path
from ..config import get_config, load_project_layout
from ..errors import DeltaMCPError
from ..models.delta_models import ChangeEntry, ClassificationResult, ProjectLayout
from ..models.precompile_models import (
    BuildMessageItem,
    ClassifyChangesResponse,
    GeneratorWork,
    MarkerItem,
    ProjectLayoutResponse,
)
from .change_tracker import ChangeTracker
from .delta_classifier import DeltaClassifier
from .delta_tree import build_delta_tree, parse_change_entries
from .diagnostics import BuildDiagnostics, BuildVerbosity
from .generators import SourceGeneratorDeltaHandler, create_generators
from .workspace import Workspace, join_workspace_path, split_workspace_path

logger = logging.getLogger(__name__)

PHASE_COMPILE_RESOURCES = "compile_resources"


def plan_build_phases(
    result: ClassificationResult,
    generators: Sequence[SourceGeneratorDeltaHandler],
) -> list[str]:
    """Order the pre-compilation phases a classification calls for."""
    phases = []
    if result.compile_resources:
        phases.append(PHASE_COMPILE_RESOURCES)
    for generator in generators:
        if generator.has_work:
            phases.append(f"generate:{generator.name}")
    return phases


def run_classification(
    project_dir: Path,
    changes: Sequence[ChangeEntry],
    layout: ProjectLayout,
    verbosity: BuildVerbosity = BuildVerbosity.NORMAL,
) -> ClassifyChangesResponse:
    """Run one build cycle's classification over ``changes``.

    Raises:
        ResourceReadError: a changed file could not be read.
    """
    project = project_dir.name
    workspace = Workspace.for_project(project_dir)
    diagnostics = BuildDiagnostics(verbosity)
    generators = create_generators(layout.generators, workspace)
    source_folders = [(project,) + split_workspace_path(folder) for folder in layout.source_folders]

    tree = build_delta_tree(project, changes)
    classifier = DeltaClassifier(workspace, diagnostics, layout=layout)
    result = classifier.classify(tree, source_folders, generators)

    return ClassifyChangesResponse(
        compile_resources=result.compile_resources,
        manifest_checked=result.manifest_checked,
        manifest_package=result.manifest_package,
        min_sdk_version=result.min_sdk_version,
        target_sdk_version=result.target_sdk_version,
        xml_error_found=result.xml_error_found,
        phases=plan_build_phases(result, generators),
        generators=[
            GeneratorWork(
                name=generator.name,
                files_to_compile=[f.project_relative_path for f in generator.files_to_compile],
                removed_files=[f.project_relative_path for f in generator.removed_files],
            )
            for generator in generators
        ],
        messages=[BuildMessageItem(m.severity.value, m.text) for m in diagnostics.messages],
        markers=[
            MarkerItem(
                file=join_workspace_path(m.path),
                category=m.category.value,
                severity=m.severity.value,
                message=m.message,
                line=m.line,
            )
            for m in diagnostics.markers
        ],
        changes_count=len(changes),
    )


def _resolve_project(project_root: str | None) -> tuple[Path | None, dict[str, Any] | None]:
    project_root = get_project_root(project_root)
    validation = validate_project_dir(project_root)
    if not validation["valid"]:
        return None, {"error": {"code": "INVALID_INPUT", "message": validation["error"]}}
    return validation["abs_path"], None


def _load_layout(project_dir: Path, source_folders: list[str] | None) -> ProjectLayout:
    layout = load_project_layout(project_dir, get_config().project_file)
    if source_folders is None:
        return layout

    for folder in source_folders:
        validation = validate_project_relative_path(folder, project_dir)
        if not validation["valid"]:
            raise ValueError(validation["error"])

    return ProjectLayout(
        resources_folder=layout.resources_folder,
        manifest_file=layout.manifest_file,
        generated_folder=layout.generated_folder,
        source_folders=tuple(folder.strip("/") for folder in source_folders),
        generators=layout.generators,
    )


def classify_changes_impl(
    changes: list[dict[str, Any]],
    source_folders: list[str] | None = None,
    project_root: str | None = None,
) -> ClassifyChangesResponse | dict[str, Any]:
    """Classify an explicit list of changes.

    Args:
        changes: Entries like {"path": "res/layout/main.xml", "kind": "changed", "type": "file"}
        source_folders: Project-relative source folders (defaults to the project layout)
        project_root: Project directory (defaults to MCP_FILE_ROOT)

    Returns:
        ClassifyChangesResponse, or an error dictionary
    """
    project_dir, error = _resolve_project(project_root)
    if error:
        return error

    try:
        entries = parse_change_entries(changes, project_dir)
        layout = _load_layout(project_dir, source_folders)
    except (ValueError, DeltaMCPError) as e:
        return {"error": {"code": "INVALID_INPUT", "message": str(e)}}

    try:
        verbosity = BuildVerbosity.from_name(get_config().build_verbosity)
        return run_classification(project_dir, entries, layout, verbosity)
    except ValueError as e:
        return {"error": {"code": "INVALID_INPUT", "message": str(e)}}
    except DeltaMCPError as e:
        logger.error("Classification of %s aborted: %s", project_dir, e)
        return {"error": {"code": "OPERATION_FAILED", "message": str(e)}}


def detect_changes_impl(
    project_root: str | None = None,
    update_snapshot: bool = True,
) -> ClassifyChangesResponse | dict[str, Any]:
    """Diff the project against its last snapshot and classify the changes.

    Args:
        project_root: Project directory (defaults to MCP_FILE_ROOT)
        update_snapshot: Save the current state as the new snapshot after a
            successful classification

    Returns:
        ClassifyChangesResponse, or an error dictionary
    """
    project_dir, error = _resolve_project(project_root)
    if error:
        return error

    config = get_config()
    try:
        layout = load_project_layout(project_dir, config.project_file)
    except DeltaMCPError as e:
        return {"error": {"code": "INVALID_INPUT", "message": str(e)}}

    tracker = ChangeTracker(project_dir, config.state_dir)
    try:
        changes, snapshot = tracker.detect()
        response = run_classification(
            project_dir, changes, layout, BuildVerbosity.from_name(config.build_verbosity)
        )
    except ValueError as e:
        return {"error": {"code": "INVALID_INPUT", "message": str(e)}}
    except DeltaMCPError as e:
        logger.error("Change detection for %s aborted: %s", project_dir, e)
        return {"error": {"code": "OPERATION_FAILED", "message": str(e)}}

    if update_snapshot:
        tracker.save(snapshot)
    return response


def get_project_layout_impl(project_root: str | None = None) -> ProjectLayoutResponse | dict[str, Any]:
    """Return the layout used to classify changes of a project."""
    project_dir, error = _resolve_project(project_root)
    if error:
        return error

    try:
        layout = load_project_layout(project_dir, get_config().project_file)
    except DeltaMCPError as e:
        return {"error": {"code": "INVALID_INPUT", "message": str(e)}}

    return ProjectLayoutResponse(
        project=project_dir.name,
        resources_folder=layout.resources_folder,
        manifest_file=layout.manifest_file,
        generated_folder=layout.generated_folder,
        source_folders=list(layout.source_folders),
        generators=list(layout.generators),
    )
