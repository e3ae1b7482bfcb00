"""Pre-compiler server tools implementations."""

from typing import Any

from ...utils.json_parameter_middleware import json_convert
from ..models.precompile_models import ClassifyChangesResponse, ProjectLayoutResponse
from .classify_changes import classify_changes_impl, detect_changes_impl, get_project_layout_impl


def register_precompile_tools(mcp):
    """Register pre-compiler tools with the MCP server."""

    @mcp.tool
    @json_convert
    def classify_changes(  # noqa: F841
        changes: str | list[dict[str, Any]],
        source_folders: str | list[str] | None = None,
        project_root: str | None = None,
    ) -> ClassifyChangesResponse | dict[str, Any]:
        """Decide which pre-compilation steps a set of file changes requires.

        Use this tool when:
        - Files of an Android project changed and you need to know whether R.java
          must be regenerated, the manifest re-parsed or AIDL/RenderScript re-run
        - You already know the changed paths (from git, an editor or a watcher)

        Args:
            changes: List of {"path": "res/layout/main.xml", "kind": "added|removed|changed",
                "type": "file|folder"}; paths are relative to the project root
            source_folders: Project-relative source folders (defaults to deltamcp.yaml or ["src", "gen"])
            project_root: Project directory (defaults to MCP_FILE_ROOT)

        Example:
            classify_changes([{"path": "res/drawable/icon.png", "kind": "added"}])
            → {"compile_resources": true, "phases": ["compile_resources"], ...}

            classify_changes([{"path": "src/com/app/IRemote.aidl", "kind": "changed"}])
            → {"compile_resources": false, "phases": ["generate:aidl"], ...}

        Note: Content-only changes to non-XML resources (images) do not require
        resource compilation. Edits to files in gen/ are always reverted.
        """
        return classify_changes_impl(changes, source_folders, project_root)

    @mcp.tool
    def detect_changes(  # noqa: F841
        project_root: str | None = None,
        update_snapshot: bool = True,
    ) -> ClassifyChangesResponse | dict[str, Any]:
        """Find what changed since the last call and classify those changes.

        The first call on a project reports every file as added. The snapshot is
        stored in <project>/.deltamcp/snapshot.json.

        Args:
            project_root: Project directory (defaults to MCP_FILE_ROOT)
            update_snapshot: Save the current state for the next call
        """
        return detect_changes_impl(project_root, update_snapshot)

    @mcp.tool
    def get_project_layout(project_root: str | None = None) -> ProjectLayoutResponse | dict[str, Any]:  # noqa: F841
        """Show the resources folder, manifest, source folders and generators in use."""
        return get_project_layout_impl(project_root)


__all__ = [
    "classify_changes_impl",
    "detect_changes_impl",
    "get_project_layout_impl",
    "register_precompile_tools",
]
