"""Path validation for pre-compiler tool inputs."""

from pathlib import Path
from typing import Any

from .config import get_config


def get_project_root(project_root: str | None = None) -> str:
    """Get project root from configuration or the provided value.

    Args:
        project_root: Provided project root, if None or "." the configured
            root (MCP_FILE_ROOT) is used

    Returns:
        Project root directory path
    """
    if project_root is None or project_root == ".":
        return get_config().project_root
    return project_root


def validate_project_dir(project_root: str) -> dict[str, Any]:
    """Check that the project root exists and is a directory.

    Returns:
        Dictionary with validation result and error message if invalid
    """
    try:
        abs_path = Path(project_root).expanduser().resolve()
    except (OSError, RuntimeError) as e:
        return {"valid": False, "error": f"Invalid project root: {e}"}

    if not abs_path.is_dir():
        return {"valid": False, "error": f"Project root is not a directory: {project_root}"}

    return {"valid": True, "abs_path": abs_path}


def validate_project_relative_path(relative_path: str, project_dir: Path) -> dict[str, Any]:
    """Make sure a project-relative path does not escape the project directory."""
    path = Path(relative_path)
    if path.is_absolute():
        return {"valid": False, "error": f"Path must be relative to the project: {relative_path}"}

    abs_path = (project_dir / path).resolve()
    try:
        abs_path.relative_to(project_dir)
    except ValueError:
        return {"valid": False, "error": f"Path outside project root: {relative_path}"}

    return {"valid": True, "abs_path": abs_path}
