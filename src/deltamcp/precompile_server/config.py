"""Configuration management for the pre-compiler server."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import ProjectConfigError
from .models.delta_models import ProjectLayout


@dataclass
class PrecompileServerConfig:
    """Configuration class for the pre-compiler server."""

    # Project Configuration
    project_root: str = "."
    project_file: str = "deltamcp.yaml"
    state_dir: str = ".deltamcp"

    # Runtime Configuration
    build_verbosity: str = "normal"
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "PrecompileServerConfig":
        """Create configuration from environment variables."""
        return cls(
            project_root=os.getenv("MCP_FILE_ROOT", "."),
            project_file=os.getenv("DELTAMCP_PROJECT_FILE", "deltamcp.yaml"),
            state_dir=os.getenv("DELTAMCP_STATE_DIR", ".deltamcp"),
            build_verbosity=os.getenv("DELTAMCP_BUILD_VERBOSITY", "normal").lower(),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> tuple[bool, list[str]]:
        """Validate configuration settings."""
        errors = []

        if not self.project_file:
            errors.append("project_file cannot be empty")

        if not self.state_dir or "/" in self.state_dir or "\\" in self.state_dir:
            errors.append("state_dir must be a single directory name")

        valid_verbosities = ["always", "normal", "verbose"]
        if self.build_verbosity not in valid_verbosities:
            errors.append(f"build_verbosity must be one of {valid_verbosities}")

        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level not in valid_log_levels:
            errors.append(f"log_level must be one of {valid_log_levels}")

        return len(errors) == 0, errors

    def __post_init__(self):
        """Post-initialization validation."""
        is_valid, errors = self.validate()
        if not is_valid:
            raise ValueError(f"Invalid configuration: {', '.join(errors)}")


# Global configuration instance
_config: PrecompileServerConfig | None = None


def get_config() -> PrecompileServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = PrecompileServerConfig.from_environment()
    return _config


def set_config(config: PrecompileServerConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None


def _string_list(data: dict[str, Any], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = data.get(key, list(default))
    if not isinstance(value, list) or not all(isinstance(item, str) and item.strip() for item in value):
        raise ProjectConfigError(f"'{key}' must be a list of non-empty strings")
    return tuple(item.strip().strip("/") for item in value)


def _string(data: dict[str, Any], key: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise ProjectConfigError(f"'{key}' must be a non-empty string")
    return value.strip()


def load_project_layout(project_dir: str | Path, project_file: str = "deltamcp.yaml") -> ProjectLayout:
    """Read the project layout file, falling back to the default layout.

    Example ``deltamcp.yaml``::

        source_folders: [src, gen, libs/billing/src]
        generators: [aidl]
        resources_folder: res
    """
    path = Path(project_dir) / project_file
    if not path.exists():
        return ProjectLayout()

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ProjectConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ProjectConfigError(f"{path} must contain a mapping")

    defaults = ProjectLayout()
    return ProjectLayout(
        resources_folder=_string(data, "resources_folder", defaults.resources_folder),
        manifest_file=_string(data, "manifest_file", defaults.manifest_file),
        generated_folder=_string(data, "generated_folder", defaults.generated_folder),
        source_folders=_string_list(data, "source_folders", defaults.source_folders),
        generators=_string_list(data, "generators", defaults.generators),
    )
