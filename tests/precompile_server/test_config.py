"""Tests for pre-compiler configuration."""

import pytest

from deltamcp.precompile_server.config import (
    PrecompileServerConfig,
    get_config,
    load_project_layout,
    reset_config,
    set_config,
)
from deltamcp.precompile_server.errors import ProjectConfigError
from deltamcp.precompile_server.models.delta_models import ProjectLayout


class TestPrecompileServerConfig:
    """Test class for PrecompileServerConfig."""

    def teardown_method(self):
        reset_config()

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("MCP_FILE_ROOT", "/work/MyApp")
        monkeypatch.setenv("DELTAMCP_BUILD_VERBOSITY", "VERBOSE")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        config = PrecompileServerConfig.from_environment()

        assert config.project_root == "/work/MyApp"
        assert config.build_verbosity == "verbose"
        assert config.log_level == "DEBUG"
        assert config.state_dir == ".deltamcp"

    def test_invalid_values_are_rejected(self):
        with pytest.raises(ValueError, match="build_verbosity must be one of"):
            PrecompileServerConfig(build_verbosity="chatty")
        with pytest.raises(ValueError, match="state_dir must be a single directory name"):
            PrecompileServerConfig(state_dir="a/b")

    def test_global_config(self, monkeypatch):
        monkeypatch.setenv("DELTAMCP_STATE_DIR", ".cache")
        reset_config()

        assert get_config().state_dir == ".cache"

        custom = PrecompileServerConfig(project_root="/tmp/other")
        set_config(custom)
        assert get_config() is custom


class TestLoadProjectLayout:
    """Test class for load_project_layout."""

    def test_default_layout_without_file(self, tmp_path):
        assert load_project_layout(tmp_path) == ProjectLayout()

    def test_layout_from_yaml(self, tmp_path):
        (tmp_path / "deltamcp.yaml").write_text(
            "source_folders:\n"
            "  - src\n"
            "  - gen\n"
            "  - libs/billing/src/\n"
            "generators: [aidl]\n"
            "resources_folder: resources\n"
        )

        layout = load_project_layout(tmp_path)

        assert layout.source_folders == ("src", "gen", "libs/billing/src")
        assert layout.generators == ("aidl",)
        assert layout.resources_folder == "resources"
        assert layout.manifest_file == "AndroidManifest.xml"
        assert layout.generated_folder == "gen"

    def test_empty_file_uses_defaults(self, tmp_path):
        (tmp_path / "deltamcp.yaml").write_text("")

        assert load_project_layout(tmp_path) == ProjectLayout()

    @pytest.mark.parametrize(
        "content,message",
        [
            ("source_folders: src\n", "'source_folders' must be a list"),
            ("generators: [aidl, '']\n", "'generators' must be a list"),
            ("manifest_file: 3\n", "'manifest_file' must be a non-empty string"),
            ("- src\n- gen\n", "must contain a mapping"),
            ("source_folders: [src\n", "Invalid YAML"),
        ],
    )
    def test_invalid_layout(self, tmp_path, content, message):
        (tmp_path / "deltamcp.yaml").write_text(content)

        with pytest.raises(ProjectConfigError, match=message):
            load_project_layout(tmp_path)
