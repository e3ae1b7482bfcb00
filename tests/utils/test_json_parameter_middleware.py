"""Tests for JSON Parameter Middleware."""

from typing import Any

import pytest

from deltamcp.utils.json_parameter_middleware import convert_parameter, json_convert


class TestConvertParameter:
    """Test convert_parameter functionality."""

    def test_json_list_string(self):
        assert convert_parameter('["src", "gen"]', list[str], "folders") == ["src", "gen"]

    def test_json_in_optional_union(self):
        """Union annotations such as ``str | list[str] | None`` are parsed too."""
        assert convert_parameter('["src"]', str | list[str] | None, "folders") == ["src"]
        assert convert_parameter('{"a": 1}', dict[str, Any] | None, "options") == {"a": 1}

    def test_values_left_alone(self):
        """Non-string values and non-container parameters pass through."""
        assert convert_parameter(["src"], list[str], "folders") == ["src"]
        assert convert_parameter(None, list[str] | None, "folders") is None
        assert convert_parameter("[1]", str, "name") == "[1]"
        assert convert_parameter("5", int, "count") == "5"

    def test_invalid_json(self):
        with pytest.raises(ValueError, match="Invalid JSON in parameter 'changes'"):
            convert_parameter("[{", list[dict[str, Any]], "changes")

    def test_wrong_json_type(self):
        with pytest.raises(ValueError, match="Parameter 'changes' must be a list, got dict from JSON"):
            convert_parameter('{"path": "res"}', list[dict[str, Any]], "changes")


class TestJsonConvertDecorator:
    """Test the json_convert decorator."""

    def test_converts_string_arguments(self):
        @json_convert
        def tool(changes: str | list[dict[str, Any]], project_root: str | None = None):
            return changes, project_root

        changes, project_root = tool('[{"path": "res/a.xml"}]', project_root="/work/MyApp")

        assert changes == [{"path": "res/a.xml"}]
        assert project_root == "/work/MyApp"

    def test_defaults_are_applied(self):
        @json_convert
        def tool(changes: list[str], folders: list[str] | None = None):
            return folders

        assert tool([]) is None

    def test_invalid_json_returns_error(self):
        @json_convert
        def tool(changes: list[dict[str, Any]]):
            raise AssertionError("tool body must not run")

        result = tool("not json")

        assert result["error"]["code"] == "INVALID_INPUT"
        assert "changes" in result["error"]["message"]

    def test_wraps_metadata(self):
        @json_convert
        def classify(changes: list[str]):
            """Classify changes."""
            return changes

        assert classify.__name__ == "classify"
        assert classify.__doc__ == "Classify changes."
