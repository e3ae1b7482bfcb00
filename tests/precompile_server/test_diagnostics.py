"""Tests for build diagnostics and the XML checker."""

import logging
from unittest.mock import Mock

import pytest

from deltamcp.precompile_server.models.delta_models import MarkerCategory, MarkerScope, MessageSeverity
from deltamcp.precompile_server.tools.diagnostics import BuildDiagnostics, BuildVerbosity
from deltamcp.precompile_server.tools.workspace import Workspace
from deltamcp.precompile_server.tools.xml_checker import XmlChecker


class TestBuildDiagnostics:
    """Test class for BuildDiagnostics."""

    @pytest.mark.parametrize(
        "verbosity,expected",
        [
            (BuildVerbosity.ALWAYS, ["error"]),
            (BuildVerbosity.NORMAL, ["info", "error"]),
            (BuildVerbosity.VERBOSE, ["verbose", "info", "error"]),
        ],
    )
    def test_messages_filtered_by_verbosity(self, verbosity, expected):
        """Errors always reach the console, verbose output only when asked for."""
        diagnostics = BuildDiagnostics(verbosity)

        diagnostics.report_build_message("MyApp", MessageSeverity.VERBOSE, "verbose")
        diagnostics.report_build_message("MyApp", MessageSeverity.INFO, "info")
        diagnostics.report_build_message("MyApp", MessageSeverity.ERROR, "error")

        assert [m.text for m in diagnostics.messages] == expected

    def test_messages_are_logged(self, caplog):
        """Console messages also go to the logger."""
        diagnostics = BuildDiagnostics(BuildVerbosity.ALWAYS)

        with caplog.at_level(logging.DEBUG, logger="deltamcp.precompile_server.tools.diagnostics"):
            diagnostics.report_build_message("MyApp", MessageSeverity.VERBOSE, "res/a.xml modified")

        assert "[MyApp] res/a.xml modified" in caplog.text
        assert diagnostics.messages == []

    def test_verbosity_from_name(self):
        assert BuildVerbosity.from_name("Verbose") is BuildVerbosity.VERBOSE
        with pytest.raises(ValueError, match="Unknown build verbosity"):
            BuildVerbosity.from_name("loud")

    def test_clear_self_only(self):
        """Self-only clearing leaves other categories and other files alone."""
        diagnostics = BuildDiagnostics()
        manifest = Mock(path=("MyApp", "AndroidManifest.xml"))
        layout = Mock(path=("MyApp", "res", "layout", "main.xml"))
        diagnostics.add_marker(manifest, MarkerCategory.XML, "bad xml", line=2)
        diagnostics.add_marker(manifest, MarkerCategory.ANDROID, "no package")
        diagnostics.add_marker(layout, MarkerCategory.XML, "bad layout")

        removed = diagnostics.clear_diagnostics(manifest, {MarkerCategory.XML}, MarkerScope.SELF_ONLY)

        assert removed == 1
        assert [m.message for m in diagnostics.markers] == ["no package", "bad layout"]

    def test_clear_subtree(self):
        """Subtree clearing reaches every file below a folder."""
        diagnostics = BuildDiagnostics()
        res = Mock(path=("MyApp", "res"))
        diagnostics.add_marker(Mock(path=("MyApp", "res", "values", "a.xml")), MarkerCategory.XML, "a")
        diagnostics.add_marker(Mock(path=("MyApp", "resources.txt")), MarkerCategory.XML, "b")

        removed = diagnostics.clear_diagnostics(res, {MarkerCategory.XML}, MarkerScope.SUBTREE)

        assert removed == 1
        assert [m.message for m in diagnostics.markers] == ["b"]


class TestXmlChecker:
    """Test class for XmlChecker."""

    def make_file(self, tmp_path, content):
        path = tmp_path / "MyApp" / "res" / "values" / "strings.xml"
        path.parent.mkdir(parents=True)
        path.write_text(content)
        return Workspace(tmp_path).get_file(("MyApp", "res", "values", "strings.xml"))

    def test_valid_file(self, tmp_path):
        diagnostics = BuildDiagnostics()
        listener = Mock()
        file = self.make_file(tmp_path, '<resources><string name="app">App</string></resources>')

        assert XmlChecker(diagnostics).check(file, listener) is True
        listener.error_found.assert_not_called()
        assert diagnostics.markers == []

    def test_invalid_file_is_marked(self, tmp_path):
        """Errors become markers and notify the listener."""
        diagnostics = BuildDiagnostics()
        listener = Mock()
        file = self.make_file(tmp_path, "<resources>\n  <string name='app'>App</resources>")

        assert XmlChecker(diagnostics).check(file, listener) is False
        listener.error_found.assert_called_once()
        marker = diagnostics.markers[0]
        assert marker.category is MarkerCategory.XML
        assert marker.line == 2
        assert "mismatched tag" in marker.message

    def test_stale_markers_are_replaced(self, tmp_path):
        """A fixed file loses the markers of the previous check."""
        diagnostics = BuildDiagnostics()
        checker = XmlChecker(diagnostics)
        file = self.make_file(tmp_path, "<resources>")
        checker.check(file)
        assert len(diagnostics.markers) == 1

        file.location.write_text("<resources/>")

        assert checker.check(file) is True
        assert diagnostics.markers == []
