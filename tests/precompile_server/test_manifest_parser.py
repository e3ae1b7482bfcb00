"""Tests for AndroidManifestParser."""

from unittest.mock import Mock

import pytest

from deltamcp.precompile_server.errors import ResourceReadError
from deltamcp.precompile_server.models.delta_models import MarkerCategory
from deltamcp.precompile_server.tools.diagnostics import BuildDiagnostics
from deltamcp.precompile_server.tools.manifest_parser import AndroidManifestParser
from deltamcp.precompile_server.tools.workspace import Workspace


def write_manifest(tmp_path, content):
    project_dir = tmp_path / "MyApp"
    project_dir.mkdir(exist_ok=True)
    (project_dir / "AndroidManifest.xml").write_text(content)
    return Workspace(tmp_path).get_file(("MyApp", "AndroidManifest.xml"))


class TestAndroidManifestParser:
    """Test class for AndroidManifestParser."""

    def setup_method(self):
        self.diagnostics = BuildDiagnostics()
        self.parser = AndroidManifestParser(self.diagnostics)
        self.listener = Mock()

    def test_gathers_package_and_sdk_versions(self, tmp_path):
        """package, minSdkVersion and targetSdkVersion are extracted."""
        manifest = write_manifest(tmp_path, """<?xml version="1.0" encoding="utf-8"?>
<manifest xmlns:android="http://schemas.android.com/apk/res/android" package="com.example.notes">
    <uses-sdk android:minSdkVersion="7" android:targetSdkVersion="Honeycomb" />
</manifest>""")

        data = self.parser.parse(manifest, True, self.listener)

        assert data.package == "com.example.notes"
        assert data.min_sdk_version == "7"
        assert data.target_sdk_version == "Honeycomb"
        self.listener.error_found.assert_not_called()
        self.listener.fatal_error_found.assert_not_called()
        assert self.diagnostics.markers == []

    def test_missing_uses_sdk(self, tmp_path):
        """Without <uses-sdk> the versions stay unset."""
        manifest = write_manifest(tmp_path, '<manifest package="com.app"><application/></manifest>')

        data = self.parser.parse(manifest, True, self.listener)

        assert data.package == "com.app"
        assert data.min_sdk_version is None

    def test_missing_package_is_marked(self, tmp_path):
        """A manifest without package gets a semantic marker but still returns data."""
        manifest = write_manifest(tmp_path, "<manifest><application/></manifest>")

        data = self.parser.parse(manifest, True, self.listener)

        assert data is not None
        assert data.package is None
        self.listener.error_found.assert_called_once()
        assert [m.category for m in self.diagnostics.markers] == [MarkerCategory.ANDROID]

    def test_malformed_xml_returns_none(self, tmp_path):
        """Parse errors are marked with their line and reported as fatal."""
        manifest = write_manifest(tmp_path, '<manifest package="com.app">\n  <application>\n</manifest>')

        data = self.parser.parse(manifest, True, self.listener)

        assert data is None
        self.listener.fatal_error_found.assert_called_once()
        marker = self.diagnostics.markers[0]
        assert marker.category is MarkerCategory.XML
        assert marker.line == 3

    def test_wrong_root_element(self, tmp_path):
        """A document that is not a manifest is rejected."""
        manifest = write_manifest(tmp_path, "<resources/>")

        assert self.parser.parse(manifest, True, self.listener) is None
        self.listener.fatal_error_found.assert_called_once()
        assert "<resources>" in self.diagnostics.markers[0].message

    def test_without_gather_data(self, tmp_path):
        """Validation-only parses return empty data."""
        manifest = write_manifest(tmp_path, '<manifest package="com.app"/>')

        data = self.parser.parse(manifest, False, self.listener)

        assert data is not None
        assert data.package is None

    def test_missing_file_raises(self, tmp_path):
        """Read failures propagate to the caller."""
        (tmp_path / "MyApp").mkdir()
        manifest = Workspace(tmp_path).get_file(("MyApp", "AndroidManifest.xml"))

        with pytest.raises(ResourceReadError, match="AndroidManifest.xml"):
            self.parser.parse(manifest, True, self.listener)
