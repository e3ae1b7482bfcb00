"""Android manifest parsing for the pre-compiler."""

import logging
import xml.etree.ElementTree as ET

from ..models.delta_models import ManifestData, MarkerCategory, MessageSeverity
from .diagnostics import BuildDiagnostics
from .workspace import ProjectFile
from .xml_checker import XmlErrorListener, parse_error_details

logger = logging.getLogger(__name__)

ANDROID_NS = "http://schemas.android.com/apk/res/android"

NODE_MANIFEST = "manifest"
NODE_USES_SDK = "uses-sdk"
ATTRIBUTE_PACKAGE = "package"
ATTRIBUTE_MIN_SDK_VERSION = f"{{{ANDROID_NS}}}minSdkVersion"
ATTRIBUTE_TARGET_SDK_VERSION = f"{{{ANDROID_NS}}}targetSdkVersion"


class AndroidManifestParser:
    """Parses AndroidManifest.xml files, reporting problems as markers.

    Parse failures never raise: they are marked on the file, the listener is
    notified and ``parse`` returns None. Only read failures propagate.
    """

    def __init__(self, diagnostics: BuildDiagnostics):
        self.diagnostics = diagnostics

    def parse(
        self,
        file: ProjectFile,
        gather_data: bool = True,
        listener: XmlErrorListener | None = None,
    ) -> ManifestData | None:
        content = file.read_bytes()

        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            message, line = parse_error_details(e)
            self._mark(file, MarkerCategory.XML, message, line)
            if listener is not None:
                listener.fatal_error_found()
            return None

        if root.tag != NODE_MANIFEST:
            self._mark(file, MarkerCategory.ANDROID, f"Root element must be <{NODE_MANIFEST}>, found <{root.tag}>")
            if listener is not None:
                listener.fatal_error_found()
            return None

        package = root.get(ATTRIBUTE_PACKAGE)
        if not package:
            self._mark(file, MarkerCategory.ANDROID, "Missing 'package' attribute on <manifest>")
            if listener is not None:
                listener.error_found()

        if not gather_data:
            return ManifestData()

        data = ManifestData(package=package or None)
        uses_sdk = root.find(NODE_USES_SDK)
        if uses_sdk is not None:
            data.min_sdk_version = uses_sdk.get(ATTRIBUTE_MIN_SDK_VERSION)
            data.target_sdk_version = uses_sdk.get(ATTRIBUTE_TARGET_SDK_VERSION)

        logger.debug("Parsed %s: package=%s minSdkVersion=%s", file, data.package, data.min_sdk_version)
        return data

    def _mark(self, file: ProjectFile, category: MarkerCategory, message: str, line: int | None = None):
        self.diagnostics.add_marker(file, category, message, line=line, severity=MessageSeverity.ERROR)
