"""Well-formedness check for XML resources."""

import logging
import xml.etree.ElementTree as ET
from typing import Protocol

from ..models.delta_models import MarkerCategory, MarkerScope, MessageSeverity
from .diagnostics import BuildDiagnostics
from .workspace import ProjectFile

logger = logging.getLogger(__name__)


class XmlErrorListener(Protocol):
    """Receives notifications when an XML problem was found and marked."""

    def error_found(self) -> None: ...

    def fatal_error_found(self) -> None: ...


def parse_error_details(error: ET.ParseError) -> tuple[str, int | None]:
    """Return a readable message and the 1-based line of an expat error."""
    position = getattr(error, "position", None)
    line = position[0] if position else None
    message = str(error)
    # expat appends ": line X, column Y", the line is reported separately
    if ": line " in message:
        message = message.split(": line ", 1)[0]
    return message, line


class XmlChecker:
    """Parses XML files and turns parse errors into markers."""

    def __init__(self, diagnostics: BuildDiagnostics):
        self.diagnostics = diagnostics

    def check(self, file: ProjectFile, listener: XmlErrorListener | None = None) -> bool:
        """Return True when the file is well-formed XML.

        Stale XML markers on the file are cleared first. Read failures raise
        ResourceReadError.
        """
        self.diagnostics.clear_diagnostics(file, {MarkerCategory.XML}, MarkerScope.SELF_ONLY)
        content = file.read_bytes()

        try:
            ET.fromstring(content)
        except ET.ParseError as e:
            message, line = parse_error_details(e)
            logger.debug("XML error in %s at line %s: %s", file, line, message)
            self.diagnostics.add_marker(
                file, MarkerCategory.XML, message, line=line, severity=MessageSeverity.ERROR
            )
            if listener is not None:
                listener.error_found()
            return False

        return True
