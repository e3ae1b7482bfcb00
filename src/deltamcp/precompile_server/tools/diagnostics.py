"""Build console messages and file markers for the pre-compiler."""

import logging
from dataclasses import dataclass
from enum import IntEnum

from ..models.delta_models import MarkerCategory, MarkerScope, MessageSeverity

logger = logging.getLogger(__name__)


class BuildVerbosity(IntEnum):
    """How much of the build output reaches the console."""
    ALWAYS = 0
    NORMAL = 1
    VERBOSE = 2

    @classmethod
    def from_name(cls, name: str) -> "BuildVerbosity":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown build verbosity: {name}") from None


# Lowest verbosity at which a message of the given severity is shown
_SEVERITY_THRESHOLD = {
    MessageSeverity.ERROR: BuildVerbosity.ALWAYS,
    MessageSeverity.INFO: BuildVerbosity.NORMAL,
    MessageSeverity.VERBOSE: BuildVerbosity.VERBOSE,
}

_SEVERITY_LOG_LEVEL = {
    MessageSeverity.ERROR: logging.ERROR,
    MessageSeverity.INFO: logging.INFO,
    MessageSeverity.VERBOSE: logging.DEBUG,
}


@dataclass
class BuildMessage:
    """A message printed to the build console."""

    project: str
    severity: MessageSeverity
    text: str


@dataclass
class Marker:
    """A diagnostic annotation attached to a workspace file."""

    path: tuple[str, ...]
    category: MarkerCategory
    severity: MessageSeverity
    message: str
    line: int | None = None


class BuildDiagnostics:
    """In-memory diagnostics sink: console messages plus per-file markers."""

    def __init__(self, verbosity: BuildVerbosity = BuildVerbosity.NORMAL):
        self.verbosity = verbosity
        self.messages: list[BuildMessage] = []
        self.markers: list[Marker] = []

    def report_build_message(self, project: str, severity: MessageSeverity, text: str) -> None:
        logger.log(_SEVERITY_LOG_LEVEL[severity], "[%s] %s", project, text)
        if _SEVERITY_THRESHOLD[severity] <= self.verbosity:
            self.messages.append(BuildMessage(project, severity, text))

    def add_marker(
        self,
        file,
        category: MarkerCategory,
        message: str,
        line: int | None = None,
        severity: MessageSeverity = MessageSeverity.ERROR,
    ) -> Marker:
        marker = Marker(tuple(file.path), category, severity, message, line)
        self.markers.append(marker)
        return marker

    def clear_diagnostics(
        self,
        file,
        categories: set[MarkerCategory],
        scope: MarkerScope = MarkerScope.SELF_ONLY,
    ) -> int:
        """Remove markers of the given categories; returns how many were removed."""
        target = tuple(file.path)

        def in_scope(path: tuple[str, ...]) -> bool:
            if scope is MarkerScope.SELF_ONLY:
                return path == target
            return path[:len(target)] == target

        kept = [m for m in self.markers if not (m.category in categories and in_scope(m.path))]
        removed = len(self.markers) - len(kept)
        self.markers = kept
        return removed
