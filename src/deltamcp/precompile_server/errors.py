"""Exceptions raised by the pre-compiler server."""


class DeltaMCPError(Exception):
    """Base class for pre-compiler errors."""


class ResourceReadError(DeltaMCPError):
    """A project file could not be read.

    Classification cannot continue without the file's content, so this error is
    never swallowed by the classifier.
    """

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to read {path}: {reason}")
        self.path = path
        self.reason = reason


class ProjectConfigError(DeltaMCPError):
    """The project layout file is missing required data or is malformed."""
