"""Pre-compiler server models."""

from .delta_models import (
    ChangeEntry,
    ChangeKind,
    ClassificationResult,
    ManifestData,
    MarkerCategory,
    MarkerScope,
    MessageSeverity,
    ProjectLayout,
    ResourceDelta,
    ResourceType,
)
from .precompile_models import (
    BuildMessageItem,
    ClassifyChangesResponse,
    GeneratorWork,
    MarkerItem,
    ProjectLayoutResponse,
)

__all__ = [
    "BuildMessageItem",
    "ChangeEntry",
    "ChangeKind",
    "ClassificationResult",
    "ClassifyChangesResponse",
    "GeneratorWork",
    "ManifestData",
    "MarkerCategory",
    "MarkerItem",
    "MarkerScope",
    "MessageSeverity",
    "ProjectLayout",
    "ProjectLayoutResponse",
    "ResourceDelta",
    "ResourceType",
]
