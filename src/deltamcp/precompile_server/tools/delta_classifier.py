"""Change-event classifier for the pre-compiler.

The classifier walks a tree of change events once, parents before children, and
decides which pre-compilation steps the changes require:

- any change under the resources folder that can add or remove a resource id
  (XML files of any change kind, other files when added or removed) requires
  the resources to be compiled into R.java again,
- a change to the manifest requires R.java to be regenerated and the manifest to
  be parsed for its package and minimum SDK version,
- changes in source folders are offered to the registered generators (AIDL,
  RenderScript), and edits to generated files in the ``gen`` folder are
  reverted by regenerating them.

Subtrees that cannot contain anything relevant (bin/, assets/, ...) are never
descended into, so the cost of a traversal depends on the changed paths only.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..models.delta_models import (
    ChangeKind,
    ClassificationResult,
    MarkerCategory,
    MarkerScope,
    MessageSeverity,
    ProjectLayout,
    ResourceDelta,
    ResourceType,
)
from .diagnostics import BuildDiagnostics
from .generators import JAVA_EXTENSION, GeneratorDeltaHandler
from .manifest_parser import AndroidManifestParser
from .workspace import ProjectFolder, Workspace
from .xml_checker import XmlChecker

logger = logging.getLogger(__name__)

XML_EXTENSION = "xml"
RESOURCE_CLASS = "R.java"
MANIFEST_CLASS = "Manifest.java"


@dataclass(frozen=True)
class TraversalContext:
    """Subtree a node belongs to; handed from each node to its children."""

    in_resources: bool = False
    source_folder: ProjectFolder | None = None
    is_generated_folder: bool = False


class _Traversal:
    """State of one ``classify`` call. Also listens for XML errors."""

    def __init__(
        self,
        source_folders: Sequence[tuple[str, ...]],
        generators: Sequence[GeneratorDeltaHandler],
    ):
        self.source_folders = [tuple(path) for path in source_folders]
        self.generators = list(generators)
        self.result = ClassificationResult()
        self.visited = 0

    def error_found(self) -> None:
        self.result.xml_error_found = True

    def fatal_error_found(self) -> None:
        self.result.xml_error_found = True


class DeltaClassifier:
    """Classifies change-event trees into the pre-compilation work they require.

    A classifier keeps no state between calls; the same instance can classify
    any number of trees.
    """

    def __init__(
        self,
        workspace: Workspace,
        diagnostics: BuildDiagnostics,
        xml_checker: XmlChecker | None = None,
        manifest_parser: AndroidManifestParser | None = None,
        layout: ProjectLayout | None = None,
    ):
        self.workspace = workspace
        self.diagnostics = diagnostics
        self.xml_checker = xml_checker or XmlChecker(diagnostics)
        self.manifest_parser = manifest_parser or AndroidManifestParser(diagnostics)
        self.layout = layout or ProjectLayout()

    def classify(
        self,
        tree: ResourceDelta,
        source_folders: Sequence[tuple[str, ...]],
        generators: Sequence[GeneratorDeltaHandler] = (),
    ) -> ClassificationResult:
        """Walk ``tree`` and return what the changes require.

        Raises:
            ResourceReadError: when a file needed for the decision cannot be read.
        """
        traversal = _Traversal(source_folders, generators)

        stack = [(tree, TraversalContext())]
        while stack:
            delta, context = stack.pop()
            traversal.visited += 1
            descend, child_context = self._visit(delta, context, traversal)
            if descend:
                stack.extend((child, child_context) for child in reversed(delta.children))

        logger.debug(
            "Classified delta of %s: visited=%d compile_resources=%s manifest_checked=%s",
            tree.name, traversal.visited, traversal.result.compile_resources,
            traversal.result.manifest_checked,
        )
        return traversal.result

    def _visit(
        self,
        delta: ResourceDelta,
        context: TraversalContext,
        traversal: _Traversal,
    ) -> tuple[bool, TraversalContext]:
        depth = delta.depth

        # the project itself
        if depth <= 0:
            return True, context

        if depth == 1:
            # directly under the project: not in any subtree yet
            context = TraversalContext()
            name = delta.name.lower()

            if name == self.layout.resources_folder.lower():
                return True, TraversalContext(in_resources=True)

            if name == self.layout.manifest_file.lower():
                self._visit_manifest(delta, traversal)
                return False, context

        if context.source_folder is not None:
            return self._visit_source_member(delta, context, traversal), context

        if context.in_resources:
            return self._visit_resource(delta, traversal), context

        if delta.resource_type is ResourceType.FOLDER:
            return self._discover_source_folder(delta, context, traversal)

        return False, context

    def _visit_manifest(self, delta: ResourceDelta, traversal: _Traversal) -> None:
        result = traversal.result

        if delta.kind is not ChangeKind.REMOVED:
            manifest_file = self.workspace.get_file(delta.path)

            if manifest_file.exists():
                self.diagnostics.clear_diagnostics(
                    manifest_file,
                    {MarkerCategory.XML, MarkerCategory.ANDROID},
                    MarkerScope.SELF_ONLY,
                )

            manifest_data = self.manifest_parser.parse(manifest_file, True, traversal)
            if manifest_data is not None:
                result.manifest_package = manifest_data.package
                result.min_sdk_version = manifest_data.min_sdk_version
                result.target_sdk_version = manifest_data.target_sdk_version

            result.manifest_checked = True

        # a touched or removed manifest can change the package of R.java
        result.compile_resources = True

    def _visit_source_member(
        self,
        delta: ResourceDelta,
        context: TraversalContext,
        traversal: _Traversal,
    ) -> bool:
        if delta.resource_type is ResourceType.FOLDER:
            return True
        if delta.resource_type is not ResourceType.FILE:
            return False

        file = self.workspace.get_file(delta.path)
        kind = delta.kind

        if not context.is_generated_folder:
            for generator in traversal.generators:
                generator.handle_changed_non_java_file(context.source_folder, file, kind)
            return False

        output_warning = False

        if file.name in (RESOURCE_CLASS, MANIFEST_CLASS):
            # removal may come from a package change; at worst an extra build
            traversal.result.compile_resources = True
            output_warning = True
        elif (file.extension or "").lower() == JAVA_EXTENSION:
            for generator in traversal.generators:
                if generator.handle_changed_generated_java_file(
                        context.source_folder, file, traversal.source_folders):
                    output_warning = True
                    break  # generators own disjoint sets of files

        if output_warning:
            project = delta.path[0]
            # reported as errors so they stand out, they do not fail the build
            if kind is ChangeKind.REMOVED:
                self.diagnostics.report_build_message(
                    project, MessageSeverity.ERROR,
                    f"{file.name} was removed! Recreating {file.name}!",
                )
            elif kind is ChangeKind.CHANGED:
                self.diagnostics.report_build_message(
                    project, MessageSeverity.ERROR,
                    f"{file.name} was modified manually! Reverting to generated version!",
                )

        return False

    def _visit_resource(self, delta: ResourceDelta, traversal: _Traversal) -> bool:
        if delta.resource_type is ResourceType.FOLDER:
            return True
        if delta.resource_type is not ResourceType.FILE:
            return False

        kind = delta.kind
        relative_path = "/".join(delta.path[1:])
        if kind is ChangeKind.CHANGED:
            message = f"{relative_path} modified: {RESOURCE_CLASS} needs updating"
        elif kind is ChangeKind.ADDED:
            message = f"New resource file: '{relative_path}'. {RESOURCE_CLASS} needs updating"
        else:
            message = f"{relative_path} removed. {RESOURCE_CLASS} needs updating"
        self.diagnostics.report_build_message(delta.path[0], MessageSeverity.VERBOSE, message)

        if (delta.extension or "").lower() == XML_EXTENSION:
            if kind is not ChangeKind.REMOVED:
                self.xml_checker.check(self.workspace.get_file(delta.path), traversal)

            # any xml change can add or remove an id
            traversal.result.compile_resources = True
        elif kind in (ChangeKind.ADDED, ChangeKind.REMOVED):
            traversal.result.compile_resources = True

        return False

    def _discover_source_folder(
        self,
        delta: ResourceDelta,
        context: TraversalContext,
        traversal: _Traversal,
    ) -> tuple[bool, TraversalContext]:
        path = delta.path

        for folder_path in traversal.source_folders:
            if folder_path == path:
                folder = self.workspace.resolve_folder(folder_path)
                if folder is None:
                    logger.debug("Source folder %s no longer exists, skipping", "/".join(path))
                    return False, context
                is_generated = len(path) == 2 and path[1] == self.layout.generated_folder
                return True, TraversalContext(source_folder=folder, is_generated_folder=is_generated)

        for folder_path in traversal.source_folders:
            if len(path) < len(folder_path) and folder_path[:len(path)] == path:
                # on the way to a nested source folder
                return True, TraversalContext()

        # bin/, assets/ and anything else unrelated to source folders
        return False, context
