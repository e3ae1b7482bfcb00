"""Source generators (AIDL, RenderScript) reacting to change events."""

import logging
from collections.abc import Callable, Sequence
from typing import Protocol

from ..models.delta_models import ChangeKind
from .workspace import ProjectFile, ProjectFolder, Workspace

logger = logging.getLogger(__name__)

JAVA_EXTENSION = "java"


class GeneratorDeltaHandler(Protocol):
    """Capability every registered code generator offers to the classifier."""

    name: str

    def handle_changed_generated_java_file(
        self,
        source_folder: ProjectFolder,
        file: ProjectFile,
        source_folders: Sequence[tuple[str, ...]],
    ) -> bool:
        """Return True when ``file`` is output of this generator (the file is claimed)."""
        ...

    def handle_changed_non_java_file(
        self,
        source_folder: ProjectFolder,
        file: ProjectFile,
        kind: ChangeKind,
    ) -> None: ...


class SourceGeneratorDeltaHandler:
    """Tracks which inputs of one generator must be recompiled or cleaned up.

    ``output_to_source`` maps the name of a generated Java file to the name of
    the source file it came from, or None when the name cannot be generator
    output.
    """

    def __init__(
        self,
        name: str,
        source_extension: str,
        output_to_source: Callable[[str], str | None],
        workspace: Workspace,
    ):
        self.name = name
        self.source_extension = source_extension
        self.output_to_source = output_to_source
        self.workspace = workspace
        self.files_to_compile: list[ProjectFile] = []
        self.removed_files: list[ProjectFile] = []

    @property
    def has_work(self) -> bool:
        return bool(self.files_to_compile or self.removed_files)

    def handle_changed_generated_java_file(
        self,
        source_folder: ProjectFolder,
        file: ProjectFile,
        source_folders: Sequence[tuple[str, ...]],
    ) -> bool:
        source_name = self.output_to_source(file.name)
        if source_name is None:
            return False

        # package directories of the generated file, relative to the gen folder
        package_dirs = file.path[len(source_folder.path):-1]

        for folder_path in source_folders:
            if tuple(folder_path) == source_folder.path:
                continue
            candidate = self.workspace.get_file(tuple(folder_path) + package_dirs + (source_name,))
            if candidate.exists():
                logger.debug("%s claimed %s (source %s)", self.name, file, candidate)
                self._add(self.files_to_compile, candidate)
                return True

        return False

    def handle_changed_non_java_file(
        self,
        source_folder: ProjectFolder,
        file: ProjectFile,
        kind: ChangeKind,
    ) -> None:
        extension = file.extension
        if extension is None or extension.lower() != self.source_extension:
            return

        if kind is ChangeKind.REMOVED:
            self._add(self.removed_files, file)
        else:
            self._add(self.files_to_compile, file)

    @staticmethod
    def _add(files: list[ProjectFile], file: ProjectFile) -> None:
        if file not in files:
            files.append(file)


def _aidl_source_name(java_name: str) -> str | None:
    if not java_name.endswith(".java"):
        return None
    return java_name[: -len(".java")] + ".aidl"


def _renderscript_source_name(java_name: str) -> str | None:
    prefix = "ScriptC_"
    if not (java_name.startswith(prefix) and java_name.endswith(".java")):
        return None
    return java_name[len(prefix): -len(".java")] + ".rs"


def aidl_generator(workspace: Workspace) -> SourceGeneratorDeltaHandler:
    return SourceGeneratorDeltaHandler("aidl", "aidl", _aidl_source_name, workspace)


def renderscript_generator(workspace: Workspace) -> SourceGeneratorDeltaHandler:
    return SourceGeneratorDeltaHandler("renderscript", "rs", _renderscript_source_name, workspace)


GENERATOR_FACTORIES: dict[str, Callable[[Workspace], SourceGeneratorDeltaHandler]] = {
    "aidl": aidl_generator,
    "renderscript": renderscript_generator,
}


def create_generators(names: Sequence[str], workspace: Workspace) -> list[SourceGeneratorDeltaHandler]:
    """Instantiate generators by name, in the given order."""
    generators = []
    for name in names:
        factory = GENERATOR_FACTORIES.get(name)
        if factory is None:
            raise ValueError(f"Unknown generator '{name}'. Available: {', '.join(GENERATOR_FACTORIES)}")
        generators.append(factory(workspace))
    return generators
