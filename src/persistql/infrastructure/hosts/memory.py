"""In-memory build host implementation.

A small, dependency-graph-only build system: files live in a dict, each
file lists its imports explicitly, and loaders are replaced by the
``graphql`` contribution stored with the file. Enough to run the plugin
end to end, including concurrent provider/listener builds.
"""

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from persistql.core.entities.module_contribution import ModuleContribution
from persistql.core.interfaces.build_host import BuildCallback, ResolveCallback
from persistql.core.interfaces.virtual_modules import IVirtualModuleStore

logger = logging.getLogger(__name__)


@dataclass
class SourceFile:
    """A file known to the host, as a loader would have annotated it."""

    source: str = ""
    imports: tuple[str, ...] = ()
    graphql: ModuleContribution = None


@dataclass
class BuildModule:
    """A module processed by a build."""

    resource: str
    source: str
    graphql: ModuleContribution = None
    virtual: bool = False


class InMemoryBuild:
    """One run of the in-memory host."""

    def __init__(self, parent: "InMemoryBuild | None" = None) -> None:
        """Initialize the build.

        Args:
            parent: The build this one runs inside, for child builds.
        """
        self.parent = parent
        self.assets: dict[str, str] = {}
        self._modules: list[BuildModule] = []

    @property
    def modules(self) -> list[BuildModule]:
        """Get the processed modules in processing order."""
        return self._modules

    @property
    def is_child(self) -> bool:
        """True for builds started from within another build."""
        return self.parent is not None

    def add_module(self, module: BuildModule) -> None:
        """Append a processed module."""
        self._modules.append(module)

    def get_module(self, resource: str) -> BuildModule | None:
        """Find a processed module by its resolved path."""
        resource = os.path.normpath(resource)
        for module in self._modules:
            if module.resource == resource:
                return module
        return None

    def emit_asset(self, name: str, source: str) -> None:
        """Emit a named output artifact.

        Args:
            name: The artifact file name.
            source: The artifact contents.
        """
        self.assets[name] = source


class InMemoryBuildHost:
    """Build host over an in-memory file table.

    Modules are processed depth-first from the entries, each module
    before its imports, so the module order is deterministic. Resolve
    hooks are awaited before a module is loaded and may suspend it.
    """

    def __init__(
        self,
        files: Mapping[str, SourceFile | str] | None = None,
        entry: str | Sequence[str] = "./index.js",
        context: str = "/app",
    ) -> None:
        """Initialize the host.

        Args:
            files: File table; keys resolve against ``context``. Plain
                strings are files without imports or GraphQL.
            entry: Entry request(s).
            context: Base directory for resolution.
        """
        self._context = os.path.normpath(context)
        self._entries = (entry,) if isinstance(entry, str) else tuple(entry)
        self.files: dict[str, SourceFile] = {}
        for path, file in (files or {}).items():
            self.add_file(path, file)

        self._stores: list[IVirtualModuleStore] = []
        self._build_hooks: list[BuildCallback] = []
        self._resolve_hooks: list[ResolveCallback] = []
        self._seal_hooks: list[BuildCallback] = []
        self._after_compile_hooks: list[BuildCallback] = []

    @property
    def context(self) -> str:
        """Get the base directory for resolution."""
        return self._context

    def add_file(self, path: str, file: SourceFile | str) -> None:
        """Add or replace a file in the file table.

        Args:
            path: File path, relative to the context or absolute.
            file: The file, or its plain source.
        """
        if isinstance(file, str):
            file = SourceFile(source=file)
        self.files[self.resolve_path(path)] = file

    def resolve_path(self, request: str, issuer: str | None = None) -> str:
        """Resolve a request to an absolute path.

        Requests starting with ``.`` resolve against the importing
        module's directory; everything else against the context.

        Args:
            request: The import request.
            issuer: Path of the importing module, if any.

        Returns:
            The normalized absolute path.
        """
        base = self._context
        if issuer is not None and request.startswith("."):
            base = os.path.dirname(issuer)
        return os.path.normpath(os.path.join(base, request))

    def mount_virtual_modules(self, store: IVirtualModuleStore) -> None:
        """Serve modules from an in-memory store during resolution."""
        self._stores.append(store)

    def on_build(self, callback: BuildCallback) -> None:
        """Register a callback run when a build starts."""
        self._build_hooks.append(callback)

    def on_resolve(self, callback: ResolveCallback) -> None:
        """Register a callback awaited before each module loads."""
        self._resolve_hooks.append(callback)

    def on_seal(self, callback: BuildCallback) -> None:
        """Register a callback run once all modules are processed."""
        self._seal_hooks.append(callback)

    def on_after_compile(self, callback: BuildCallback) -> None:
        """Register a callback run after compilation."""
        self._after_compile_hooks.append(callback)

    async def run(self, parent: InMemoryBuild | None = None) -> InMemoryBuild:
        """Run one build.

        Args:
            parent: Run as a child build of this build.

        Returns:
            The finished build with its modules and assets.

        Raises:
            FileNotFoundError: If an import cannot be resolved.
        """
        build = InMemoryBuild(parent=parent)
        for on_build in self._build_hooks:
            on_build(build)

        seen: set[str] = set()
        for entry in self._entries:
            await self._process(build, entry, None, seen)

        for on_seal in self._seal_hooks:
            on_seal(build)
        for on_after_compile in self._after_compile_hooks:
            on_after_compile(build)

        logger.debug(
            "Build finished: %d modules, %d assets%s",
            len(build.modules),
            len(build.assets),
            " (child)" if build.is_child else "",
        )
        return build

    async def _process(
        self,
        build: InMemoryBuild,
        request: str,
        issuer: str | None,
        seen: set[str],
    ) -> None:
        path = self.resolve_path(request, issuer)
        if path in seen:
            return
        seen.add(path)

        for on_resolve in self._resolve_hooks:
            await on_resolve(build, path)

        module, imports = self._load(path)
        build.add_module(module)
        for dependency in imports:
            await self._process(build, dependency, path, seen)

    def _load(self, path: str) -> tuple[BuildModule, tuple[str, ...]]:
        file = self.files.get(path)
        if file is not None:
            module = BuildModule(resource=path, source=file.source, graphql=file.graphql)
            return module, file.imports

        for store in self._stores:
            contents = store.read_module(path)
            if contents is not None:
                return BuildModule(resource=path, source=contents, virtual=True), ()

        raise FileNotFoundError(f"Module not found: {path}")
