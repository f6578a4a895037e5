"""Output sink service.

Publishes the serialized query map as a virtual module and, if
configured, as a named build asset.
"""

import logging
import os
from collections.abc import Iterable

from persistql.core.interfaces.build_host import IBuild, IBuildModule
from persistql.core.interfaces.virtual_modules import IVirtualModuleStore

logger = logging.getLogger(__name__)

# Served before the first map exists, so imports never fail to resolve
PLACEHOLDER = "{}"


class OutputSink:
    """Writes the query map where builds and applications can read it."""

    def __init__(
        self,
        module_name: str,
        store: IVirtualModuleStore,
        filename: str | None = None,
    ) -> None:
        """Initialize the sink.

        Args:
            module_name: Import path the map is published under.
            store: Virtual module store mounted on the host.
            filename: Optional asset name to emit the map as.
        """
        self._module_name = module_name
        self._store = store
        self._filename = filename
        self._module_path: str | None = None

    @property
    def filename(self) -> str | None:
        """Get the configured asset name."""
        return self._filename

    @property
    def module_path(self) -> str:
        """Get the absolute path of the virtual module.

        Raises:
            RuntimeError: If the sink has not been bound to a host context.
        """
        if self._module_path is None:
            raise RuntimeError("OutputSink is not bound; apply the plugin to a host first")
        return self._module_path

    def bind(self, context: str) -> str:
        """Resolve the module name against the host's base directory.

        Args:
            context: The host's base directory.

        Returns:
            The absolute module path.
        """
        self._module_path = os.path.normpath(os.path.join(context, self._module_name))
        return self._module_path

    def matches(self, resource: str) -> bool:
        """Check if a module resource is the published virtual module."""
        if resource == self._module_name:
            return True
        return os.path.normpath(resource) == self.module_path

    def seed_placeholder(self) -> None:
        """Serve an empty map until the first real one is published."""
        self._store.write_module(self.module_path, PLACEHOLDER)
        logger.debug("Seeded placeholder at %s", self.module_path)

    def publish(self, serialized: str, modules: Iterable[IBuildModule] = ()) -> int:
        """Publish a new map.

        Writes the virtual module and rewrites any copy of it already
        bundled in the current build, so the build converges on the new
        map without another pass.

        Args:
            serialized: The serialized map.
            modules: Modules of the current build.

        Returns:
            Number of bundled modules rewritten.
        """
        self._store.write_module(self.module_path, serialized)

        rewritten = 0
        for module in modules:
            if self.matches(module.resource):
                module.source = serialized
                rewritten += 1

        if rewritten:
            logger.debug("Rewrote %d bundled copy(ies) of %s", rewritten, self.module_path)
        return rewritten

    def emit_asset(self, build: IBuild, serialized: str | None) -> bool:
        """Emit the map as a named build asset.

        Args:
            build: The build to emit into.
            serialized: The current serialized map, or None if no map
                exists yet (the placeholder is emitted then).

        Returns:
            True if an asset was emitted, False if no filename is set.
        """
        if not self._filename:
            return False

        if serialized is None:
            logger.warning(
                "No query map computed before emitting %s, writing placeholder",
                self._filename,
            )
            serialized = PLACEHOLDER

        build.emit_asset(self._filename, serialized)
        logger.debug("Emitted %s", self._filename)
        return True
