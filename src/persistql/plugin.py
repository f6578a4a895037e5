"""Persisted query build plugin.

Applied to a build host, the plugin extracts every GraphQL operation of
a root build when it seals, assigns persisted ids, and publishes the map
as a virtual module (and optionally an asset).

A plugin created with ``provider=`` is a listener: it never extracts,
it republishes whatever its provider computed, and it holds resolution
of the virtual module until the provider's first map arrives.
"""

import logging
from collections.abc import Mapping
from typing import Any

from persistql.core.entities.persist_config import ConfigurationError, PersistConfig
from persistql.core.entities.query_map import QueryMap, QueryMapState
from persistql.core.interfaces.build_host import IBuild, IBuildHost
from persistql.core.interfaces.listener import IQueryMapListener
from persistql.core.interfaces.serializer import IQueryMapSerializer
from persistql.core.interfaces.virtual_modules import IVirtualModuleStore
from persistql.core.services.notifier import QueryMapNotifier, ResolutionGate
from persistql.core.services.operation_collector import OperationCollector
from persistql.core.services.output_sink import OutputSink
from persistql.core.services.query_map_builder import QueryMapBuilder
from persistql.infrastructure.serializers.json import JsonQueryMapSerializer
from persistql.infrastructure.virtual_modules.memory import InMemoryVirtualModules

logger = logging.getLogger(__name__)


class PersistQueriesPlugin:
    """Build plugin publishing a persisted query map.

    Example:
        provider = PersistQueriesPlugin({"moduleName": "persisted_queries.json"})
        listener = PersistQueriesPlugin(
            {"moduleName": "persisted_queries.json", "filename": "queries.json"},
            provider=provider,
        )
        provider.apply(client_host)
        listener.apply(server_host)
    """

    def __init__(
        self,
        config: PersistConfig | Mapping[str, Any] | None = None,
        *,
        provider: "PersistQueriesPlugin | None" = None,
        virtual_modules: IVirtualModuleStore | None = None,
        serializer: IQueryMapSerializer | None = None,
    ) -> None:
        """Initialize the plugin.

        Args:
            config: A PersistConfig, or a camelCase option bag
                (``moduleName``, ``filename``, ``addTypename``,
                ``useHashes``, ``hashingAlgorithm``, ``provider``...).
            provider: Plugin to receive the query map from. Makes this
                plugin a listener.
            virtual_modules: Store serving the virtual module. Defaults
                to a new in-memory store.
            serializer: Query map serializer. Defaults to compact JSON.

        Raises:
            ConfigurationError: If ``moduleName`` is missing or the
                provider is itself a listener.
        """
        if isinstance(config, PersistConfig):
            self._config = config
        else:
            options = dict(config or {})
            option_provider = options.pop("provider", None)
            if provider is None:
                provider = option_provider
            self._config = PersistConfig.from_options(options)

        self._provider = provider
        self._notifier = QueryMapNotifier()
        self._state = QueryMapState()
        self._gate = ResolutionGate(timeout=self._config.listener_timeout)
        self._serializer = serializer if serializer is not None else JsonQueryMapSerializer()
        self._store = (
            virtual_modules if virtual_modules is not None else InMemoryVirtualModules()
        )
        self._sink = OutputSink(
            module_name=self._config.module_name,
            store=self._store,
            filename=self._config.filename,
        )
        self._builder = QueryMapBuilder(self._config)
        self._collector = OperationCollector(transformer=self._builder.transformer)
        self._build: IBuild | None = None

        if provider is not None:
            provider.add_listener(self)

    @property
    def config(self) -> PersistConfig:
        """Get the plugin configuration."""
        return self._config

    @property
    def provider(self) -> "PersistQueriesPlugin | None":
        """Get the provider this plugin listens to, if any."""
        return self._provider

    @property
    def is_listener(self) -> bool:
        """True if the map is received from a provider."""
        return self._provider is not None

    @property
    def listeners(self) -> tuple[IQueryMapListener, ...]:
        """Get the plugins listening to this one."""
        return self._notifier.listeners

    @property
    def state(self) -> QueryMapState:
        """Get the current map state."""
        return self._state

    @property
    def serialized(self) -> str | None:
        """Get the current serialized map, None before the first one."""
        return self._state.serialized

    @property
    def query_map(self) -> QueryMap | None:
        """Get the current map, None before the first one."""
        if self._state.serialized is None:
            return None
        return self._serializer.deserialize(self._state.serialized)

    @property
    def virtual_modules(self) -> IVirtualModuleStore:
        """Get the store serving the virtual module."""
        return self._store

    def add_listener(self, listener: "PersistQueriesPlugin") -> None:
        """Register a listener. Called by the listener's constructor.

        Args:
            listener: The plugin to notify on each new map.

        Raises:
            ConfigurationError: If this plugin is itself a listener.
        """
        if self.is_listener:
            raise ConfigurationError(
                "A listener PersistQueriesPlugin cannot be used as a provider"
            )
        self._notifier.add_listener(listener)

    def apply(self, host: IBuildHost) -> None:
        """Attach the plugin to a build host.

        Args:
            host: The build host.
        """
        self._sink.bind(host.context)
        host.mount_virtual_modules(self._store)
        host.on_build(self._on_build)

        if self.is_listener:
            host.on_resolve(self._on_resolve)
        else:
            host.on_seal(self._on_seal)

        host.on_after_compile(self._on_after_compile)

    def receive(self, serialized: str) -> None:
        """Adopt a map computed by the provider.

        Republishes it like a locally computed map, then resumes any
        resolution of the virtual module waiting for it.

        Args:
            serialized: The provider's serialized map.
        """
        self._publish(serialized, self._build)
        self._gate.release()

    def _on_build(self, build: IBuild) -> None:
        if build.is_child:
            return
        self._build = build
        if not self._state.is_set:
            self._sink.seed_placeholder()

    async def _on_resolve(self, build: IBuild, path: str) -> None:
        if self._sink.matches(path) and not self._state.is_set:
            await self._gate.wait()

    def _on_seal(self, build: IBuild) -> None:
        if build.is_child:
            return

        collected = self._collector.collect(build.modules)
        query_map = self._builder.build(collected)
        if self._publish(self._serializer.serialize(query_map), build):
            logger.info(
                "Published query map with %d operation(s) to %s",
                len(query_map),
                self._sink.module_path,
            )

    def _on_after_compile(self, build: IBuild) -> None:
        if build.is_child:
            return
        self._sink.emit_asset(build, self._state.serialized)
        # Finished builds are no longer rewritten in place
        if build is self._build:
            self._build = None

    def _publish(self, serialized: str, build: IBuild | None) -> bool:
        if not self._state.update(serialized):
            logger.debug("Query map unchanged, nothing to republish")
            return False

        self._sink.publish(serialized, build.modules if build is not None else ())
        self._state.mark_published()
        self._notifier.notify(serialized)
        return True
