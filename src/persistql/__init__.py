"""persistql - Persisted GraphQL query maps for build pipelines.

Collects every GraphQL operation found while building an application,
assigns each one a persisted id (a sequential integer or a content
hash), and publishes the resulting map as a virtual module the
application can import, plus an optional build asset for the server.

Example with the in-memory build host:
    from persistql import (
        InMemoryBuildHost,
        NamedOperations,
        PersistQueriesPlugin,
        RawSource,
        SourceFile,
    )

    host = InMemoryBuildHost(
        files={
            "entry.js": SourceFile(
                imports=("./example.graphql", "persisted_queries.json"),
                graphql=NamedOperations({
                    "onCounterUpdated": (
                        "subscription onCounterUpdated { counterUpdated { amount } }"
                    ),
                }),
            ),
            "example.graphql": SourceFile(
                graphql=RawSource("query getCount { count { amount } }"),
            ),
        },
        entry="./entry.js",
    )

    plugin = PersistQueriesPlugin({
        "moduleName": "persisted_queries.json",
        "filename": "output_queries.json",
        "useHashes": True,
    })
    plugin.apply(host)

    build = await host.run()
    build.assets["output_queries.json"]

Sharing one map between builds:
    provider = PersistQueriesPlugin({"moduleName": "persisted_queries.json"})
    listener = PersistQueriesPlugin(
        {"moduleName": "persisted_queries.json"},
        provider=provider,
    )
    provider.apply(client_host)
    listener.apply(server_host)

    # The server build waits for the client build's map
    await asyncio.gather(server_host.run(), client_host.run())
"""

from persistql.core.entities import (
    ConfigurationError,
    HashingAlgorithm,
    MapStatus,
    ModuleContribution,
    NamedOperations,
    PersistConfig,
    QueryId,
    QueryMap,
    QueryMapState,
    RawSource,
)
from persistql.core.interfaces import (
    IBuild,
    IBuildHost,
    IBuildModule,
    IQueryMapListener,
    IQueryMapSerializer,
    IVirtualModuleStore,
)
from persistql.core.services import (
    PLACEHOLDER,
    CollectedOperations,
    OperationCollector,
    OutputSink,
    QueryMapBuilder,
    QueryMapNotifier,
    QueryParseError,
    ResolutionGate,
    ResolutionTimeoutError,
    add_typename,
)
from persistql.infrastructure import (
    BuildModule,
    InMemoryBuild,
    InMemoryBuildHost,
    InMemoryVirtualModules,
    JsonQueryMapSerializer,
    SerializationError,
    SourceFile,
)
from persistql.plugin import PersistQueriesPlugin

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Plugin
    "PersistQueriesPlugin",
    # Core entities
    "PersistConfig",
    "HashingAlgorithm",
    "ModuleContribution",
    "NamedOperations",
    "RawSource",
    "QueryId",
    "QueryMap",
    "QueryMapState",
    "MapStatus",
    # Errors
    "ConfigurationError",
    "QueryParseError",
    "ResolutionTimeoutError",
    "SerializationError",
    # Core interfaces
    "IBuild",
    "IBuildHost",
    "IBuildModule",
    "IQueryMapListener",
    "IQueryMapSerializer",
    "IVirtualModuleStore",
    # Core services
    "OperationCollector",
    "CollectedOperations",
    "QueryMapBuilder",
    "QueryMapNotifier",
    "ResolutionGate",
    "OutputSink",
    "PLACEHOLDER",
    "add_typename",
    # Infrastructure implementations
    "InMemoryBuildHost",
    "InMemoryBuild",
    "BuildModule",
    "SourceFile",
    "InMemoryVirtualModules",
    "JsonQueryMapSerializer",
]
