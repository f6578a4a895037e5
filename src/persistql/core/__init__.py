"""Core domain layer for persistql."""

from persistql.core.entities import (
    ConfigurationError,
    HashingAlgorithm,
    ModuleContribution,
    NamedOperations,
    PersistConfig,
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
    OperationCollector,
    OutputSink,
    QueryMapBuilder,
    QueryMapNotifier,
    ResolutionGate,
)

__all__ = [
    # Entities
    "PersistConfig",
    "HashingAlgorithm",
    "ConfigurationError",
    "ModuleContribution",
    "NamedOperations",
    "RawSource",
    "QueryMap",
    "QueryMapState",
    # Interfaces
    "IBuild",
    "IBuildHost",
    "IBuildModule",
    "IQueryMapListener",
    "IQueryMapSerializer",
    "IVirtualModuleStore",
    # Services
    "OperationCollector",
    "QueryMapBuilder",
    "QueryMapNotifier",
    "ResolutionGate",
    "OutputSink",
]
