"""Domain entities for persistql."""

from persistql.core.entities.module_contribution import (
    ModuleContribution,
    NamedOperations,
    RawSource,
)
from persistql.core.entities.persist_config import (
    ConfigurationError,
    HashingAlgorithm,
    PersistConfig,
)
from persistql.core.entities.query_map import (
    MapStatus,
    QueryId,
    QueryMap,
    QueryMapState,
)

__all__ = [
    "PersistConfig",
    "HashingAlgorithm",
    "ConfigurationError",
    "ModuleContribution",
    "NamedOperations",
    "RawSource",
    "QueryId",
    "QueryMap",
    "QueryMapState",
    "MapStatus",
]
