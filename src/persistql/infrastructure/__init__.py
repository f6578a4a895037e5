"""Infrastructure layer implementations for persistql."""

from persistql.infrastructure.hosts import (
    BuildModule,
    InMemoryBuild,
    InMemoryBuildHost,
    SourceFile,
)
from persistql.infrastructure.serializers import (
    JsonQueryMapSerializer,
    SerializationError,
)
from persistql.infrastructure.virtual_modules import InMemoryVirtualModules

__all__ = [
    "InMemoryBuildHost",
    "InMemoryBuild",
    "BuildModule",
    "SourceFile",
    "InMemoryVirtualModules",
    "JsonQueryMapSerializer",
    "SerializationError",
]
