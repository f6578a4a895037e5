"""Build host implementations."""

from persistql.infrastructure.hosts.memory import (
    BuildModule,
    InMemoryBuild,
    InMemoryBuildHost,
    SourceFile,
)

__all__ = ["InMemoryBuildHost", "InMemoryBuild", "BuildModule", "SourceFile"]
