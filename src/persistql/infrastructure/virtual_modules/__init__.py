"""Virtual module stores."""

from persistql.infrastructure.virtual_modules.memory import InMemoryVirtualModules

__all__ = ["InMemoryVirtualModules"]
