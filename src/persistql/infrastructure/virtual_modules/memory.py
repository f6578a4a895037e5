"""In-memory virtual module store implementation."""

import os


class InMemoryVirtualModules:
    """Virtual modules kept in a dict keyed by normalized absolute path.

    Suitable for a single process. Reads see every write that happened
    before them.
    """

    def __init__(self, modules: dict[str, str] | None = None) -> None:
        """Initialize the store.

        Args:
            modules: Optional initial modules, path to source.
        """
        self._modules: dict[str, str] = {}
        for path, contents in (modules or {}).items():
            self.write_module(path, contents)

    def write_module(self, path: str, contents: str) -> None:
        """Create or replace a virtual module.

        Args:
            path: Absolute module path.
            contents: The module source.
        """
        self._modules[os.path.normpath(path)] = contents

    def read_module(self, path: str) -> str | None:
        """Read a virtual module.

        Args:
            path: Absolute module path.

        Returns:
            The module source, or None if no such module exists.
        """
        return self._modules.get(os.path.normpath(path))

    def __contains__(self, path: object) -> bool:
        """Check if a module exists at a path."""
        return isinstance(path, str) and os.path.normpath(path) in self._modules

    def __len__(self) -> int:
        """Return the number of virtual modules."""
        return len(self._modules)
