"""Virtual module store interface."""

from typing import Protocol


class IVirtualModuleStore(Protocol):
    """Contract for modules served from memory instead of disk.

    Paths are absolute; a written module is visible to every
    resolution that happens after the write.
    """

    def write_module(self, path: str, contents: str) -> None:
        """Create or replace a virtual module.

        Args:
            path: Absolute module path.
            contents: The module source.
        """
        ...

    def read_module(self, path: str) -> str | None:
        """Read a virtual module.

        Args:
            path: Absolute module path.

        Returns:
            The module source, or None if no such module exists.
        """
        ...
