"""Query map listener interface."""

from typing import Protocol


class IQueryMapListener(Protocol):
    """Contract for instances fed by a provider's query map."""

    def receive(self, serialized: str) -> None:
        """Adopt a map computed by the provider.

        Called synchronously, in registration order, each time the
        provider's map changes.

        Args:
            serialized: The provider's serialized map.
        """
        ...
