"""Query map entity and its publication state."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum

# Sequential id (int) or hex digest (str)
QueryId = int | str


@dataclass(frozen=True)
class QueryMap:
    """Immutable mapping from canonical operation text to persisted id.

    Entries keep their insertion order, which is the order of first
    appearance during the build and the order used for serialization.
    """

    entries: tuple[tuple[str, QueryId], ...] = ()

    def __len__(self) -> int:
        """Return the number of persisted operations."""
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        """Iterate over operation texts in insertion order."""
        return (query for query, _ in self.entries)

    def __contains__(self, query: object) -> bool:
        """Check if an operation text is persisted."""
        return any(query == key for key, _ in self.entries)

    def get(self, query: str) -> QueryId | None:
        """Get the id of an operation text.

        Args:
            query: The canonical operation text.

        Returns:
            The id, or None if the text is not persisted.
        """
        for key, query_id in self.entries:
            if key == query:
                return query_id
        return None

    def as_dict(self) -> dict[str, QueryId]:
        """Return the map as a plain ordered dict."""
        return dict(self.entries)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, QueryId]) -> "QueryMap":
        """Create a QueryMap from an ordered mapping.

        Args:
            mapping: Operation text to id.

        Returns:
            A new QueryMap preserving the mapping's order.
        """
        return cls(entries=tuple(mapping.items()))


class MapStatus(Enum):
    """Lifecycle of the map held by one plugin instance."""

    UNSET = "unset"
    COMPUTED = "computed"
    PUBLISHED = "published"


@dataclass
class QueryMapState:
    """The map currently owned by one plugin instance.

    Holds the serialized form, which is what gets compared for change
    detection, written to the virtual module and sent to listeners.
    """

    serialized: str | None = None
    status: MapStatus = MapStatus.UNSET

    @property
    def is_set(self) -> bool:
        """Check if a map has been computed or received."""
        return self.status is not MapStatus.UNSET

    def update(self, serialized: str) -> bool:
        """Adopt a newly computed map.

        Args:
            serialized: The serialized map.

        Returns:
            True if the map changed (including the first update),
            False if it is identical to the current one.
        """
        if self.is_set and serialized == self.serialized:
            return False
        self.serialized = serialized
        self.status = MapStatus.COMPUTED
        return True

    def mark_published(self) -> None:
        """Record that the current map has been written out."""
        if self.status is MapStatus.UNSET:
            raise RuntimeError("Cannot publish before a map is computed")
        self.status = MapStatus.PUBLISHED
