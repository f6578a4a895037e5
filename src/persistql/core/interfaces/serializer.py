"""Serializer interface."""

from typing import Protocol

from persistql.core.entities.query_map import QueryMap


class IQueryMapSerializer(Protocol):
    """Contract for turning query maps into module/artifact text.

    The serialized form is also the unit of change detection, so
    serialize must be deterministic for equal maps.
    """

    def serialize(self, query_map: QueryMap) -> str:
        """Serialize a query map to text.

        Args:
            query_map: The map to serialize.

        Returns:
            The serialized map.

        Raises:
            SerializationError: If the map cannot be serialized.
        """
        ...

    def deserialize(self, data: str) -> QueryMap:
        """Deserialize text to a query map.

        Args:
            data: The serialized map.

        Returns:
            The QueryMap.

        Raises:
            SerializationError: If the data cannot be deserialized.
        """
        ...
