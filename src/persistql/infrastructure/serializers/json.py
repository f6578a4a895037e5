"""JSON serializer implementation."""

import json
from typing import Any

from persistql.core.entities.query_map import QueryMap


class SerializationError(Exception):
    """Raised when serialization or deserialization fails."""

    pass


class JsonQueryMapSerializer:
    """JSON serializer for query maps.

    Produces a compact object (no whitespace after separators, non-ASCII
    characters kept as-is) whose keys follow the map's insertion order.
    """

    def __init__(self, indent: int | None = None) -> None:
        """Initialize the JSON serializer.

        Args:
            indent: Pretty-print indentation. None gives compact output.
        """
        self._indent = indent

    def serialize(self, query_map: QueryMap) -> str:
        """Serialize a query map to JSON text.

        Args:
            query_map: The map to serialize.

        Returns:
            The JSON text.

        Raises:
            SerializationError: If the map cannot be serialized.
        """
        separators = (",", ":") if self._indent is None else (",", ": ")
        try:
            return json.dumps(
                query_map.as_dict(),
                ensure_ascii=False,
                indent=self._indent,
                separators=separators,
            )
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to serialize query map: {e}") from e

    def deserialize(self, data: str) -> QueryMap:
        """Deserialize JSON text to a query map.

        Args:
            data: The JSON text.

        Returns:
            The QueryMap.

        Raises:
            SerializationError: If the data is not a JSON object of ids.
        """
        try:
            value: Any = json.loads(data)
        except json.JSONDecodeError as e:
            raise SerializationError(f"Failed to deserialize query map: {e}") from e

        if not isinstance(value, dict):
            raise SerializationError(
                f"Expected a JSON object, got {type(value).__name__}"
            )
        for query, query_id in value.items():
            if isinstance(query_id, bool) or not isinstance(query_id, (int, str)):
                raise SerializationError(
                    f"Invalid id {query_id!r} for query {query[:40]!r}"
                )

        return QueryMap.from_mapping(value)
