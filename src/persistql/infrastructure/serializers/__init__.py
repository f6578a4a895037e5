"""Query map serializers."""

from persistql.infrastructure.serializers.json import (
    JsonQueryMapSerializer,
    SerializationError,
)

__all__ = ["JsonQueryMapSerializer", "SerializationError"]
