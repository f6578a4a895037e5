"""Plugin configuration entity."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when the plugin is constructed with invalid options."""

    pass


class HashingAlgorithm(Enum):
    """Digest used for query ids in hashing mode.

    SHA256: 64 hex characters.
    SHA512: 128 hex characters (default).
    """

    SHA256 = "sha256"
    SHA512 = "sha512"

    @classmethod
    def from_option(
        cls,
        value: "HashingAlgorithm | str | None",
        strict: bool = False,
    ) -> "HashingAlgorithm":
        """Resolve a configured algorithm name.

        Names must match a member value exactly; anything else falls
        back to SHA512 unless ``strict`` is set.

        Args:
            value: An enum member, an algorithm name, or None.
            strict: Reject unknown names instead of falling back.

        Returns:
            The resolved HashingAlgorithm.

        Raises:
            ConfigurationError: If strict and the name is not recognized.
        """
        if value is None:
            return cls.SHA512
        if isinstance(value, cls):
            return value

        for member in cls:
            if member.value == value:
                return member

        if strict:
            raise ConfigurationError(
                f"Unknown hashing algorithm {value!r}, "
                f"expected one of: {', '.join(m.value for m in cls)}"
            )

        logger.warning(
            "Unknown hashing algorithm %r, falling back to %s",
            value,
            cls.SHA512.value,
        )
        return cls.SHA512


# Option bag keys (as written in build configs) -> dataclass fields
_OPTION_KEYS = {
    "moduleName": "module_name",
    "filename": "filename",
    "addTypename": "add_typename",
    "useHashes": "use_hashes",
    "hashingAlgorithm": "hashing_algorithm",
    "strictHashingAlgorithm": "strict_hashing_algorithm",
    "canonicalCacheSize": "canonical_cache_size",
    "listenerTimeout": "listener_timeout",
}


@dataclass
class PersistConfig:
    """Persisted query plugin configuration.

    Identifier Modes:
        By default every distinct operation gets a sequential integer id,
        starting at 1, in order of first appearance. With use_hashes=True
        the id is the hex digest of the operation text instead.

    Normalization:
        add_typename=True injects a ``__typename`` field into every nested
        selection set before ids are assigned, so the persisted text matches
        what a client that adds typenames will actually send.
    """

    module_name: str = ""
    filename: str | None = None

    # Normalization
    add_typename: bool = False

    # Identifier assignment
    use_hashes: bool = False
    hashing_algorithm: HashingAlgorithm | str | None = None
    strict_hashing_algorithm: bool = False

    # Canonical text memoization (number of distinct sources kept)
    canonical_cache_size: int = 1024

    # Seconds a listener build waits for its provider (None = forever)
    listener_timeout: float | None = None

    def __post_init__(self) -> None:
        """Validate required options and resolve the hashing algorithm."""
        if not self.module_name:
            raise ConfigurationError(
                "module_name (moduleName) option is required for PersistQueriesPlugin"
            )
        if self.canonical_cache_size < 1:
            raise ConfigurationError("canonical_cache_size must be at least 1")
        if self.listener_timeout is not None and self.listener_timeout <= 0:
            raise ConfigurationError("listener_timeout must be positive")

        self.hashing_algorithm = HashingAlgorithm.from_option(
            self.hashing_algorithm,
            strict=self.strict_hashing_algorithm,
        )

    @property
    def algorithm(self) -> HashingAlgorithm:
        """Get the resolved hashing algorithm."""
        # Already resolved in __post_init__, this only narrows the type
        return HashingAlgorithm.from_option(self.hashing_algorithm)

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None) -> "PersistConfig":
        """Create a config from a camelCase option bag.

        Snake_case field names are accepted too. Keys that are not plugin
        options (such as ``provider``) are ignored here.

        Args:
            options: The option mapping, e.g. ``{"moduleName": "queries.json"}``.

        Returns:
            A validated PersistConfig.

        Raises:
            ConfigurationError: If a required option is missing.
        """
        field_names = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in (options or {}).items():
            name = _OPTION_KEYS.get(key, key)
            if name in field_names:
                kwargs[name] = value
        return cls(**kwargs)
