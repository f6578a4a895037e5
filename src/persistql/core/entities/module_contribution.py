"""GraphQL contributions attached to build modules by loaders."""

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class NamedOperations:
    """Operations pre-extracted from a module, keyed by operation name.

    Produced by loaders that find embedded GraphQL (e.g. tagged template
    literals) in source files. Values are full operation texts.
    """

    operations: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RawSource:
    """Whole-file GraphQL source passed through unprocessed.

    Produced by loaders for ``.graphql``/``.gql`` files. All raw sources of a
    build are concatenated and parsed as one document.
    """

    source: str = ""


# What a loader may attach to a module; None means the module has no GraphQL
ModuleContribution = NamedOperations | RawSource | None
