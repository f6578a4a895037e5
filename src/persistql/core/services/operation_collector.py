"""Operation collector service.

Walks the modules of a build and gathers the GraphQL each loader
attached to them.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from persistql.core.entities.module_contribution import NamedOperations, RawSource
from persistql.core.interfaces.build_host import IBuildModule
from persistql.core.services.document import parse_document, print_canonical
from persistql.core.services.typename_transformer import QueryTransformer


@dataclass(frozen=True)
class CollectedOperations:
    """GraphQL gathered from one build, in module order.

    Attributes:
        operations: Operation texts from named-operation contributions.
        raw_source: All raw GraphQL sources joined into one blob.
    """

    operations: tuple[str, ...] = ()
    raw_source: str = ""

    @property
    def has_raw_source(self) -> bool:
        """Check if the blob holds anything worth parsing."""
        return bool(self.raw_source.strip())


class OperationCollector:
    """Collects operation texts and raw sources from build modules."""

    def __init__(self, transformer: QueryTransformer | None = None) -> None:
        """Initialize the collector.

        Args:
            transformer: Optional transform applied to every named
                operation (parse, transform, print).
        """
        self._transformer = transformer

    def collect(self, modules: Iterable[IBuildModule]) -> CollectedOperations:
        """Collect GraphQL from modules.

        Modules without a contribution are skipped. Module order is kept,
        as it decides id assignment order.

        Args:
            modules: The build's modules in processing order.

        Returns:
            The collected operations and raw source blob.

        Raises:
            QueryParseError: If normalization hits malformed GraphQL.
        """
        operations: list[str] = []
        raw_sources: list[str] = []

        for module in modules:
            contribution = getattr(module, "graphql", None)
            if isinstance(contribution, NamedOperations):
                for query in contribution.operations.values():
                    operations.append(self._normalize(query))
            elif isinstance(contribution, RawSource):
                if contribution.source:
                    raw_sources.append(contribution.source)

        return CollectedOperations(
            operations=tuple(operations),
            # Newline-joined so a trailing comment can't swallow the next file
            raw_source="\n".join(raw_sources),
        )

    def _normalize(self, query: str) -> str:
        if self._transformer is None:
            return query
        return print_canonical(self._transformer(parse_document(query)))
