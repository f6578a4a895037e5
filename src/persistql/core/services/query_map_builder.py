"""Query map builder service.

Turns collected GraphQL into the persisted query map:

1. Every collected text and the raw source blob are parsed; the blob is
   optionally normalized by injecting ``__typename``.
2. The parsed documents are split into one document per operation.
   Fragments resolve across all of them, the last definition winning.
3. Every operation is printed in canonical form, duplicates collapse
   onto their first appearance, and ids are assigned in that order.

Ids are sequential integers starting at 1, or hex digests of the
canonical text when hashing is enabled.
"""

import logging
from collections.abc import Iterable

from cachetools import LRUCache  # type: ignore[import-untyped]
from graphql import DocumentNode

from persistql.core.entities.persist_config import PersistConfig
from persistql.core.entities.query_map import QueryId, QueryMap
from persistql.core.services.document import (
    parse_document,
    print_canonical,
    split_operations,
)
from persistql.core.services.operation_collector import CollectedOperations
from persistql.core.services.typename_transformer import (
    QueryTransformer,
    add_typename,
)
from persistql.utils.hashing import hash_query

logger = logging.getLogger(__name__)


class QueryMapBuilder:
    """Builds query maps from collected operations.

    Parsed documents are memoized per source text, so rebuilding over
    mostly unchanged sources only reparses what changed.
    """

    def __init__(self, config: PersistConfig) -> None:
        """Initialize the builder.

        Args:
            config: The plugin configuration.
        """
        self._config = config
        self._transformer: QueryTransformer | None = (
            add_typename if config.add_typename else None
        )
        self._parsed: LRUCache[tuple[str, bool], DocumentNode] = LRUCache(
            maxsize=config.canonical_cache_size,
        )

    @property
    def transformer(self) -> QueryTransformer | None:
        """Get the normalization transform, if enabled."""
        return self._transformer

    @property
    def cached_sources(self) -> int:
        """Number of source texts with a memoized parse."""
        return len(self._parsed)

    def build(self, collected: CollectedOperations) -> QueryMap:
        """Build the query map for one build.

        Args:
            collected: Operations and raw source from the collector.

        Returns:
            The new QueryMap. Empty if nothing was collected.

        Raises:
            QueryParseError: If any source is malformed. No partial map
                is produced.
        """
        documents = [self.parse_source(source) for source in collected.operations]
        if collected.has_raw_source:
            documents.append(self.parse_source(collected.raw_source, transform=True))

        queries = [print_canonical(document) for document in split_operations(*documents)]

        query_map = self.assign_ids(queries)
        logger.debug(
            "Built query map: %d sources, %d unique operations",
            len(documents),
            len(query_map),
        )
        return query_map

    def parse_source(self, source: str, transform: bool = False) -> DocumentNode:
        """Parse GraphQL source, memoized per source text.

        The returned document is shared between builds and must not be
        modified.

        Args:
            source: GraphQL source holding any number of definitions.
            transform: Apply the normalization transform, if enabled.

        Returns:
            The parsed (and possibly normalized) document.

        Raises:
            QueryParseError: If the source is malformed.
        """
        apply_transform = transform and self._transformer is not None
        key = (source, apply_transform)

        cached = self._parsed.get(key)
        if cached is not None:
            return cached

        document = parse_document(source)
        if apply_transform and self._transformer is not None:
            document = self._transformer(document)

        self._parsed[key] = document
        return document

    def assign_ids(self, queries: Iterable[str]) -> QueryMap:
        """Assign ids to canonical operation texts.

        Exact text equality is identity; the first appearance of a text
        decides its position.

        Args:
            queries: Canonical texts in collection order.

        Returns:
            The QueryMap.
        """
        unique = dict.fromkeys(queries)

        entries: tuple[tuple[str, QueryId], ...]
        if self._config.use_hashes:
            algorithm = self._config.algorithm
            entries = tuple((query, hash_query(query, algorithm)) for query in unique)
        else:
            entries = tuple((query, index) for index, query in enumerate(unique, start=1))

        return QueryMap(entries=entries)
