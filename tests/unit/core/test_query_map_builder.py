"""Tests for QueryMapBuilder."""

from unittest.mock import patch

import pytest

from persistql import JsonQueryMapSerializer, PersistConfig
from persistql.core.services import document
from persistql.core.services.document import QueryParseError
from persistql.core.services.operation_collector import CollectedOperations
from persistql.core.services.query_map_builder import QueryMapBuilder
from persistql.core.services.typename_transformer import add_typename

SUBSCRIPTION = "subscription onCounterUpdated { counterUpdated { amount } }"
QUERY = "query getCount { count { amount } }"

CANONICAL_SUBSCRIPTION = (
    "subscription onCounterUpdated {\n  counterUpdated {\n    amount\n  }\n}\n"
)
CANONICAL_QUERY = "query getCount {\n  count {\n    amount\n  }\n}\n"

SHA512_SUBSCRIPTION = (
    "963aef31874e385da4158352a26877b724fceaecc559a649d068abdcfb810d1b"
    "0599324c9a0b35640beb8bc8dfd6e84e9a04bac7e50784e89b1971b944073034"
)
SHA512_QUERY = (
    "814a73189bb27afa27206ece8d2594cd98004484ca29b13b091ac7a84d2a5577"
    "e550624343d7e2f058d0701daa9b6c07f6c9a5c57a8cd60a063c9e5fdc917f5a"
)
SHA256_SUBSCRIPTION = "3f99fddff5dfe1ff4984f400cf62662a391acb0812ff584e8080e9d489017e50"
SHA256_QUERY = "4722dce4b669412291b70e2bfd2d6471fd55e599775a44c1a2d2721352583733"


def make_builder(**options: object) -> QueryMapBuilder:
    """Create a builder with the given config options."""
    return QueryMapBuilder(PersistConfig(module_name="queries.json", **options))  # type: ignore[arg-type]


@pytest.fixture
def counter_operations() -> CollectedOperations:
    """A named subscription followed by a raw query file."""
    return CollectedOperations(operations=(SUBSCRIPTION,), raw_source=QUERY)


class TestSequentialIds:
    """Tests for default sequential id assignment."""

    def test_counter_scenario(self, counter_operations: CollectedOperations) -> None:
        """Test ids follow discovery order, named operations first."""
        query_map = make_builder().build(counter_operations)

        assert query_map.as_dict() == {CANONICAL_SUBSCRIPTION: 1, CANONICAL_QUERY: 2}
        assert JsonQueryMapSerializer().serialize(query_map) == (
            '{"subscription onCounterUpdated {\\n  counterUpdated {\\n    amount\\n  }\\n}\\n":1,'
            '"query getCount {\\n  count {\\n    amount\\n  }\\n}\\n":2}'
        )

    def test_empty_build(self) -> None:
        """Test that nothing collected gives the empty map."""
        query_map = make_builder().build(CollectedOperations())

        assert len(query_map) == 0
        assert JsonQueryMapSerializer().serialize(query_map) == "{}"

    def test_textual_duplicates_collapse(self) -> None:
        """Test that operations equal after printing share one entry."""
        collected = CollectedOperations(
            operations=("query A { a }", "query A {\n  a\n}", "query B { b }"),
            raw_source="query A { a }",
        )

        query_map = make_builder().build(collected)

        assert query_map.as_dict() == {"query A {\n  a\n}\n": 1, "query B {\n  b\n}\n": 2}

    def test_deterministic(self, counter_operations: CollectedOperations) -> None:
        """Test that rebuilding the same input gives the same map."""
        first = make_builder().build(counter_operations)
        second = make_builder().build(counter_operations)

        assert first == second

    def test_named_source_with_several_operations(self) -> None:
        """Test that each operation of a named source gets its own id."""
        collected = CollectedOperations(operations=("query A { a } query B { b }",))

        query_map = make_builder().build(collected)

        assert list(query_map) == ["query A {\n  a\n}\n", "query B {\n  b\n}\n"]

    def test_fragment_only_source_has_no_entry(self) -> None:
        """Test that fragments never become keys on their own."""
        collected = CollectedOperations(operations=("fragment F on T { a }",))

        assert len(make_builder().build(collected)) == 0


class TestRawSourceSplitting:
    """Tests for splitting the raw source blob."""

    def test_operations_keep_their_fragments(self) -> None:
        """Test that a multi-operation blob splits with fragments attached."""
        collected = CollectedOperations(
            raw_source=(
                "query A { ...F }\n"
                "fragment F on T { f }\n"
                "query B { ...F b }\n"
            ),
        )

        query_map = make_builder().build(collected)

        assert query_map.as_dict() == {
            "query A {\n  ...F\n}\n\nfragment F on T {\n  f\n}\n": 1,
            "query B {\n  ...F\n  b\n}\n\nfragment F on T {\n  f\n}\n": 2,
        }

    def test_fragment_tie_break(self) -> None:
        """Test that the last definition of a repeated fragment is used."""
        collected = CollectedOperations(
            raw_source=(
                "fragment F on T { first }\n"
                "query A { ...F }\n"
                "fragment F on T { last }\n"
            ),
        )

        (query,) = list(make_builder().build(collected))

        assert "last" in query
        assert "first" not in query

    def test_whitespace_blob_is_skipped(self) -> None:
        """Test that a whitespace-only blob adds nothing and is not parsed."""
        collected = CollectedOperations(operations=(QUERY,), raw_source="\n  \n")

        query_map = make_builder().build(collected)

        assert query_map.as_dict() == {CANONICAL_QUERY: 1}

    def test_malformed_blob(self) -> None:
        """Test that a parse error in the blob aborts the build."""
        collected = CollectedOperations(
            operations=(QUERY,),
            raw_source="query broken {",
        )

        with pytest.raises(QueryParseError):
            make_builder().build(collected)


class TestFragmentResolution:
    """Tests for fragments shared between collected sources."""

    def test_named_operation_uses_blob_fragment(self) -> None:
        """Test that a fragment from a .graphql file travels with the operation."""
        collected = CollectedOperations(
            operations=("query Q { t { ...F } }",),
            raw_source="fragment F on T { a }",
        )

        query_map = make_builder().build(collected)

        assert query_map.as_dict() == {
            "query Q {\n  t {\n    ...F\n  }\n}\n\nfragment F on T {\n  a\n}\n": 1,
        }

    def test_named_operation_uses_fragment_from_other_module(self) -> None:
        """Test that fragments resolve across named operation sources."""
        collected = CollectedOperations(
            operations=("query Q { ...F }", "fragment F on T { a }"),
        )

        (query,) = list(make_builder().build(collected))

        assert query == "query Q {\n  ...F\n}\n\nfragment F on T {\n  a\n}\n"

    def test_later_fragment_definition_wins(self) -> None:
        """Test the tie-break between a module fragment and a blob fragment."""
        collected = CollectedOperations(
            operations=("query Q { ...F }\nfragment F on T { first }",),
            raw_source="fragment F on T { last }",
        )

        (query,) = list(make_builder().build(collected))

        assert "last" in query
        assert "first" not in query

    def test_same_named_operations_from_different_modules(self) -> None:
        """Test that operations sharing a name keep separate entries."""
        collected = CollectedOperations(
            operations=("query Q { a }", "query Q { b }"),
        )

        query_map = make_builder().build(collected)

        assert query_map.as_dict() == {"query Q {\n  a\n}\n": 1, "query Q {\n  b\n}\n": 2}

    def test_blob_fragment_gets_typename(self) -> None:
        """Test that normalization reaches fragments used across sources."""
        normalized = document.print_canonical(
            add_typename(document.parse_document("query Q { t { ...F } }"))
        )
        collected = CollectedOperations(
            operations=(normalized,),
            raw_source="fragment F on T { a }",
        )

        (query,) = list(make_builder(add_typename=True).build(collected))

        assert query == (
            "query Q {\n  t {\n    ...F\n    __typename\n  }\n}\n\n"
            "fragment F on T {\n  a\n  __typename\n}\n"
        )


class TestTypenameNormalization:
    """Tests for add_typename normalization."""

    def test_counter_scenario(self) -> None:
        """Test that both extraction paths get __typename and keep their ids."""
        normalized = document.print_canonical(
            add_typename(document.parse_document(SUBSCRIPTION))
        )
        collected = CollectedOperations(operations=(normalized,), raw_source=QUERY)

        query_map = make_builder(add_typename=True).build(collected)

        assert query_map.as_dict() == {
            "subscription onCounterUpdated {\n"
            "  counterUpdated {\n    amount\n    __typename\n  }\n}\n": 1,
            "query getCount {\n  count {\n    amount\n    __typename\n  }\n}\n": 2,
        }

    def test_transformer_only_when_enabled(self) -> None:
        """Test that the builder exposes the transformer it applies."""
        assert make_builder().transformer is None
        assert make_builder(add_typename=True).transformer is add_typename


class TestHashedIds:
    """Tests for hash-based ids."""

    def test_sha512_default(self, counter_operations: CollectedOperations) -> None:
        """Test that hashing defaults to SHA-512 hex digests."""
        query_map = make_builder(use_hashes=True).build(counter_operations)

        assert query_map.as_dict() == {
            CANONICAL_SUBSCRIPTION: SHA512_SUBSCRIPTION,
            CANONICAL_QUERY: SHA512_QUERY,
        }
        assert all(len(query_id) == 128 for query_id in query_map.as_dict().values())

    def test_sha256(self, counter_operations: CollectedOperations) -> None:
        """Test that SHA-256 is selectable."""
        query_map = make_builder(
            use_hashes=True,
            hashing_algorithm="sha256",
        ).build(counter_operations)

        assert query_map.as_dict() == {
            CANONICAL_SUBSCRIPTION: SHA256_SUBSCRIPTION,
            CANONICAL_QUERY: SHA256_QUERY,
        }

    def test_unknown_algorithm_same_as_sha512(
        self, counter_operations: CollectedOperations
    ) -> None:
        """Test that an unknown algorithm behaves exactly like SHA-512."""
        unknown = make_builder(use_hashes=True, hashing_algorithm="sha1").build(
            counter_operations
        )
        sha512 = make_builder(use_hashes=True, hashing_algorithm="sha512").build(
            counter_operations
        )

        assert unknown == sha512

    def test_uppercase_name_same_as_sha512(
        self, counter_operations: CollectedOperations
    ) -> None:
        """Test that algorithm names are not case-folded."""
        query_map = make_builder(use_hashes=True, hashing_algorithm="SHA256").build(
            counter_operations
        )

        assert query_map.as_dict() == {
            CANONICAL_SUBSCRIPTION: SHA512_SUBSCRIPTION,
            CANONICAL_QUERY: SHA512_QUERY,
        }

    def test_hashing_algorithm_ignored_without_use_hashes(
        self, counter_operations: CollectedOperations
    ) -> None:
        """Test that an algorithm alone does not switch to hashing."""
        query_map = make_builder(hashing_algorithm="sha256").build(counter_operations)

        assert list(query_map.as_dict().values()) == [1, 2]


class TestCanonicalCache:
    """Tests for memoized parses."""

    def test_rebuild_does_not_reparse(self, counter_operations: CollectedOperations) -> None:
        """Test that a second build over the same sources hits the cache."""
        builder = make_builder()
        first = builder.build(counter_operations)

        with patch(
            "persistql.core.services.query_map_builder.parse_document",
            wraps=document.parse_document,
        ) as parse_spy:
            second = builder.build(counter_operations)

        assert parse_spy.call_count == 0
        assert first == second
        assert builder.cached_sources > 0

    def test_cache_is_bounded(self) -> None:
        """Test that the cache never exceeds its configured size."""
        builder = make_builder(canonical_cache_size=2)
        collected = CollectedOperations(
            operations=("query A { a }", "query B { b }", "query C { c }"),
        )

        builder.build(collected)

        assert builder.cached_sources <= 2

    def test_parse_errors_not_cached(self) -> None:
        """Test that a failed parse is retried on the next build."""
        builder = make_builder()
        collected = CollectedOperations(operations=("query broken {",))

        with pytest.raises(QueryParseError):
            builder.build(collected)
        with pytest.raises(QueryParseError):
            builder.build(collected)

        assert builder.cached_sources == 0
