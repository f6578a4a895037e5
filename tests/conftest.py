"""Pytest configuration for persistql tests."""

import pytest

from persistql import InMemoryBuildHost, NamedOperations, RawSource, SourceFile

MODULE_NAME = "persisted_queries.json"


@pytest.fixture
def counter_files() -> dict[str, SourceFile]:
    """Entry module with an embedded subscription plus a .graphql file."""
    return {
        "entry.js": SourceFile(
            source=(
                'var gql = require("graphql-tag");\n'
                'require("./example.graphql");\n'
                'require("persisted_queries.json");\n'
            ),
            imports=("./example.graphql", MODULE_NAME),
            graphql=NamedOperations({
                "onCounterUpdated": (
                    "subscription onCounterUpdated { counterUpdated { amount } }"
                ),
            }),
        ),
        "example.graphql": SourceFile(
            source="query getCount { count { amount } }",
            graphql=RawSource("query getCount { count { amount } }"),
        ),
    }


@pytest.fixture
def counter_host(counter_files: dict[str, SourceFile]) -> InMemoryBuildHost:
    """Host building the counter example from ./entry.js."""
    return InMemoryBuildHost(files=counter_files, entry="./entry.js")
