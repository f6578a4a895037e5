"""Domain services for persistql."""

from persistql.core.services.document import (
    QueryParseError,
    parse_document,
    print_canonical,
    split_operations,
)
from persistql.core.services.notifier import (
    QueryMapNotifier,
    ResolutionGate,
    ResolutionTimeoutError,
)
from persistql.core.services.operation_collector import (
    CollectedOperations,
    OperationCollector,
)
from persistql.core.services.output_sink import PLACEHOLDER, OutputSink
from persistql.core.services.query_map_builder import QueryMapBuilder
from persistql.core.services.typename_transformer import (
    TYPENAME_FIELD_NAME,
    QueryTransformer,
    add_typename,
)

__all__ = [
    # Collection and building
    "OperationCollector",
    "CollectedOperations",
    "QueryMapBuilder",
    # GraphQL documents
    "QueryParseError",
    "parse_document",
    "print_canonical",
    "split_operations",
    "QueryTransformer",
    "add_typename",
    "TYPENAME_FIELD_NAME",
    # Provider/listener
    "QueryMapNotifier",
    "ResolutionGate",
    "ResolutionTimeoutError",
    # Output
    "OutputSink",
    "PLACEHOLDER",
]
