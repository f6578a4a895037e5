"""GraphQL document helpers built on graphql-core.

Parsing, canonical printing and splitting documents into one document
per operation, with fragments resolved across all of them.
"""

from collections.abc import Mapping

from graphql import (
    DocumentNode,
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    GraphQLError,
    InlineFragmentNode,
    OperationDefinitionNode,
    SelectionSetNode,
    parse,
    print_ast,
)


class QueryParseError(ValueError):
    """Raised when GraphQL source cannot be parsed."""

    pass


def parse_document(source: str) -> DocumentNode:
    """Parse GraphQL source into a document.

    Args:
        source: GraphQL source text.

    Returns:
        The parsed DocumentNode.

    Raises:
        QueryParseError: If the source is not valid GraphQL.
    """
    try:
        return parse(source, no_location=True)
    except GraphQLError as e:
        raise QueryParseError(f"Failed to parse GraphQL source: {e.message}") from e


def print_canonical(document: DocumentNode) -> str:
    """Print a document in canonical form.

    Uses the standard printer and always ends the text with a single
    newline, regardless of the graphql-core version's printer.

    Args:
        document: The document to print.

    Returns:
        The canonical text.
    """
    return print_ast(document).rstrip("\n") + "\n"


def split_operations(*documents: DocumentNode) -> list[DocumentNode]:
    """Split documents into one document per operation.

    The definitions of all documents are treated as one sequence, so an
    operation may use fragments defined in any of them. When a fragment
    name is defined more than once, the definition that appears last
    wins. Each resulting document holds one operation plus the
    fragments it needs, transitively, in sequence order. Every operation
    definition gives its own document, even when names repeat.
    Fragment-only input produces nothing; spreads of undefined fragments
    are left as they are.

    Args:
        documents: The documents to split, in collection order.

    Returns:
        Documents in operation order.
    """
    definitions = [
        definition for document in documents for definition in document.definitions
    ]

    fragments: dict[str, tuple[int, FragmentDefinitionNode]] = {}
    for index, definition in enumerate(definitions):
        if isinstance(definition, FragmentDefinitionNode):
            fragments[definition.name.value] = (index, definition)

    operations: list[DocumentNode] = []
    for index, definition in enumerate(definitions):
        if not isinstance(definition, OperationDefinitionNode):
            continue
        needed = _required_fragments(definition, fragments)
        operations.append(
            DocumentNode(
                definitions=tuple(definitions[i] for i in sorted({index, *needed})),
            )
        )
    return operations


def _required_fragments(
    operation: OperationDefinitionNode,
    fragments: Mapping[str, tuple[int, FragmentDefinitionNode]],
) -> set[int]:
    """Find the positions of every fragment an operation uses."""
    found: set[int] = set()
    pending = list(_fragment_spreads(operation.selection_set))
    while pending:
        entry = fragments.get(pending.pop())
        if entry is None or entry[0] in found:
            continue
        index, fragment = entry
        found.add(index)
        pending.extend(_fragment_spreads(fragment.selection_set))
    return found


def _fragment_spreads(selection_set: SelectionSetNode | None) -> list[str]:
    if selection_set is None:
        return []

    names: list[str] = []
    for selection in selection_set.selections or ():
        if isinstance(selection, FragmentSpreadNode):
            names.append(selection.name.value)
        elif isinstance(selection, (FieldNode, InlineFragmentNode)):
            names.extend(_fragment_spreads(selection.selection_set))
    return names
