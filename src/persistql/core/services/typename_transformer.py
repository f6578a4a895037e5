"""Query transformer that adds ``__typename`` to selection sets.

Clients that normalize their cache by type add ``__typename`` to every
selection set before sending a query. The persisted text has to match,
so the same field is injected here. Operation root selection sets are
left alone (the root type is always known).
"""

from collections.abc import Callable
from copy import deepcopy

from graphql import (
    DocumentNode,
    FieldNode,
    FragmentDefinitionNode,
    InlineFragmentNode,
    NameNode,
    OperationDefinitionNode,
    SelectionSetNode,
)

TYPENAME_FIELD_NAME = "__typename"

QueryTransformer = Callable[[DocumentNode], DocumentNode]


def add_typename(document: DocumentNode) -> DocumentNode:
    """Add a ``__typename`` field to every nested selection set.

    Selection sets that already select ``__typename`` are unchanged, so
    applying the transformer twice gives the same document.

    Args:
        document: The document to transform. It is not modified.

    Returns:
        A transformed copy of the document.
    """
    document = deepcopy(document)
    for definition in document.definitions:
        if isinstance(definition, OperationDefinitionNode):
            _add_to_selection_set(definition.selection_set, is_root=True)
        elif isinstance(definition, FragmentDefinitionNode):
            _add_to_selection_set(definition.selection_set)
    return document


def _add_to_selection_set(
    selection_set: SelectionSetNode | None,
    is_root: bool = False,
) -> None:
    """Recursively inject the typename field into a selection set.

    Args:
        selection_set: The selection set to modify in place.
        is_root: True for an operation's top-level selection set.
    """
    if selection_set is None:
        return

    selections = tuple(selection_set.selections or ())

    if not is_root and not any(
        isinstance(selection, FieldNode)
        and selection.name.value == TYPENAME_FIELD_NAME
        for selection in selections
    ):
        selections = (*selections, _typename_field())
        selection_set.selections = selections

    for selection in selections:
        if isinstance(selection, (FieldNode, InlineFragmentNode)):
            _add_to_selection_set(selection.selection_set)


def _typename_field() -> FieldNode:
    return FieldNode(
        name=NameNode(value=TYPENAME_FIELD_NAME),
        arguments=(),
        directives=(),
    )
