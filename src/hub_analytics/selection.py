from typing import Callable, Sequence

from graphql import (
    FieldNode,
    GraphQLError,
    InlineFragmentNode,
    OperationDefinitionNode,
    SelectionSetNode,
    parse,
)

from hub_analytics.errors import InvalidRequest
from hub_analytics.models import Measure, Operation, Resource, Selection

FieldEffect = Callable[[Selection], None]


def _append_unique(values: "list", value: "object") -> "None":
    if value not in values:
        values.append(value)


def _count(selection: "Selection") -> "None":
    _append_unique(selection.measures, Measure(selection.resource, Operation.COUNT))


def _organization_id(selection: "Selection") -> "None":
    # organizations are only reachable through the projects cube
    _append_unique(selection.dimensions, Resource.PROJECTS.member("organization_id"))


def _project_id(selection: "Selection") -> "None":
    _append_unique(selection.dimensions, selection.resource.member("project_id"))


def _collection_id(selection: "Selection") -> "None":
    _append_unique(selection.dimensions, selection.resource.member("collection_id"))


def _timestamp(selection: "Selection") -> "None":
    selection.has_timestamp = True


# nested fields the extractor understands, mapped to what each does
# to its resource's Selection
FIELD_EFFECTS: "dict[str, FieldEffect]" = {
    "count": _count,
    "organizationId": _organization_id,
    "projectId": _project_id,
    "collectionId": _collection_id,
    "timestamp": _timestamp,
}


def parse_selection(text: "str") -> "SelectionSetNode":
    """
    parses a selection document such as "{ mints { count timestamp } }"
    and returns the selection set of its first operation.
    """
    try:
        document = parse(text)
    except GraphQLError as exc:
        raise InvalidRequest(f"invalid selection: {exc.message}") from exc

    for definition in document.definitions:
        if isinstance(definition, OperationDefinitionNode):
            return definition.selection_set

    raise InvalidRequest("selection document has no operation")


def _fields(selection_set: "SelectionSetNode | None") -> "list[FieldNode]":
    """
    flattens a selection set into its field nodes, descending into
    inline fragments.
    """
    if selection_set is None:
        return []

    fields: "list[FieldNode]" = []
    for node in selection_set.selections:
        if isinstance(node, FieldNode):
            fields.append(node)
        elif isinstance(node, InlineFragmentNode):
            fields.extend(_fields(node.selection_set))
    return fields


def extract_selections(selection_set: "SelectionSetNode") -> "list[Selection]":
    """
    builds one Selection per resource the caller asked for, in the
    order resources first appear. Top-level fields that are not a
    resource and nested fields without an effect are ignored, so a
    resource that is never mentioned costs no query.
    """
    selections: "dict[Resource, Selection]" = {}

    for field_node in _fields(selection_set):
        resource = Resource.parse(field_node.name.value)
        if resource is None:
            continue

        selection = selections.setdefault(resource, Selection(resource=resource))
        for nested in _fields(field_node.selection_set):
            effect = FIELD_EFFECTS.get(nested.name.value)
            if effect is not None:
                effect(selection)

    return list(selections.values())


def add_measures(
    selections: "list[Selection]", measures: "Sequence[Measure]"
) -> "list[Selection]":
    """
    folds explicitly requested measures into the selections, adding a
    Selection for a resource the field selection did not mention. This
    is the only way to ask for measures without a field of their own,
    such as change.
    """
    by_resource = {selection.resource: selection for selection in selections}

    for measure in measures:
        selection = by_resource.get(measure.resource)
        if selection is None:
            selection = by_resource[measure.resource] = Selection(
                resource=measure.resource
            )
            selections.append(selection)
        _append_unique(selection.measures, measure)

    return selections
