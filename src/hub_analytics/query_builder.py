from hub_analytics.errors import InvalidRequest
from hub_analytics.models import (
    Filter,
    Measure,
    Order,
    Query,
    Scope,
    Selection,
    TimeDimension,
    TimeWindow,
)

DEFAULT_LIMIT = 100
DEFAULT_ORDER = Order.DESC


def build_query(
    selection: "Selection",
    scope: "Scope",
    window: "TimeWindow",
    order: "Order | None" = None,
    limit: "int | None" = None,
) -> "Query":
    """
    assembles the semantic-layer query for one resource's selection.

    The time dimension only carries a granularity when the caller asked
    for timestamps. Without one the semantic layer sums the whole window
    into a single row, which is what a caller without a timestamp field
    gets back.
    """
    if limit is not None and limit <= 0:
        raise InvalidRequest(f"limit must be positive, got {limit}")

    resource = selection.resource
    timestamp = resource.member("timestamp")

    time_dimension = TimeDimension(
        dimension=timestamp,
        granularity=window.granularity if selection.has_timestamp else None,
        date_range=window.date_range,
    )
    scope_filter = Filter(
        member=resource.member(scope.dimension_key.value),
        operator="equals",
        values=[scope.id],
    )

    return Query(
        resource=resource,
        measures=[str(m) for m in selection.measures],
        dimensions=list(selection.dimensions),
        time_dimension=time_dimension,
        filters=[scope_filter],
        order=(timestamp, order or DEFAULT_ORDER),
        limit=DEFAULT_LIMIT if limit is None else limit,
    )


def selection_from_query(query: "Query") -> "Selection":
    """
    recovers the Selection a query was built from.
    """
    return Selection(
        resource=query.resource,
        measures=[Measure.parse(m) for m in query.measures],
        dimensions=list(query.dimensions),
        has_timestamp=query.time_dimension.granularity is not None,
    )
