from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

import structlog

from hub_analytics.models import Order, Resource, Row, Selection

logger = structlog.get_logger()


@dataclass
class DataPoint:
    """
    DataPoint is one output record: the rows of every resource that
    fall into the same timestamp bucket. timestamp is None for the
    single aggregate record returned when no time series was asked for.

    A resource without data for the bucket is simply missing from
    resources, it is never filled with a zero row.
    """

    timestamp: "datetime | None" = None
    resources: "dict[Resource, list[Row]]" = field(default_factory=dict)

    def is_empty(self) -> "bool":
        return not self.resources

    def insert(self, resource: "Resource", rows: "Sequence[Row]") -> "None":
        """
        appends rows to the resource's list. Rows are not deduplicated:
        several rows per resource and bucket are expected once extra
        dimensions were requested.
        """
        if not rows:
            return
        self.resources.setdefault(resource, []).extend(rows)

    def merge(self, other: "DataPoint") -> "DataPoint":
        """
        returns a new DataPoint holding the rows of both. Merging with
        an empty DataPoint yields a copy of the other side, timestamp
        included.
        """
        if other.is_empty():
            return self._copy()
        if self.is_empty():
            return other._copy()

        if self.timestamp != other.timestamp:
            raise ValueError(
                f"cannot merge data points at {self.timestamp} and {other.timestamp}"
            )

        merged = DataPoint(timestamp=self.timestamp)
        for source in (self, other):
            for resource, rows in source.resources.items():
                merged.insert(resource, rows)
        return merged

    def _copy(self) -> "DataPoint":
        return DataPoint(
            timestamp=self.timestamp,
            resources={r: list(rows) for r, rows in self.resources.items()},
        )

    def to_dict(self) -> "dict[str, object]":
        out: "dict[str, object]" = {
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }
        for resource, rows in self.resources.items():
            out[resource.value] = [row.to_dict() for row in rows]
        return out


def merge_results(
    results: "Sequence[tuple[Selection, Sequence[Row]]]",
    order: "Order" = Order.DESC,
) -> "list[DataPoint]":
    """
    combines the rows of every per-resource query into DataPoints.

    results must be given in selection order; the output then does not
    depend on which query finished first.

    When no selection asked for timestamps all rows collapse into one
    DataPoint. Otherwise rows are bucketed by timestamp and buckets are
    emitted oldest first, or newest first for a descending order.
    """
    if not any(selection.has_timestamp for selection, _ in results):
        aggregate = DataPoint()
        for selection, rows in results:
            aggregate.insert(selection.resource, rows)
        return [aggregate]

    buckets: "dict[datetime, DataPoint]" = {}
    undated = 0

    for selection, rows in results:
        for row in rows:
            # rows outside any bucket are left out rather than folded
            # into a real one
            if row.timestamp is None:
                undated += 1
                continue

            bucket = buckets.get(row.timestamp)
            if bucket is None:
                bucket = buckets[row.timestamp] = DataPoint(timestamp=row.timestamp)
            bucket.insert(selection.resource, [row])

    if undated:
        logger.debug("undated_rows_dropped", count=undated)

    data_points = [buckets[ts] for ts in sorted(buckets)]
    if order is Order.DESC:
        data_points.reverse()

    return data_points
