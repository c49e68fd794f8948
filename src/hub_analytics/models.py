from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from uuid import UUID


class Resource(str, Enum):
    """
    Resource is a logical subject the semantic layer reports on.
    The value doubles as the namespace prefix of its cube members.
    """

    MINTS = "mints"
    CUSTOMERS = "customers"
    WALLETS = "wallets"
    COLLECTIONS = "collections"
    PROJECTS = "projects"
    TRANSFERS = "transfers"
    WEBHOOKS = "webhooks"
    CREDITS = "credits"

    @classmethod
    def parse(cls, name: "str") -> "Resource | None":
        """
        returns the resource named by name, or None when it is not one.
        """
        try:
            return cls(name)
        except ValueError:
            return None

    def member(self, name: "str") -> "str":
        return f"{self.value}.{name}"


class Operation(str, Enum):
    COUNT = "count"
    CHANGE = "change"


class Granularity(str, Enum):
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class Order(str, Enum):
    ASC = "asc"
    DESC = "desc"


class Interval(str, Enum):
    """
    Interval is a named, "now"-relative date range. The value is the
    string the semantic layer understands, so it is sent as-is and
    resolved there at query time.
    """

    ALL = "all"
    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_WEEK = "this week"
    THIS_MONTH = "this month"
    THIS_YEAR = "this year"
    LAST_7_DAYS = "last 7 days"
    LAST_30_DAYS = "last 30 days"
    LAST_WEEK = "last week"
    LAST_MONTH = "last month"
    LAST_QUARTER = "last quarter"
    LAST_YEAR = "last year"

    @property
    def granularity(self) -> "Granularity":
        return INTERVAL_GRANULARITY[self]


INTERVAL_GRANULARITY: "dict[Interval, Granularity]" = {
    Interval.TODAY: Granularity.HOUR,
    Interval.YESTERDAY: Granularity.HOUR,
    Interval.THIS_WEEK: Granularity.DAY,
    Interval.ALL: Granularity.DAY,
    Interval.LAST_7_DAYS: Granularity.DAY,
    Interval.LAST_WEEK: Granularity.DAY,
    Interval.THIS_MONTH: Granularity.DAY,
    Interval.LAST_30_DAYS: Granularity.DAY,
    Interval.LAST_MONTH: Granularity.DAY,
    Interval.LAST_QUARTER: Granularity.WEEK,
    Interval.THIS_YEAR: Granularity.MONTH,
    Interval.LAST_YEAR: Granularity.MONTH,
}


@dataclass(frozen=True, slots=True)
class Measure:
    resource: "Resource"
    operation: "Operation"

    def __str__(self) -> "str":
        return self.resource.member(self.operation.value)

    @classmethod
    def parse(cls, value: "str") -> "Measure":
        """
        parses a "<resource>.<operation>" member name.
        """
        resource, _, operation = value.partition(".")
        return cls(Resource(resource), Operation(operation))


@dataclass(slots=True)
class Selection:
    """
    Selection is what the caller asked of a single resource: the
    measures to compute, extra grouping dimensions and whether a
    time series (rather than one aggregate) is wanted.
    """

    resource: "Resource"
    measures: "list[Measure]" = field(default_factory=list)
    dimensions: "list[str]" = field(default_factory=list)
    has_timestamp: "bool" = False


class ScopeKey(str, Enum):
    ORGANIZATION = "organization_id"
    PROJECT = "project_id"
    COLLECTION = "collection_id"


@dataclass(frozen=True, slots=True)
class Scope:
    id: "str"
    dimension_key: "ScopeKey"


@dataclass(frozen=True, slots=True)
class TimeWindow:
    granularity: "Granularity"
    # either a symbolic interval or an inclusive (start, end) pair
    range: "Interval | tuple[date, date]"

    @property
    def date_range(self) -> "str | list[str] | None":
        """
        renders the range the way the semantic layer expects it. The
        whole-history interval carries no range at all.
        """
        if isinstance(self.range, Interval):
            if self.range is Interval.ALL:
                return None
            return self.range.value

        start, end = self.range
        return [start.isoformat(), end.isoformat()]


@dataclass(frozen=True, slots=True)
class TimeDimension:
    dimension: "str"
    granularity: "Granularity | None" = None
    date_range: "str | list[str] | None" = None

    def to_cube(self) -> "dict[str, object]":
        body: "dict[str, object]" = {"dimension": self.dimension}
        if self.granularity is not None:
            body["granularity"] = self.granularity.value
        if self.date_range is not None:
            body["dateRange"] = self.date_range
        return body


@dataclass(frozen=True, slots=True)
class Filter:
    member: "str"
    operator: "str"
    values: "list[str]"

    def to_cube(self) -> "dict[str, object]":
        return {
            "member": self.member,
            "operator": self.operator,
            "values": list(self.values),
        }


@dataclass(frozen=True, slots=True)
class Query:
    """
    Query is one outbound semantic-layer request, always scoped to a
    single resource.
    """

    resource: "Resource"
    measures: "list[str]"
    dimensions: "list[str]"
    time_dimension: "TimeDimension"
    filters: "list[Filter]"
    order: "tuple[str, Order]"
    limit: "int"

    def to_cube(self) -> "dict[str, object]":
        """
        renders the query as a Cube REST query object.
        """
        order_field, direction = self.order
        return {
            "measures": list(self.measures),
            "dimensions": list(self.dimensions),
            "timeDimensions": [self.time_dimension.to_cube()],
            "filters": [f.to_cube() for f in self.filters],
            "order": {order_field: direction.value},
            "limit": self.limit,
        }


@dataclass(frozen=True, slots=True)
class Row:
    """
    Row is one decoded record of a resource's result set. Every field
    is optional since not every resource carries every dimension.
    """

    count: "int | None" = None
    # period-over-period difference, may be negative or fractional
    change: "float | None" = None
    organization_id: "UUID | None" = None
    project_id: "UUID | None" = None
    collection_id: "UUID | None" = None
    timestamp: "datetime | None" = None

    def to_dict(self) -> "dict[str, object]":
        out: "dict[str, object]" = {}
        if self.count is not None:
            out["count"] = self.count
        if self.change is not None:
            out["change"] = self.change
        if self.organization_id is not None:
            out["organizationId"] = str(self.organization_id)
        if self.project_id is not None:
            out["projectId"] = str(self.project_id)
        if self.collection_id is not None:
            out["collectionId"] = str(self.collection_id)
        if self.timestamp is not None:
            out["timestamp"] = self.timestamp.isoformat()
        return out
