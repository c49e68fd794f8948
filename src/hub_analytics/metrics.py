from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram


class QueryMetrics:
    """
    records semantic-layer round trips and analytics request outcomes
    as Prometheus metrics.
     - cube_query_duration_seconds: time spent per resource query.
     - cube_rows_total: rows decoded per resource.
     - query_errors_total: failed requests, labeled by error kind.
     - datapoints_total: merged data points returned to callers.
    """

    def __init__(self, registry: "CollectorRegistry" = REGISTRY) -> "None":
        self._query_duration: "Histogram" = Histogram(
            "hub_analytics_cube_query_duration_seconds",
            "Duration of semantic-layer queries by resource",
            ["resource"],
            registry=registry,
        )
        self._rows: "Counter" = Counter(
            "hub_analytics_cube_rows_total",
            "Total rows decoded from semantic-layer responses",
            ["resource"],
            registry=registry,
        )
        self._errors: "Counter" = Counter(
            "hub_analytics_query_errors_total",
            "Total analytics requests that failed, by error kind",
            ["kind"],
            registry=registry,
        )
        self._datapoints: "Counter" = Counter(
            "hub_analytics_datapoints_total",
            "Total merged data points returned",
            registry=registry,
        )

    def observe_query(
        self, resource: "str", duration_seconds: "float", row_count: "int"
    ) -> "None":
        self._query_duration.labels(resource=resource).observe(duration_seconds)
        self._rows.labels(resource=resource).inc(row_count)

    def inc_error(self, kind: "str") -> "None":
        self._errors.labels(kind=kind).inc()

    def inc_datapoints(self, count: "int") -> "None":
        self._datapoints.inc(count)
