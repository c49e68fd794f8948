from prometheus_client import CollectorRegistry

from hub_analytics.metrics import QueryMetrics


class TestQueryMetrics:
    def test_metrics_are_created(
        self,
        registry: "CollectorRegistry",
    ) -> "None":
        QueryMetrics(registry=registry)
        # prometheus_client strips _total suffix from Counter family names
        metric_names = [m.name for m in registry.collect()]
        assert "hub_analytics_cube_query_duration_seconds" in metric_names
        assert "hub_analytics_cube_rows" in metric_names
        assert "hub_analytics_query_errors" in metric_names
        assert "hub_analytics_datapoints" in metric_names

    def test_observe_query(
        self,
        registry: "CollectorRegistry",
    ) -> "None":
        metrics = QueryMetrics(registry=registry)
        metrics.observe_query("mints", 0.25, 3)
        metrics.observe_query("mints", 0.5, 2)

        rows = registry.get_sample_value(
            "hub_analytics_cube_rows_total", {"resource": "mints"}
        )
        assert rows == 5.0

        duration_sum = registry.get_sample_value(
            "hub_analytics_cube_query_duration_seconds_sum", {"resource": "mints"}
        )
        assert duration_sum == 0.75

    def test_errors_and_datapoints(
        self,
        registry: "CollectorRegistry",
    ) -> "None":
        metrics = QueryMetrics(registry=registry)
        metrics.inc_error("DecodeError")
        metrics.inc_datapoints(4)

        assert (
            registry.get_sample_value(
                "hub_analytics_query_errors_total", {"kind": "DecodeError"}
            )
            == 1.0
        )
        assert registry.get_sample_value("hub_analytics_datapoints_total") == 4.0
