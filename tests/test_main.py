import json

import httpx
import pytest
import respx
from prometheus_client import CollectorRegistry

from hub_analytics.__main__ import main
from hub_analytics.cube.client import LOAD_PATH
from hub_analytics.metrics import QueryMetrics

BASE_URL = "http://cube.test:4000"


@pytest.fixture(autouse=True)
def _cube_env(monkeypatch: "pytest.MonkeyPatch") -> "None":
    monkeypatch.setenv("CUBE_BASE_URL", BASE_URL)
    monkeypatch.setenv("CUBE_AUTH_TOKEN", "token")
    # metrics go to the default registry, keep it clean across tests
    monkeypatch.setattr("hub_analytics.__main__.QueryMetrics", _isolated_metrics)


def _isolated_metrics() -> "QueryMetrics":
    return QueryMetrics(registry=CollectorRegistry())


class TestMain:
    @respx.mock
    def test_prints_merged_data_points(
        self, capsys: "pytest.CaptureFixture[str]"
    ) -> "None":
        respx.post(f"{BASE_URL}{LOAD_PATH}").mock(
            return_value=httpx.Response(
                200,
                json={
                    "results": [
                        {
                            "data": [
                                {
                                    "mints.count": "4",
                                    "mints.timestamp": "2024-01-02T00:00:00.000",
                                },
                                {
                                    "mints.count": "1",
                                    "mints.timestamp": "2024-01-01T00:00:00.000",
                                },
                            ]
                        }
                    ]
                },
            )
        )

        main(
            [
                "--project-id",
                "p-1",
                "--interval",
                "last 7 days",
                "--order",
                "asc",
                "{ mints { count timestamp } }",
            ]
        )

        output = json.loads(capsys.readouterr().out)
        assert [p["timestamp"] for p in output] == [
            "2024-01-01T00:00:00",
            "2024-01-02T00:00:00",
        ]
        assert output[1]["mints"] == [
            {"count": 4, "timestamp": "2024-01-02T00:00:00"}
        ]

    @respx.mock
    def test_upstream_failure_exits_with_error(self) -> "None":
        respx.post(f"{BASE_URL}{LOAD_PATH}").mock(
            return_value=httpx.Response(503, text="unavailable")
        )

        with pytest.raises(SystemExit) as info:
            main(["--project-id", "p-1", "--interval", "today", "{ mints { count } }"])
        assert info.value.code == 1

    def test_missing_token_exits(self, monkeypatch: "pytest.MonkeyPatch") -> "None":
        monkeypatch.delenv("CUBE_AUTH_TOKEN")

        with pytest.raises(SystemExit) as info:
            main(["--project-id", "p-1", "--interval", "today", "{ mints { count } }"])
        assert "CUBE_AUTH_TOKEN" in str(info.value.code)

    @pytest.mark.parametrize(
        "extra, selection",
        [([], "{ mints { "), (["--limit", "0"], "{ mints { count } }")],
    )
    def test_invalid_request_exits_with_error(
        self, extra: "list[str]", selection: "str"
    ) -> "None":
        with pytest.raises(SystemExit) as info:
            main(["--project-id", "p-1", "--interval", "today", *extra, selection])
        assert info.value.code == 1

    @respx.mock
    def test_measure_flag_requests_change(
        self, capsys: "pytest.CaptureFixture[str]"
    ) -> "None":
        route = respx.post(f"{BASE_URL}{LOAD_PATH}").mock(
            return_value=httpx.Response(
                200,
                json={
                    "results": [
                        {"data": [{"mints.count": "4", "mints.change": "-2"}]}
                    ]
                },
            )
        )

        main(
            [
                "--project-id",
                "p-1",
                "--interval",
                "today",
                "--measure",
                "mints.change",
                "{ mints { count } }",
            ]
        )

        body = json.loads(route.calls.last.request.content)
        assert body["query"]["measures"] == ["mints.count", "mints.change"]
        output = json.loads(capsys.readouterr().out)
        assert output == [{"timestamp": None, "mints": [{"count": 4, "change": -2.0}]}]
