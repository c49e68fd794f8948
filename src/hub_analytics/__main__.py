import asyncio
import json
import signal

import structlog

from hub_analytics.cli import parse_args
from hub_analytics.cube.client import CubeClient
from hub_analytics.errors import AnalyticsError
from hub_analytics.logging import setup_logging
from hub_analytics.merger import DataPoint
from hub_analytics.metrics import QueryMetrics
from hub_analytics.service import AnalyticsService

logger = structlog.get_logger()


def main(argv: "list[str] | None" = None) -> "None":
    config, args = parse_args(argv)
    setup_logging(config.log_level, config.log_format)

    if not config.cube_enabled:
        raise SystemExit(
            "No Cube auth token configured. Set CUBE_AUTH_TOKEN environment variable."
        )

    client = CubeClient(
        base_url=config.cube_base_url,
        auth_token=config.cube_auth_token,
        timeout=config.cube_timeout,
    )
    service = AnalyticsService(client, QueryMetrics(), config.request_timeout)

    async def _run() -> "list[DataPoint]":
        loop = asyncio.get_running_loop()
        task = asyncio.current_task()
        # for SIGINT and SIGTERM, cancel the request so nothing
        # half-merged is printed
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, task.cancel)

        try:
            return await service.analytics(
                args.selection,
                organization_id=args.organization_id,
                project_id=args.project_id,
                collection_id=args.collection_id,
                interval=args.interval,
                start=args.start,
                end=args.end,
                granularity=args.granularity,
                order=args.order,
                limit=args.limit,
                measures=args.measures,
            )
        finally:
            await service.close()

    try:
        data_points = asyncio.run(_run())
    except AnalyticsError as exc:
        logger.error("analytics_failed", kind=type(exc).__name__, error=str(exc))
        raise SystemExit(1) from exc
    except asyncio.CancelledError:
        logger.info("analytics_cancelled")
        raise SystemExit(130)

    print(json.dumps([dp.to_dict() for dp in data_points], indent=2))


if __name__ == "__main__":
    main()
