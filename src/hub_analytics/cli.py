import argparse
from datetime import date

from hub_analytics.config import Config
from hub_analytics.models import Granularity, Interval, Measure, Order


def parse_args(argv: "list[str] | None" = None) -> "tuple[Config, argparse.Namespace]":
    parser = argparse.ArgumentParser(
        prog="hub-analytics",
        description="Run an analytics query against the Cube semantic layer",
    )
    parser.add_argument(
        "selection",
        help='GraphQL selection, e.g. "{ mints { count timestamp } }"',
    )

    scope = parser.add_mutually_exclusive_group(required=True)
    scope.add_argument("--organization-id", dest="organization_id")
    scope.add_argument("--project-id", dest="project_id")
    scope.add_argument("--collection-id", dest="collection_id")

    parser.add_argument(
        "--interval",
        type=Interval,
        choices=list(Interval),
        metavar="INTERVAL",
        help='Named interval, e.g. "last 7 days"',
    )
    parser.add_argument("--start", type=date.fromisoformat, help="YYYY-MM-DD")
    parser.add_argument("--end", type=date.fromisoformat, help="YYYY-MM-DD")
    parser.add_argument(
        "--granularity",
        type=Granularity,
        choices=list(Granularity),
        metavar="GRANULARITY",
    )
    parser.add_argument(
        "--order",
        type=Order,
        choices=list(Order),
        default=Order.DESC,
        metavar="ORDER",
        help="asc or desc (default: desc)",
    )
    parser.add_argument("--limit", type=int, default=None)
    parser.add_argument(
        "--measure",
        dest="measures",
        type=Measure.parse,
        action="append",
        default=None,
        metavar="RESOURCE.OPERATION",
        help="extra measure to request, e.g. mints.change (repeatable)",
    )

    parser.add_argument(
        "--cube.base-url",
        dest="cube_base_url",
        default=None,
        help="Cube base URL (default: $CUBE_BASE_URL or http://127.0.0.1:4000)",
    )
    parser.add_argument(
        "--cube.timeout",
        dest="cube_timeout",
        type=float,
        default=None,
        help="Cube HTTP timeout in seconds (default: $CUBE_TIMEOUT or 10)",
    )
    parser.add_argument(
        "--request.timeout",
        dest="request_timeout",
        type=float,
        default=None,
        help="Timeout for the whole request in seconds (default: none)",
    )
    parser.add_argument(
        "--log.level",
        dest="log_level",
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Log level (default: info)",
    )
    parser.add_argument(
        "--log.format",
        dest="log_format",
        default="console",
        choices=["console", "json"],
        help="Log format (default: console)",
    )

    args = parser.parse_args(argv)
    config = Config.from_env()
    if args.cube_base_url is not None:
        config.cube_base_url = args.cube_base_url
        config.validate()
    if args.cube_timeout is not None:
        config.cube_timeout = args.cube_timeout
    config.request_timeout = args.request_timeout
    config.log_level = args.log_level
    config.log_format = args.log_format
    return config, args
