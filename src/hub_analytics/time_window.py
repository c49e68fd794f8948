from datetime import date

from hub_analytics.errors import InvalidTimeWindow
from hub_analytics.models import Granularity, Interval, TimeWindow

# granularity used for explicit date ranges unless overridden
DEFAULT_GRANULARITY = Granularity.DAY


def resolve_time_window(
    interval: "Interval | None" = None,
    start: "date | None" = None,
    end: "date | None" = None,
    granularity: "Granularity | None" = None,
) -> "TimeWindow":
    """
    turns the caller's date inputs into a TimeWindow.

    An explicit start/end pair is bucketed by day unless a granularity
    is given. A named interval derives its own granularity and is kept
    symbolic: no clock is read here, the semantic layer resolves it
    relative to the moment the query runs.

    Raises InvalidTimeWindow when only one of start/end is given, when
    neither dates nor an interval are given, when an interval is mixed
    with explicit dates, or when start is after end.
    """
    has_start = start is not None
    has_end = end is not None

    if has_start != has_end:
        raise InvalidTimeWindow(
            "start and end must be provided together"
        )

    if has_start and has_end:
        if interval is not None:
            raise InvalidTimeWindow(
                "an interval cannot be combined with an explicit start and end"
            )
        if start > end:
            raise InvalidTimeWindow(
                f"start {start.isoformat()} is after end {end.isoformat()}"
            )
        return TimeWindow(
            granularity=granularity or DEFAULT_GRANULARITY,
            range=(start, end),
        )

    if interval is None:
        raise InvalidTimeWindow(
            "either an interval or a start and end date must be provided"
        )

    return TimeWindow(
        granularity=granularity or interval.granularity,
        range=interval,
    )
