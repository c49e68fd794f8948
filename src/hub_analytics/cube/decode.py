import math
from datetime import datetime
from uuid import UUID

from hub_analytics.errors import DecodeError
from hub_analytics.models import Resource, Row

# the load endpoint emits plain local timestamps with optional
# fractional seconds, some deployments a "Z"-suffixed millisecond form
TIMESTAMP_FORMATS: "tuple[str, ...]" = (
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%dT%H:%M:%SZ",
)


def parse_count(value: "object") -> "int | None":
    """
    parses a count, which arrives as a decimal string.
    """
    if value is None:
        return None
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise DecodeError(f"invalid count: {value!r}")

    try:
        count = int(value)
    except ValueError as exc:
        raise DecodeError(f"invalid count: {value!r}") from exc

    if count < 0:
        raise DecodeError(f"negative count: {value!r}")
    return count


def parse_change(value: "object") -> "float | None":
    """
    parses a change measure, a signed decimal string.
    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise DecodeError(f"invalid change: {value!r}")

    try:
        change = float(value)
    except ValueError as exc:
        raise DecodeError(f"invalid change: {value!r}") from exc

    if not math.isfinite(change):
        raise DecodeError(f"invalid change: {value!r}")
    return change


def parse_uuid(value: "object") -> "UUID | None":
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"invalid uuid: {value!r}")

    try:
        return UUID(value)
    except ValueError as exc:
        raise DecodeError(f"invalid uuid: {value!r}") from exc


def parse_timestamp(value: "object") -> "datetime | None":
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"invalid timestamp: {value!r}")

    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue

    raise DecodeError(f"invalid timestamp: {value!r}")


def _timestamp_value(resource: "Resource", raw: "dict[str, object]") -> "object":
    """
    returns the row's timestamp, falling back to the granularity
    suffixed member ("mints.timestamp.day") when the plain one is
    missing.
    """
    key = resource.member("timestamp")
    if key in raw:
        return raw[key]

    prefix = f"{key}."
    for name, value in raw.items():
        if name.startswith(prefix):
            return value
    return None


def decode_row(resource: "Resource", raw: "object") -> "Row":
    """
    decodes one result row of the given resource's cube.
    """
    if not isinstance(raw, dict):
        raise DecodeError(f"{resource.value} row is not an object: {raw!r}")

    return Row(
        count=parse_count(raw.get(resource.member("count"))),
        change=parse_change(raw.get(resource.member("change"))),
        organization_id=parse_uuid(
            raw.get(Resource.PROJECTS.member("organization_id"))
        ),
        project_id=parse_uuid(raw.get(resource.member("project_id"))),
        collection_id=parse_uuid(raw.get(resource.member("collection_id"))),
        timestamp=parse_timestamp(_timestamp_value(resource, raw)),
    )


def result_data(payload: "object") -> "list[object]":
    """
    extracts the row array of the first result set from a load
    response body.
    """
    if not isinstance(payload, dict):
        raise DecodeError("response body is not an object")

    results = payload.get("results")
    if not isinstance(results, list) or not results:
        raise DecodeError("response has no result set")

    first = results[0]
    data = first.get("data") if isinstance(first, dict) else None
    if not isinstance(data, list):
        raise DecodeError("result set has no data array")
    return data


def decode_rows(resource: "Resource", data: "list[object]") -> "list[Row]":
    return [decode_row(resource, raw) for raw in data]


def decode_response(resource: "Resource", payload: "object") -> "list[Row]":
    """
    decodes a whole load response body into the resource's rows.
    """
    return decode_rows(resource, result_data(payload))
