from typing import Protocol, Sequence

from hub_analytics.models import Query, Row


class SemanticLayer(Protocol):
    """
    SemanticLayer is the protocol the analytics service runs its
    queries against. One call answers exactly one Query; failures
    surface as UpstreamError or DecodeError and are never retried.
    """

    async def fetch_rows(self, query: "Query") -> "Sequence[Row]": ...

    async def close(self) -> "None": ...
