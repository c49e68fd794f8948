import httpx
import structlog

from hub_analytics.cube.decode import decode_rows, result_data
from hub_analytics.errors import DecodeError, UpstreamError
from hub_analytics.models import Query, Row

logger = structlog.get_logger()

LOAD_PATH = "/cubejs-api/v1/load"


class CubeClient:
    """
    CubeClient implements the SemanticLayer protocol on top of Cube's
    REST load endpoint. Each query is sent as a "multi" query and only
    the first result set is read back.
    """

    def __init__(
        self,
        base_url: "str",
        auth_token: "str",
        timeout: "float" = 10.0,
        transport: "httpx.AsyncBaseTransport | None" = None,
    ) -> "None":
        self._base_url = base_url.rstrip("/")
        self._client: "httpx.AsyncClient" = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            headers={"Authorization": f"Bearer {auth_token}"},
            transport=transport,
        )

    async def close(self) -> "None":
        """
        closes the underlying HTTP client.
        """
        await self._client.aclose()

    async def load(self, query: "Query") -> "list[object]":
        """
        runs the query and returns the raw rows of its first result set.
        """
        body = {"query": query.to_cube(), "queryType": "multi"}
        logger.debug("cube_query", resource=query.resource.value, query=body["query"])

        try:
            resp = await self._client.post(LOAD_PATH, json=body)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"cube request failed: {exc}") from exc

        if resp.is_error:
            raise UpstreamError(
                f"cube responded with {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise DecodeError("cube response is not valid JSON") from exc

        # cube reports query errors in the body, sometimes with a 200
        if isinstance(payload, dict) and "error" in payload:
            raise UpstreamError(
                f"cube query error: {payload['error']}",
                status_code=resp.status_code,
            )

        data = result_data(payload)
        logger.debug(
            "cube_query_done",
            resource=query.resource.value,
            row_count=len(data),
        )
        return data

    async def fetch_rows(self, query: "Query") -> "list[Row]":
        data = await self.load(query)
        return decode_rows(query.resource, data)
