import asyncio
import time
from datetime import date
from typing import Sequence
from uuid import UUID

import structlog
from graphql import SelectionSetNode

from hub_analytics.cube.base import SemanticLayer
from hub_analytics.errors import AnalyticsError, UpstreamError
from hub_analytics.merger import DataPoint, merge_results
from hub_analytics.metrics import QueryMetrics
from hub_analytics.models import (
    Granularity,
    Interval,
    Measure,
    Order,
    Query,
    Row,
)
from hub_analytics.query_builder import DEFAULT_ORDER, build_query
from hub_analytics.scope import resolve_scope
from hub_analytics.selection import (
    add_measures,
    extract_selections,
    parse_selection,
)
from hub_analytics.time_window import resolve_time_window

logger = structlog.get_logger()


class AnalyticsService:
    """
    AnalyticsService answers analytics requests. It turns the caller's
    field selection into one semantic-layer query per resource, runs
    those queries concurrently and merges their rows into DataPoints.

    Inputs are validated before any query is sent. A failure of any
    single query fails the whole request and the queries still in
    flight are cancelled, so callers never see a partial merge.
    """

    def __init__(
        self,
        semantic_layer: "SemanticLayer",
        metrics: "QueryMetrics",
        request_timeout: "float | None" = None,
    ) -> "None":
        self._layer = semantic_layer
        self._metrics = metrics
        self._timeout = request_timeout

    async def close(self) -> "None":
        await self._layer.close()

    async def analytics(
        self,
        selection_set: "SelectionSetNode | str",
        *,
        organization_id: "UUID | str | None" = None,
        project_id: "UUID | str | None" = None,
        collection_id: "UUID | str | None" = None,
        interval: "Interval | None" = None,
        start: "date | None" = None,
        end: "date | None" = None,
        granularity: "Granularity | None" = None,
        order: "Order | None" = None,
        limit: "int | None" = None,
        measures: "Sequence[Measure] | None" = None,
    ) -> "list[DataPoint]":
        """
        runs one analytics request. selection_set is the caller's
        GraphQL selection, either as a parsed node or as text. measures
        are requested on top of what the selection implies, e.g.
        Measure(Resource.MINTS, Operation.CHANGE).
        """
        try:
            if isinstance(selection_set, str):
                selection_set = parse_selection(selection_set)

            selections = add_measures(
                extract_selections(selection_set), measures or ()
            )
            scope = resolve_scope(organization_id, project_id, collection_id)
            window = resolve_time_window(interval, start, end, granularity)
            queries = [
                build_query(selection, scope, window, order, limit)
                for selection in selections
            ]

            logger.info(
                "analytics_request",
                resources=[s.resource.value for s in selections],
                scope=scope.dimension_key.value,
                scope_id=scope.id,
                granularity=window.granularity.value,
            )

            results = await self._run(queries)
        except AnalyticsError as exc:
            self._metrics.inc_error(type(exc).__name__)
            logger.warning(
                "analytics_request_failed",
                kind=type(exc).__name__,
                error=str(exc),
            )
            raise

        data_points = merge_results(
            list(zip(selections, results)),
            order or DEFAULT_ORDER,
        )
        self._metrics.inc_datapoints(len(data_points))
        logger.info("analytics_request_done", datapoints=len(data_points))
        return data_points

    async def organization_analytics(
        self,
        organization_id: "UUID | str",
        selection_set: "SelectionSetNode | str",
        **kwargs: "object",
    ) -> "list[DataPoint]":
        return await self.analytics(
            selection_set, organization_id=organization_id, **kwargs
        )

    async def project_analytics(
        self,
        project_id: "UUID | str",
        selection_set: "SelectionSetNode | str",
        **kwargs: "object",
    ) -> "list[DataPoint]":
        return await self.analytics(selection_set, project_id=project_id, **kwargs)

    async def collection_analytics(
        self,
        collection_id: "UUID | str",
        selection_set: "SelectionSetNode | str",
        **kwargs: "object",
    ) -> "list[DataPoint]":
        return await self.analytics(
            selection_set, collection_id=collection_id, **kwargs
        )

    async def _run(self, queries: "Sequence[Query]") -> "list[Sequence[Row]]":
        """
        runs every query concurrently and returns their rows in query
        order. Whatever is still pending when this returns (an error, a
        timeout or a cancellation of the caller) gets cancelled.
        """
        tasks = [asyncio.create_task(self._fetch(query)) for query in queries]
        if not tasks:
            return []

        try:
            if self._timeout is None:
                return list(await asyncio.gather(*tasks))
            return list(
                await asyncio.wait_for(asyncio.gather(*tasks), timeout=self._timeout)
            )
        except TimeoutError as exc:
            raise UpstreamError(
                f"semantic layer did not answer within {self._timeout}s"
            ) from exc
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

    async def _fetch(self, query: "Query") -> "Sequence[Row]":
        started = time.monotonic()
        try:
            rows = await self._layer.fetch_rows(query)
        except UpstreamError:
            logger.exception("cube_query_error", resource=query.resource.value)
            raise

        self._metrics.observe_query(
            query.resource.value, time.monotonic() - started, len(rows)
        )
        return rows
