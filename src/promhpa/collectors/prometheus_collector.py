# src/promhpa/collectors/prometheus_collector.py

"""
PrometheusCollector executes instant queries against the Prometheus HTTP API
and hands back typed results. Only the vector shape is accepted by the
metrics pipeline; every other shape is rejected explicitly.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

import httpx
from pydantic import ValidationError

from ..core.config import config
from ..core.exceptions import QueryError, UnexpectedResultShape
from ..models.prometheus import (
    QueryResult,
    Sample,
    VectorResult,
    parse_query_result,
)
from ..utils.http_client import get_async_http_client

logger = logging.getLogger(__name__)


def expect_vector(result: QueryResult) -> List[Sample]:
    """Narrow a query result to its samples, failing on any non-vector shape."""
    if isinstance(result, VectorResult):
        return result.samples
    raise UnexpectedResultShape(expected="vector", actual=result.result_type)


class PrometheusCollector:
    """
    Runs instant queries against Prometheus, evaluated at the current time.
    """

    def __init__(self, base_url: Optional[str] = None, client: Optional[httpx.AsyncClient] = None):
        """
        Initializes the collector with the Prometheus base URL and an optional
        pre-built HTTP client (the collector builds and owns one otherwise).
        """
        self.base_url = (base_url or config.PROMETHEUS_URL).rstrip("/")
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = get_async_http_client()
        return self._client

    async def query(self, query: str, time: Optional[datetime] = None) -> QueryResult:
        """
        Execute an instant query at `time` (now by default).

        Raises:
            QueryError: on transport failure, a non-2xx answer, a non-success
                status or a malformed payload.
        """
        evaluated_at = time or datetime.now(timezone.utc)
        params = {"query": query, "time": evaluated_at.isoformat()}
        url = f"{self.base_url}/api/v1/query"

        logger.debug("Prometheus query: %s", query)
        try:
            response = await self.client.get(url, params=params)
        except httpx.HTTPError as e:
            raise QueryError(f"failed to query Prometheus at {url}: {e}", query=query) from e

        try:
            payload = response.json()
        except ValueError as e:
            if response.is_error:
                raise QueryError(
                    f"Prometheus returned HTTP {response.status_code}: {response.text[:200]}", query=query
                ) from e
            raise QueryError(f"Prometheus returned a non-JSON response: {response.text[:200]}", query=query) from e

        if not isinstance(payload, dict):
            raise QueryError(f"malformed Prometheus response: {payload!r}", query=query)

        if response.is_error or payload.get("status") != "success":
            error_type = payload.get("errorType")
            raise QueryError(
                f"Prometheus query failed (HTTP {response.status_code}, {error_type or 'unknown'}): "
                f"{payload.get('error', 'Unknown')}",
                query=query,
                error_type=error_type,
            )

        try:
            result = parse_query_result(payload.get("data") or {})
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            raise QueryError(f"malformed Prometheus response: {e}", query=query) from e

        logger.debug("Prometheus metrics result: %r", result)
        return result

    async def query_vector(self, query: str, time: Optional[datetime] = None) -> List[Sample]:
        """Execute an instant query whose result must be a vector."""
        return expect_vector(await self.query(query, time=time))

    async def close(self):
        """Close the HTTP client if this collector created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
