"""InfluxDB HTTP API adapter.

Talks to the InfluxDB 1.x HTTP API with httpx: ``/query`` for database
bootstrap and ``/write`` with line protocol bodies for points. Calls are
synchronous and block for at most the configured timeout.
"""

import logging
from typing import Any

import httpx

from influxdb_reporter.core.encoding.line_protocol import encode_point, encode_points
from influxdb_reporter.core.errors import DatabaseConnectionError, WriteError
from influxdb_reporter.core.models import BatchPoints, Point

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
_LINE_PROTOCOL = "text/plain; charset=utf-8"


def _quote_identifier(name: str) -> str:
    """Quote an identifier for InfluxQL."""
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _statement_error(response: httpx.Response) -> str:
    """Return the error InfluxDB reported in a JSON body, or an empty string."""
    try:
        payload: Any = response.json()
    except ValueError:
        return ""
    if isinstance(payload, dict):
        if payload.get("error"):
            return str(payload["error"])
        for result in payload.get("results", []):
            if isinstance(result, dict) and result.get("error"):
                return str(result["error"])
    return ""


def _error_detail(response: httpx.Response) -> str:
    """Describe a failed response, falling back to its text body."""
    return (
        _statement_error(response)
        or response.text.strip()
        or response.reason_phrase
    )


class HTTPInfluxDB:
    """httpx implementation of InfluxDBPort.

    Example:
        ```python
        from influxdb_reporter.adapters.storage import HTTPInfluxDB

        database = HTTPInfluxDB("http://127.0.0.1:8086", "root", "root")
        database.create_database("metrics")
        ```
    """

    def __init__(
        self,
        url: str,
        username: str | None = None,
        password: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            url: Base URL of the InfluxDB server, e.g. ``http://127.0.0.1:8086``.
            username: User for HTTP basic auth; no auth when None.
            password: Password for HTTP basic auth.
            timeout: Seconds each request may take.
            transport: Custom httpx transport, used by tests.
        """
        self._url = url.rstrip("/")
        auth = (username, password or "") if username is not None else None
        self._client = httpx.Client(
            base_url=self._url, auth=auth, timeout=timeout, transport=transport
        )

    @property
    def url(self) -> str:
        return self._url

    def create_database(self, name: str) -> None:
        """Issue ``CREATE DATABASE``, which is a no-op if it already exists."""
        statement = f"CREATE DATABASE {_quote_identifier(name)}"
        try:
            response = self._client.post("/query", params={"q": statement})
        except httpx.TransportError as exc:
            raise DatabaseConnectionError(
                f"Cannot reach InfluxDB at {self._url}: {exc}", url=self._url
            ) from exc
        if response.is_error:
            detail = _error_detail(response)
        else:
            detail = _statement_error(response)
        if response.is_error or detail:
            raise DatabaseConnectionError(
                f"Creating database {name!r} failed with status "
                f"{response.status_code}: {detail}",
                url=self._url,
            )
        logger.info("Database %s ready at %s", name, self._url)

    def write_batch(self, batch: BatchPoints) -> None:
        """Write a batch in one request with the batch's consistency level."""
        self._write(
            encode_points(batch.points),
            {
                "db": batch.database,
                "rp": batch.retention_policy,
                "precision": "ms",
                "consistency": batch.consistency.value,
            },
        )

    def write_point(self, database: str, retention_policy: str, point: Point) -> None:
        """Write a single point."""
        self._write(
            encode_point(point) + "\n",
            {"db": database, "rp": retention_policy, "precision": "ms"},
        )

    def _write(self, body: str, params: dict[str, str]) -> None:
        try:
            content = body.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise WriteError(f"Cannot encode points for {params['db']}: {exc}") from exc
        try:
            response = self._client.post(
                "/write",
                params=params,
                content=content,
                headers={"Content-Type": _LINE_PROTOCOL},
            )
        except httpx.TransportError as exc:
            raise WriteError(f"Cannot reach InfluxDB at {self._url}: {exc}") from exc
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as exc:
            raise WriteError(f"Write to {params['db']} failed: {exc}") from exc
        if response.is_error:
            raise WriteError(
                f"Write to {params['db']} failed with status "
                f"{response.status_code}: {_error_detail(response)}"
            )

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._client.close()
