"""
HTTP Connection

httpx based implementation of Connection. Owns a single pooled
httpx.AsyncClient and retries requests that fail at the transport level
(connection refused, reset, read errors) with tenacity. Reads are retried on
any transport failure. Writes are retried only when the connection could not
be established, since a failure after sending may follow a write the server
already applied. Status codes are never retried here: a response, whatever
its status, is handed back to the caller.

Typical usage:

    from config import load_settings
    from connection_management import HTTPConnection

    settings = load_settings()
    async with HTTPConnection(settings.connection) as connection:
        response = await connection.do(connection.new_request("GET", "_api/version"))
"""

import logging
from typing import Optional

import httpx
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from arango_ops_exceptions import OperationTimeoutError
from config import ConnectionSettings
from connection_management.connection import Connection, Request, Response
from connection_management.connection_exceptions import (
    ConnectionClosedError,
    ConnectionError,
    MaxRetriesExceededError,
)

logger = logging.getLogger(__name__)

# Methods safe to send again after a failure that may have reached the server
_IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})

# Failures raised before the request left the client
_UNSENT_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout)


class HTTPConnection(Connection):
    """
    Connection speaking HTTP to the database server.

    Args:
        settings: Endpoint, credentials, timeout and retry configuration
        transport: Optional httpx transport, used to plug in httpx.MockTransport
    """

    def __init__(
        self,
        settings: Optional[ConnectionSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self._settings = settings or ConnectionSettings()
        auth = None
        if self._settings.username:
            auth = httpx.BasicAuth(self._settings.username, self._settings.password)
        self._client: Optional[httpx.AsyncClient] = httpx.AsyncClient(
            base_url=self._settings.endpoint,
            auth=auth,
            timeout=httpx.Timeout(self._settings.timeout),
            verify=self._settings.verify_tls,
            transport=transport
        )
        logger.debug(
            f"HTTPConnection created for {self._settings.endpoint} "
            f"(timeout={self._settings.timeout}s, retry_count={self._settings.retry_count})"
        )

    @property
    def endpoint(self) -> str:
        return self._settings.endpoint

    @property
    def closed(self) -> bool:
        return self._client is None

    async def do(self, request: Request) -> Response:
        """
        Send a request, retrying transport failures.

        Raises:
            ConnectionClosedError: If aclose() was already called
            OperationTimeoutError: If the request timed out on every attempt
            MaxRetriesExceededError: If a transport failure persisted through all attempts
            ConnectionError: If a write failed after it may have reached the server
        """
        if self._client is None:
            raise ConnectionClosedError("Connection is closed")

        attempts = max(1, self._settings.retry_count)
        retrying = AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=wait_fixed(self._settings.retry_interval),
            retry=retry_if_exception_type(self._retryable_errors(request)),
            before_sleep=self._log_retry,
            reraise=False
        )

        try:
            async for attempt in retrying:
                with attempt:
                    http_response = await self._send(request)
        except RetryError as e:
            cause = e.last_attempt.exception()
            logger.error(f"{request.method} /{request.path} failed after {attempts} attempts: {cause}")
            if isinstance(cause, httpx.TimeoutException):
                raise OperationTimeoutError(
                    f"{request.method} /{request.path} timed out after {attempts} attempts"
                ) from cause
            raise MaxRetriesExceededError(
                f"{request.method} /{request.path} failed after {attempts} attempts: {cause}",
                attempts=attempts
            ) from cause
        except httpx.TransportError as e:
            logger.error(f"{request.method} /{request.path} failed and was not retried: {e}")
            if isinstance(e, httpx.TimeoutException):
                raise OperationTimeoutError(
                    f"{request.method} /{request.path} timed out"
                ) from e
            raise ConnectionError(f"{request.method} /{request.path} failed: {e}") from e

        return Response(
            status_code=http_response.status_code,
            content=http_response.content,
            headers=http_response.headers
        )

    @staticmethod
    def _retryable_errors(request: Request):
        if request.method.upper() in _IDEMPOTENT_METHODS:
            return httpx.TransportError
        return _UNSENT_ERRORS

    async def _send(self, request: Request) -> httpx.Response:
        logger.debug(f"Sending {request.method} /{request.path} params={request.query}")
        return await self._client.request(
            request.method,
            "/" + request.path,
            params=request.query or None,
            headers=request.headers or None,
            content=request.body
        )

    @staticmethod
    def _log_retry(retry_state) -> None:
        logger.warning(
            f"Transport error on attempt {retry_state.attempt_number}: "
            f"{retry_state.outcome.exception()}. Retrying..."
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client. Safe to call more than once."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info(f"HTTPConnection to {self._settings.endpoint} closed")

    async def __aenter__(self) -> "HTTPConnection":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

