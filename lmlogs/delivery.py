"""Fire-and-forget delivery of ingestion payloads.

:meth:`DeliveryClient.dispatch` hands a payload to a bounded worker pool and
returns at once. The worker performs one POST, evaluates the response and
logs the outcome; nothing is reported back to the caller and nothing is
retried.
"""

import json
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from .config import LMLogsConfig
from .mechanism import TransportError
from .telemetry.logger import OTelLogger
from .telemetry.metrics import ExporterMetrics
from .transport import LMHTTPClient
from .utils import get_full_error_info, get_short_error_info

BASE_PATH = "/rest"
LOG_INGEST_URI = "/log/ingest"
API_VERSION = "3"
SUCCESS_STATUS_CODES = frozenset({200, 202})


@dataclass(frozen=True)
class DeliveryResult:
    """Diagnostic outcome of one delivery attempt."""

    ok: bool
    status_code: int | None = None
    message: str = ""
    error: str = ""


def parse_response_message(body: bytes) -> str:
    """Return the ``message`` field of an ingestion response.

    Raises:
        ValueError: if the body is not a JSON object.
    """
    parsed: Any = json.loads(body)
    if not isinstance(parsed, dict):
        raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
    message = parsed.get("message", "")
    return message if isinstance(message, str) else str(message)


class DeliveryClient:
    """Sends assembled payloads to the log-ingest endpoint.

    Args:
        config: Validated exporter configuration.
        logger: Diagnostic logger; every failure ends here.
        metrics: Delivery instruments.
        transport: HTTP client; built from ``config`` when omitted.
    """

    def __init__(
        self,
        config: LMLogsConfig,
        logger: OTelLogger,
        metrics: ExporterMetrics | None = None,
        transport: LMHTTPClient | None = None,
    ):
        self._config = config
        self._logger = logger
        self._metrics = metrics or ExporterMetrics()
        self._transport = transport or LMHTTPClient(
            bearer_token=config.bearer_token,
            api_token=config.api_token,
            headers=config.headers,
        )
        self._executor = ThreadPoolExecutor(
            max_workers=config.max_workers,
            thread_name_prefix="lmlogs-delivery",
        )

        self._in_flight = 0
        self._idle = threading.Condition()
        self._closing = False
        self._closed = False

    @property
    def in_flight(self) -> int:
        with self._idle:
            return self._in_flight

    def dispatch(self, payload: str) -> bool:
        """Schedule ``payload`` for delivery without waiting for it.

        Returns:
            True if the payload was handed to a worker, False if the client
            is shut down.
        """
        with self._idle:
            self._in_flight += 1
        try:
            self._executor.submit(self._run, payload)
        except RuntimeError as e:
            self._done()
            self._logger.error(
                f"Dropping log payload, delivery is shut down: {get_short_error_info(e)}",
            )
            return False
        return True

    def _run(self, payload: str) -> None:
        try:
            self.send(payload)
        except Exception as e:
            self._logger.error(
                f"Unexpected failure while delivering logs:\n{get_full_error_info(e)}",
            )
        finally:
            self._done()

    def _done(self) -> None:
        with self._idle:
            self._in_flight -= 1
            if self._in_flight == 0:
                self._close_if_drained()
                self._idle.notify_all()

    def _close_if_drained(self) -> None:
        # closes the transport once, after shutdown started and the pool drained;
        # runs before idle waiters are woken
        with self._idle:
            if not self._closing or self._closed or self._in_flight:
                return
            self._closed = True
            self._transport.close()

    def send(self, payload: str) -> DeliveryResult:
        """POST ``payload`` and evaluate the response. Never raises for HTTP outcomes."""
        body = payload.encode("utf-8")
        self._metrics.payload_size.record(len(body))

        try:
            response = self._transport.make_request(
                API_VERSION,
                "POST",
                BASE_PATH,
                LOG_INGEST_URI,
                self._config.url,
                self._config.timeout,
                body,
            )
        except TransportError as e:
            error = get_short_error_info(e.exception)
            self._logger.error(f"Log ingestion request failed: {error}")
            self._metrics.deliveries.add(1, {"outcome": "transport_error"})
            return DeliveryResult(ok=False, error=error)

        try:
            message = parse_response_message(response.body)
        except ValueError as e:
            error = get_short_error_info(e)
            self._logger.error(
                f"Could not parse log ingestion response: {error}",
                status_code=response.status_code,
            )
            self._metrics.deliveries.add(1, {"outcome": "bad_response"})
            return DeliveryResult(ok=False, status_code=response.status_code, error=error)

        if response.status_code not in SUCCESS_STATUS_CODES:
            self._logger.error(
                f"Log ingestion rejected with status {response.status_code}: {message}",
                status_code=response.status_code,
            )
            self._metrics.deliveries.add(1, {"outcome": "rejected"})
            return DeliveryResult(
                ok=False,
                status_code=response.status_code,
                message=message,
                error=message,
            )

        self._logger.debug(
            f"Log batch accepted: {message}", status_code=response.status_code
        )
        self._metrics.deliveries.add(1, {"outcome": "success"})
        return DeliveryResult(ok=True, status_code=response.status_code, message=message)

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until no delivery is in flight. Returns False on timeout."""
        with self._idle:
            return self._idle.wait_for(lambda: self._in_flight == 0, timeout=timeout)

    def shutdown(self, timeout: float | None = None) -> bool:
        """Stop accepting payloads and drain in-flight deliveries.

        The transport is closed as soon as the last delivery finishes, even
        when that happens after ``timeout`` has expired.

        Returns:
            True if every delivery finished within ``timeout``.
        """
        with self._idle:
            self._closing = True
        self._executor.shutdown(wait=False)
        drained = self.wait_idle(timeout)
        self._close_if_drained()
        return drained
