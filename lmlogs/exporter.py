"""OTel log-record exporter for the LogicMonitor log-ingest API.

Provides :class:`LMLogRecordExporter`, which flattens each SDK batch into
one JSON array and ships it in the background.
"""

import itertools
import threading
from collections.abc import Sequence

from opentelemetry.metrics import MeterProvider
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs._internal import ReadableLogRecord
from opentelemetry.sdk._logs.export import (
    LogRecordExporter,
    LogRecordExportResult,
)

from .assembler import PayloadAssembler
from .config import LMLogsConfig
from .delivery import DeliveryClient
from .encoder import RecordEncoder
from .model import group_batch
from .resolver import ExportContext
from .telemetry.config import get_diagnostic_logger
from .telemetry.logger import LogContext
from .telemetry.metrics import ExporterMetrics
from .transport import LMHTTPClient


class LMLogRecordExporter(LogRecordExporter):
    """
    OpenTelemetry LogRecordExporter that posts logs to the log-ingest API.

    Each call to :meth:`export` regroups the batch by resource and scope,
    merges resource attributes into every record, encodes the records into a
    single JSON array and hands it to a background worker. ``export`` never
    waits for the request: delivery failures are logged and the batch is
    dropped.

    Parameters:
        config: Exporter configuration; validated here.
        logger_provider: Provider for the exporter's own diagnostics. Must
            not be the provider this exporter is attached to. Defaults to a
            console provider writing to stderr.
        meter_provider: Optional provider for delivery and encoding metrics.
        transport: Optional HTTP client, mainly for tests.

    Raises:
        ConfigurationError: if ``config`` is invalid.

    Example:
        >>> from opentelemetry.sdk._logs import LoggerProvider
        >>> from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
        >>>
        >>> exporter = LMLogRecordExporter(
        ...     LMLogsConfig(url="https://acme.logicmonitor.com", bearer_token="...")
        ... )
        >>> provider = LoggerProvider()
        >>> provider.add_log_record_processor(BatchLogRecordProcessor(exporter))
    """

    def __init__(
        self,
        config: LMLogsConfig,
        *,
        logger_provider: LoggerProvider | None = None,
        meter_provider: MeterProvider | None = None,
        transport: LMHTTPClient | None = None,
    ):
        config.validate()
        self._config = config
        self._name = "LMLogRecordExporter"

        self._logger = get_diagnostic_logger(
            self._name,
            logger_provider,
            LogContext(component=self._name, endpoint=config.url),
        )
        self._metrics = ExporterMetrics(meter_provider)

        encoder = RecordEncoder(
            self._logger.with_context(source="RecordEncoder"),
            self._metrics,
            log_source_type=config.log_source_type,
        )
        self._assembler = PayloadAssembler(
            encoder,
            self._metrics,
            resource_attributes_override=config.resource_attributes_override,
        )
        self._delivery = DeliveryClient(
            config,
            self._logger.with_context(source="DeliveryClient"),
            self._metrics,
            transport=transport,
        )

        self._export_ids = itertools.count(1)
        self._shutdown = False
        self._shutdown_lock = threading.Lock()

    @property
    def config(self) -> LMLogsConfig:
        return self._config

    @property
    def delivery(self) -> DeliveryClient:
        return self._delivery

    def build_payload(self, batch: Sequence[ReadableLogRecord]) -> str:
        """Encode ``batch`` into the ingestion document without sending it."""
        return self._assembler.assemble(group_batch(batch), ExportContext())

    def export(self, batch: Sequence[ReadableLogRecord]) -> LogRecordExportResult:
        """
        Encode a batch and schedule its delivery.

        Args:
            batch: Sequence of ReadableLogRecord objects to export.

        Returns:
            LogRecordExportResult.SUCCESS once the payload is scheduled,
            LogRecordExportResult.FAILURE if the exporter is shut down.
        """
        if self._shutdown:
            self._logger.warning("Export called after shutdown, dropping batch")
            return LogRecordExportResult.FAILURE

        payload = self.build_payload(batch)
        export_id = next(self._export_ids)
        self._logger.with_context(export_id=export_id).debug(
            f"Scheduling delivery of {len(batch)} log records",
        )
        if not self._delivery.dispatch(payload):
            return LogRecordExportResult.FAILURE
        return LogRecordExportResult.SUCCESS

    def shutdown(self) -> None:
        """
        Stop accepting batches and wait up to the request timeout for
        in-flight deliveries.
        """
        with self._shutdown_lock:
            if self._shutdown:
                return
            self._shutdown = True
        if not self._delivery.shutdown(timeout=self._config.timeout):
            self._logger.warning(
                f"{self._delivery.in_flight} log deliveries still in flight at shutdown",
            )

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """
        Wait for in-flight deliveries.

        Returns:
            True if every scheduled delivery finished within the timeout.
        """
        return self._delivery.wait_idle(timeout_millis / 1000)
