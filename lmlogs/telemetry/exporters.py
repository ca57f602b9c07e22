"""Console log-record exporter backing the default diagnostic provider."""

import sys
from collections.abc import Sequence

from opentelemetry.sdk._logs._internal import ReadableLogRecord
from opentelemetry.sdk._logs.export import (
    LogRecordExporter,
    LogRecordExportResult,
)

from .logger import format_log_record


class ConsoleLogRecordExporter(LogRecordExporter):
    """OTel LogRecordExporter that writes CLI-friendly output to stderr.

    Unlike OTel's ConsoleLogExporter which outputs verbose JSON,
    this exporter produces one human-readable line per record.

    Example output:
        2026-02-03T10:30:00Z [ERROR] LMLogRecordExporter Delivery\t: Log ingestion rejected
    """

    def export(self, batch: Sequence[ReadableLogRecord]) -> LogRecordExportResult:
        """Export log records to stderr in CLI-friendly format.

        Args:
            batch: Sequence of ReadableLogRecord objects to export.

        Returns:
            LogRecordExportResult.SUCCESS on success.
        """
        try:
            for readable_record in batch:
                record = readable_record.log_record
                sys.stderr.write(format_log_record(record))
            sys.stderr.flush()
            return LogRecordExportResult.SUCCESS
        except Exception:
            return LogRecordExportResult.FAILURE

    def shutdown(self) -> None:
        """Shutdown the exporter (no-op for console)."""
        pass

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """Force flush any buffered data.

        Returns:
            True always, as stderr is line-buffered.
        """
        sys.stderr.flush()
        return True
