"""Tests for the diagnostic telemetry helpers.

Tests the OTel telemetry utilities:
- ConsoleLogRecordExporter for CLI-friendly output
- OTelLogger wrapper and LogContext attributes
- get_default_logger_provider() lazy initialization
- ExporterMetrics with and without a meter provider
"""

import io
import sys
import time
from unittest.mock import MagicMock, patch

from opentelemetry._logs import LogRecord, SeverityNumber
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import LogRecordExportResult
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import InMemoryMetricReader

from lmlogs.telemetry import (
    ConsoleLogRecordExporter,
    ExporterMetrics,
    LogContext,
    OTelLogger,
    configure_logs_export,
    get_default_logger_provider,
    get_diagnostic_logger,
)


class MockReadableLogRecord:
    def __init__(self, log_record):
        self.log_record = log_record


class TestConsoleLogRecordExporter:
    """Tests for ConsoleLogRecordExporter."""

    def test_export_formats_correctly(self):
        exporter = ConsoleLogRecordExporter()
        record = LogRecord(
            timestamp=int(time.time() * 1e9),
            body="Log ingestion rejected",
            severity_text="ERROR",
            severity_number=SeverityNumber.ERROR,
            attributes={"log.source": "DeliveryClient", "component.name": "LMLogRecordExporter"},
        )

        captured = io.StringIO()
        with patch.object(sys, "stderr", captured):
            result = exporter.export([MockReadableLogRecord(record)])

        output = captured.getvalue()
        assert result == LogRecordExportResult.SUCCESS
        assert "[ERROR]" in output
        assert "LMLogRecordExporter DeliveryClient" in output
        assert "Log ingestion rejected" in output

    def test_export_handles_empty_batch(self):
        captured = io.StringIO()
        with patch.object(sys, "stderr", captured):
            result = ConsoleLogRecordExporter().export([])

        assert result == LogRecordExportResult.SUCCESS
        assert captured.getvalue() == ""

    def test_force_flush_returns_true(self):
        assert ConsoleLogRecordExporter().force_flush() is True


class TestOTelLogger:
    """Tests for OTelLogger wrapper."""

    def test_severity_levels_map_correctly(self):
        mock_logger = MagicMock()
        otel_logger = OTelLogger(mock_logger, source="TestSource")

        otel_logger.info("info message")
        otel_logger.debug("debug message")
        otel_logger.warning("warning message")
        otel_logger.error("error message")

        calls = mock_logger.emit.call_args_list
        assert [c[0][0].severity_number for c in calls] == [
            SeverityNumber.INFO,
            SeverityNumber.DEBUG,
            SeverityNumber.WARN,
            SeverityNumber.ERROR,
        ]
        assert [c[0][0].severity_text for c in calls] == ["INFO", "DEBUG", "WARN", "ERROR"]

    def test_context_attributes_included(self):
        mock_logger = MagicMock()
        context = LogContext(component="LMLogRecordExporter", endpoint="https://acme")
        otel_logger = OTelLogger(mock_logger, source="DeliveryClient", context=context)

        otel_logger.error("failed", status_code=500)

        attributes = mock_logger.emit.call_args[0][0].attributes
        assert attributes["log.source"] == "DeliveryClient"
        assert attributes["component.name"] == "LMLogRecordExporter"
        assert attributes["lm.endpoint"] == "https://acme"
        assert attributes["status_code"] == 500

    def test_with_context_derives_child(self):
        mock_logger = MagicMock()
        parent = OTelLogger(mock_logger, source="Parent", context=LogContext(component="c"))

        child = parent.with_context(source="Child", export_id=3)
        child.info("hello")

        attributes = mock_logger.emit.call_args[0][0].attributes
        assert attributes["log.source"] == "Child"
        assert attributes["component.name"] == "c"
        assert attributes["lm.export.id"] == 3

    def test_min_severity_filters(self):
        mock_logger = MagicMock()
        otel_logger = OTelLogger(
            mock_logger, source="S", min_severity=SeverityNumber.WARN
        )

        otel_logger.debug("dropped")
        otel_logger.error("kept")

        assert mock_logger.emit.call_count == 1


class TestProviders:
    def test_default_provider_is_singleton(self):
        assert isinstance(get_default_logger_provider(), LoggerProvider)
        assert get_default_logger_provider() is get_default_logger_provider("other")

    def test_diagnostic_logger_uses_given_provider(self):
        provider = MagicMock()

        logger = get_diagnostic_logger("Source", provider)
        logger.info("hi")

        provider.get_logger.assert_called_once_with("lmlogs")
        assert provider.get_logger.return_value.emit.called

    def test_configure_logs_export_uses_exporter(self):
        mock_exporter = MagicMock()
        mock_exporter.export.return_value = LogRecordExportResult.SUCCESS

        provider = configure_logs_export(mock_exporter, batch_logs=False)
        provider.get_logger("test").emit(
            LogRecord(
                timestamp=time.time_ns(),
                body="Test message",
                severity_text="INFO",
                severity_number=SeverityNumber.INFO,
            )
        )

        assert mock_exporter.export.called


class TestExporterMetrics:
    def test_noop_without_provider(self):
        metrics = ExporterMetrics()

        metrics.records_encoded.add(1)
        metrics.deliveries.add(1, {"outcome": "success"})
        metrics.payload_size.record(10)

    def test_records_into_provider(self):
        reader = InMemoryMetricReader()
        metrics = ExporterMetrics(MeterProvider(metric_readers=[reader]))

        metrics.records_dropped.add(2)

        data = reader.get_metrics_data()
        names = {
            metric.name
            for resource_metrics in data.resource_metrics
            for scope_metrics in resource_metrics.scope_metrics
            for metric in scope_metrics.metrics
        }
        assert "lm.logs.records.dropped" in names
