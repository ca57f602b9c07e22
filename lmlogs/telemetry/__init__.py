"""OpenTelemetry helpers for lmlogs.

This package provides provider configuration, the structured diagnostic
logger, the console exporter used for diagnostics, and the exporter's
metric instruments.
"""

from .config import (
    configure_logs_export,
    get_default_logger_provider,
    get_diagnostic_logger,
)
from .exporters import ConsoleLogRecordExporter
from .logger import (
    LogContext,
    OTelLogger,
    format_log_record,
)
from .metrics import ExporterMetrics, MetricsHelper

__all__ = [
    # config
    "configure_logs_export",
    "get_default_logger_provider",
    "get_diagnostic_logger",
    # logger
    "OTelLogger",
    "LogContext",
    "format_log_record",
    # exporters
    "ConsoleLogRecordExporter",
    # metrics
    "MetricsHelper",
    "ExporterMetrics",
]
