"""Convenience exports for the :mod:`lmlogs` package."""

from .assembler import PayloadAssembler  # noqa: F401
from .config import APIToken, LMLogsConfig  # noqa: F401
from .delivery import DeliveryClient, DeliveryResult  # noqa: F401
from .encoder import RecordEncoder, build_metadata, render_record  # noqa: F401
from .exporter import LMLogRecordExporter  # noqa: F401
from .mechanism import (  # noqa: F401
    ConfigurationError,
    EncodingError,
    LMLogsException,
    TransportError,
)
from .model import LogBatch, LogEntry, ResourceGroup, ScopeGroup, group_batch  # noqa: F401
from .resolver import ExportContext, merge_resource_attributes  # noqa: F401
from .telemetry import configure_logs_export  # noqa: F401
from .transport import HTTPResponse, LMHTTPClient  # noqa: F401

__all__ = [
    "LMLogsException",
    "ConfigurationError",
    "EncodingError",
    "TransportError",

    # config
    "LMLogsConfig",
    "APIToken",

    # pipeline
    "LogBatch",
    "LogEntry",
    "ResourceGroup",
    "ScopeGroup",
    "group_batch",
    "ExportContext",
    "merge_resource_attributes",
    "RecordEncoder",
    "build_metadata",
    "render_record",
    "PayloadAssembler",

    # delivery
    "LMHTTPClient",
    "HTTPResponse",
    "DeliveryClient",
    "DeliveryResult",

    # OTel integration
    "LMLogRecordExporter",
    "configure_logs_export",
]
