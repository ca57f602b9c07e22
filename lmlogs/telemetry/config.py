"""OTel provider configuration for lmlogs.

Provides :func:`configure_logs_export` (a logger provider that ships its
records through a given exporter) and :func:`get_default_logger_provider`
(lazy singleton with console output) and :func:`get_diagnostic_logger`,
which exporter components use for their own diagnostics.
"""

from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import (
    BatchLogRecordProcessor,
    LogRecordExporter,
    SimpleLogRecordProcessor,
)
from opentelemetry.sdk.resources import Resource

from .exporters import ConsoleLogRecordExporter
from .logger import LogContext, OTelLogger


def configure_logs_export(
    log_exporter: LogRecordExporter | None = None,
    service_name: str = "lmlogs",
    service_version: str = "",
    resource_attributes: dict[str, str] | None = None,
    batch_logs: bool = True,
) -> LoggerProvider:
    """
    Configure an OTel LoggerProvider that exports through ``log_exporter``.

    Returns the provider for explicit injection -- does NOT set the global
    provider.

    Args:
        log_exporter: Optional log exporter (e.g. ``LMLogRecordExporter``).
        service_name: Service identifier for resource attributes.
        service_version: Service version for resource attributes.
        resource_attributes: Extra resource attributes, e.g. ``hostname``
            so that records are correlated with a monitored resource.
        batch_logs: If True, use BatchLogRecordProcessor
            (better for network exporters). If False, use
            SimpleLogRecordProcessor (immediate).

    Returns:
        The configured LoggerProvider.

    Example:
        >>> exporter = LMLogRecordExporter(LMLogsConfig(url="https://acme.logicmonitor.com"))
        >>> provider = configure_logs_export(
        ...     exporter,
        ...     service_name="billing",
        ...     resource_attributes={"hostname": "host-01"},
        ... )
        >>> provider.get_logger("billing").emit(record)
    """
    resource = Resource.create(
        {
            "service.name": service_name,
            "service.version": service_version,
            **(resource_attributes or {}),
        }
    )

    logger_provider = LoggerProvider(resource=resource)
    if log_exporter:
        if batch_logs:
            logger_provider.add_log_record_processor(
                BatchLogRecordProcessor(log_exporter)
            )
        else:
            logger_provider.add_log_record_processor(
                SimpleLogRecordProcessor(log_exporter)
            )

    return logger_provider


# =============================================================================
# Default Provider
# =============================================================================


_default_logger_provider: LoggerProvider | None = None


def get_default_logger_provider(service_name: str = "lmlogs") -> LoggerProvider:
    """Get or create the default diagnostic provider with console output.

    Lazily initializes the provider on first call and returns the same
    instance afterwards. It uses ConsoleLogRecordExporter with immediate
    (non-batched) processing, so exporter diagnostics never travel through
    the exporter they describe.

    Args:
        service_name: Service name for the provider (only used on first call).

    Returns:
        The shared diagnostic LoggerProvider.
    """
    global _default_logger_provider

    if _default_logger_provider is None:
        _default_logger_provider = configure_logs_export(
            ConsoleLogRecordExporter(),
            service_name=service_name,
            batch_logs=False,
        )

    return _default_logger_provider


def get_diagnostic_logger(
    source: str,
    logger_provider: LoggerProvider | None = None,
    context: LogContext | None = None,
) -> OTelLogger:
    """Build an :class:`OTelLogger` for exporter diagnostics.

    Falls back to :func:`get_default_logger_provider` when no provider is
    given. The provider should not be the one the exporter is attached to,
    otherwise every diagnostic is fed back into the exporter.
    """
    provider = logger_provider or get_default_logger_provider()
    return OTelLogger(provider.get_logger("lmlogs"), source=source, context=context)
