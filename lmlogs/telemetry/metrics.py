"""OTel metrics helper for the log exporter.

Provides :class:`MetricsHelper`, a convenience wrapper around an OTel
``Meter`` for creating counters and histograms, and
:class:`ExporterMetrics`, the fixed set of instruments the exporter records.
"""

from opentelemetry.metrics import (
    Counter,
    Histogram,
    Meter,
    MeterProvider,
    NoOpMeterProvider,
)


class MetricsHelper:
    """Convenience wrapper around an OTel ``Meter``.

    Args:
        meter_provider: The :class:`MeterProvider` to obtain a meter from.
        instrumentation_name: Identifies the instrumentation library (usually
            the module or class name, e.g. ``"lmlogs.exporter"``).

    Example::

        helper = MetricsHelper(meter_provider, "lmlogs.exporter")
        dropped = helper.counter(
            "lm.logs.records.dropped",
            description="Records that could not be encoded",
        )
        dropped.add(1)
    """

    def __init__(self, meter_provider: MeterProvider, instrumentation_name: str):
        self._meter: Meter = meter_provider.get_meter(instrumentation_name)

    def counter(
        self,
        name: str,
        description: str = "",
        unit: str = "1",
    ) -> Counter:
        """Create (or retrieve) a monotonic counter instrument.

        Args:
            name: Metric name (e.g. ``"lm.logs.records.encoded"``).
            description: Human-readable description.
            unit: UCUM unit string (default ``"1"`` = dimensionless).

        Returns:
            OTel :class:`Counter` instrument.
        """
        return self._meter.create_counter(name, description=description, unit=unit)

    def histogram(
        self,
        name: str,
        description: str = "",
        unit: str = "ms",
    ) -> Histogram:
        """Create (or retrieve) a histogram instrument.

        Args:
            name: Metric name (e.g. ``"lm.logs.payload.size"``).
            description: Human-readable description.
            unit: UCUM unit string (default ``"ms"`` = milliseconds).

        Returns:
            OTel :class:`Histogram` instrument.
        """
        return self._meter.create_histogram(name, description=description, unit=unit)


class ExporterMetrics:
    """Instruments recorded by the exporter and its delivery client.

    When no meter provider is given the instruments come from the OTel
    no-op provider, so callers never need to check for ``None``.
    """

    def __init__(self, meter_provider: MeterProvider | None = None):
        helper = MetricsHelper(meter_provider or NoOpMeterProvider(), "lmlogs")
        self.records_encoded = helper.counter(
            "lm.logs.records.encoded",
            description="Log records encoded into an ingestion payload",
        )
        self.records_dropped = helper.counter(
            "lm.logs.records.dropped",
            description="Log records dropped because they could not be encoded",
        )
        self.deliveries = helper.counter(
            "lm.logs.deliveries",
            description="Ingestion requests by outcome",
        )
        self.payload_size = helper.histogram(
            "lm.logs.payload.size",
            description="Size of ingestion payloads",
            unit="By",
        )
