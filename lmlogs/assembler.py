"""Builds the JSON array document sent in one ingestion request."""

from .encoder import RecordEncoder
from .model import LogBatch
from .resolver import ExportContext, merge_resource_attributes
from .telemetry.metrics import ExporterMetrics

PAYLOAD_OPEN = "[\n"
PAYLOAD_CLOSE = "]\n"
FRAGMENT_SEPARATOR = ",\n"


class PayloadAssembler:
    """Walks a batch resource -> scope -> record and joins the encoded records.

    The output is always a complete JSON array; an empty batch renders as
    ``"[\\n]\\n"``. Records that fail to encode contribute nothing.
    """

    def __init__(
        self,
        encoder: RecordEncoder,
        metrics: ExporterMetrics | None = None,
        resource_attributes_override: bool = False,
    ):
        self._encoder = encoder
        self._metrics = metrics or ExporterMetrics()
        self._override = resource_attributes_override

    def assemble(self, batch: LogBatch, context: ExportContext | None = None) -> str:
        """Encode every record of ``batch`` in traversal order.

        Args:
            batch: Resource groups to encode.
            context: Identity state for this call. A fresh one is used when
                omitted; it is never shared between calls.

        Returns:
            The payload document.
        """
        context = context if context is not None else ExportContext()
        fragments: list[str] = []

        for resource_group in batch:
            for scope_group in resource_group.scopes:
                for record in scope_group.records:
                    merge_resource_attributes(
                        resource_group.attributes,
                        record.attributes,
                        override=self._override,
                    )
                    context.observe(record.attributes)
                    fragment = self._encoder.encode(
                        record.body, record.attributes, context
                    )
                    if fragment:
                        fragments.append(fragment)

        if fragments:
            self._metrics.records_encoded.add(len(fragments))
        return PAYLOAD_OPEN + FRAGMENT_SEPARATOR.join(fragments) + PAYLOAD_CLOSE
