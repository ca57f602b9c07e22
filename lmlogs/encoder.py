"""Per-record JSON encoding for the log-ingest endpoint.

Each record becomes one JSON object::

    {
      "msg": "<body>",
      "_lm.resourceId": {"system.hostname": "<host>"},
      "_lm.logsource_type": "logfile",
      ...other attributes...
    }
"""

import json
from collections.abc import Mapping
from typing import Any

from .mechanism import EncodingError
from .resolver import ExportContext
from .telemetry.logger import OTelLogger
from .telemetry.metrics import ExporterMetrics
from .utils import get_short_error_info

MSG_KEY = "msg"
RESOURCE_ID_KEY = "_lm.resourceId"
LOG_SOURCE_TYPE_KEY = "_lm.logsource_type"
RESERVED_KEYS = frozenset({MSG_KEY, RESOURCE_ID_KEY})


def build_metadata(
    attributes: Mapping[str, Any], log_source_type: str | None = "logfile"
) -> dict[str, Any]:
    """Return the free-form metadata fields for one record.

    The source classification comes first so that a record attribute of the
    same name replaces it. Reserved document keys are left out. Values keep
    their JSON types, so the endpoint receives numbers, booleans and lists
    as typed values rather than strings.
    """
    metadata: dict[str, Any] = {}
    if log_source_type is not None:
        metadata[LOG_SOURCE_TYPE_KEY] = log_source_type
    for key, value in attributes.items():
        if key in RESERVED_KEYS:
            continue
        metadata[key] = value
    return metadata


def render_record(
    body: str, resource_id: Mapping[str, str], metadata: Mapping[str, Any]
) -> str:
    """Serialize one record object.

    Raises:
        EncodingError: if a metadata value is not JSON-serializable.
    """
    document: dict[str, Any] = {
        MSG_KEY: body,
        RESOURCE_ID_KEY: dict(resource_id),
    }
    document.update(metadata)
    try:
        return json.dumps(document, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise EncodingError(e, source="RecordEncoder", note="render_record") from e


class RecordEncoder:
    """Turns a record body plus merged attributes into a JSON fragment.

    A record whose metadata cannot be serialized encodes to ``""``: it is
    dropped from the batch, the failure is logged and counted, and the rest
    of the batch is unaffected.
    """

    def __init__(
        self,
        logger: OTelLogger,
        metrics: ExporterMetrics | None = None,
        log_source_type: str | None = "logfile",
    ):
        self._logger = logger
        self._metrics = metrics or ExporterMetrics()
        self._log_source_type = log_source_type

    def encode(
        self, body: str, attributes: Mapping[str, Any], context: ExportContext
    ) -> str:
        reserved = sorted(RESERVED_KEYS.intersection(attributes))
        if reserved:
            self._logger.warning(
                f"Ignoring reserved attribute keys {reserved} on log record",
            )

        metadata = build_metadata(attributes, self._log_source_type)
        try:
            return render_record(body, context.resource_id(), metadata)
        except EncodingError as e:
            self._logger.error(
                f"Dropping log record, metadata is not serializable: "
                f"{get_short_error_info(e.exception)}",
            )
            self._metrics.records_dropped.add(1)
            return ""
