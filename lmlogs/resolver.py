"""Attribute inheritance and resource-identity extraction.

Resource attributes are copied onto every record beneath the resource, and
the host name found among a record's attributes becomes the resource
identity the ingestion endpoint uses to correlate the record.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

HOSTNAME_KEY = "hostname"
HOSTNAME_PROPERTY = "system.hostname"


@dataclass
class ExportContext:
    """State owned by a single export call.

    The identity seen last within the call applies to every record encoded
    after it. A new context is created per call, so concurrent exports never
    observe each other's identity.
    """

    identity_key: str = HOSTNAME_PROPERTY
    identity_value: str = ""

    def resource_id(self) -> dict[str, str]:
        """The ``_lm.resourceId`` object for the next encoded record."""
        return {self.identity_key: self.identity_value}

    def observe(self, attributes: Mapping[str, Any]) -> None:
        """Record the identity carried by ``attributes``, if any."""
        if HOSTNAME_KEY in attributes:
            self.identity_key = HOSTNAME_PROPERTY
            self.identity_value = str(attributes[HOSTNAME_KEY])


def merge_resource_attributes(
    resource_attributes: Mapping[str, Any],
    record_attributes: dict[str, Any],
    override: bool = False,
) -> None:
    """Copy resource attributes into ``record_attributes`` in place.

    The merge only adds keys. On a key collision the record's own value is
    kept unless ``override`` is True, in which case the resource value wins.
    """
    for key, value in resource_attributes.items():
        if override or key not in record_attributes:
            record_attributes[key] = value
