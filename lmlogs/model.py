"""Hierarchical view of an export batch.

The SDK hands exporters a flat sequence of readable log records, each
pointing at its resource and instrumentation scope. :func:`group_batch`
regroups them as resource -> scope -> record, keeping first-seen order at
every level.
"""

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from opentelemetry.sdk._logs._internal import ReadableLogRecord


@dataclass
class LogEntry:
    """One log record: its body and its own, mutable attribute set."""

    body: str
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass
class ScopeGroup:
    """Records emitted under one instrumentation scope."""

    name: str = ""
    version: str | None = None
    records: list[LogEntry] = field(default_factory=list)


@dataclass
class ResourceGroup:
    """Resource attributes plus the scopes reporting for that resource."""

    attributes: dict[str, Any] = field(default_factory=dict)
    scopes: list[ScopeGroup] = field(default_factory=list)

    def scope(self, name: str, version: str | None) -> ScopeGroup:
        """Return the scope group for ``(name, version)``, creating it if needed."""
        for group in self.scopes:
            if group.name == name and group.version == version:
                return group
        group = ScopeGroup(name=name, version=version)
        self.scopes.append(group)
        return group


LogBatch = list[ResourceGroup]


def body_to_text(body: Any) -> str:
    """Render a record body as the message string sent to the endpoint.

    Structured bodies (maps, lists, booleans) are rendered as JSON text;
    other scalars use ``str()``.
    """
    if body is None:
        return ""
    if isinstance(body, str):
        return body
    if isinstance(body, (Mapping, bool)) or (
        isinstance(body, Sequence) and not isinstance(body, (bytes, bytearray))
    ):
        return json.dumps(body, default=str)
    return str(body)


def group_batch(batch: Sequence[ReadableLogRecord]) -> LogBatch:
    """Regroup a flat SDK batch into resource -> scope -> record order.

    Each entry gets a fresh copy of the record's attributes, so merging
    resource attributes later never touches SDK-owned objects.
    """
    groups: LogBatch = []
    resources: list[Any] = []

    for readable in batch:
        resource = readable.resource
        for index, seen in enumerate(resources):
            if seen == resource:
                group = groups[index]
                break
        else:
            group = ResourceGroup(attributes=_attributes_of(resource))
            groups.append(group)
            resources.append(resource)

        scope = readable.instrumentation_scope
        scope_group = group.scope(
            scope.name if scope is not None else "",
            scope.version if scope is not None else None,
        )

        record = readable.log_record
        scope_group.records.append(
            LogEntry(
                body=body_to_text(record.body),
                attributes=dict(record.attributes or {}),
            )
        )

    return groups


def _attributes_of(resource: Any) -> dict[str, Any]:
    attributes: Mapping[str, Any] | None = getattr(resource, "attributes", None)
    return dict(attributes or {})
