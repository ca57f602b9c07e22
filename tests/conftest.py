"""Shared test fixtures for lmlogs tests."""

from dataclasses import dataclass
from unittest.mock import MagicMock

import pytest

from opentelemetry._logs import LogRecord, SeverityNumber
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.util.instrumentation import InstrumentationScope

from lmlogs.config import LMLogsConfig
from lmlogs.telemetry.logger import OTelLogger

PORTAL_URL = "https://acme.logicmonitor.com"
INGEST_URL = PORTAL_URL + "/rest/log/ingest"


@dataclass
class StubReadableLogRecord:
    """Stands in for the SDK's ReadableLogRecord."""

    log_record: LogRecord
    resource: Resource
    instrumentation_scope: InstrumentationScope | None = None


def make_record(
    body,
    resource_attributes: dict | None = None,
    attributes: dict | None = None,
    scope: str = "app",
) -> StubReadableLogRecord:
    return StubReadableLogRecord(
        log_record=LogRecord(
            body=body,
            severity_text="INFO",
            severity_number=SeverityNumber.INFO,
            attributes=attributes or {},
        ),
        resource=Resource(resource_attributes or {}),
        instrumentation_scope=InstrumentationScope(scope),
    )


def emitted(mock_logger: MagicMock, severity_text: str | None = None) -> list[str]:
    """Bodies of the records emitted through a mocked OTel logger."""
    records = [call[0][0] for call in mock_logger.emit.call_args_list]
    return [
        str(record.body)
        for record in records
        if severity_text is None or record.severity_text == severity_text
    ]


@pytest.fixture
def mock_otel_logger():
    return MagicMock()


@pytest.fixture
def diag_logger(mock_otel_logger):
    return OTelLogger(mock_otel_logger, source="Test")


@pytest.fixture
def mock_logger_provider(mock_otel_logger):
    """LoggerProvider stand-in whose loggers all share one mock."""
    provider = MagicMock()
    provider.get_logger.return_value = mock_otel_logger
    return provider


@pytest.fixture
def config():
    return LMLogsConfig(url=PORTAL_URL, bearer_token="secret-token")


@pytest.fixture(name="make_record")
def make_record_fixture():
    return make_record


@pytest.fixture(name="emitted")
def emitted_fixture():
    return emitted
