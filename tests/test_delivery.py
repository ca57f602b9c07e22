"""Tests for background payload delivery."""

import threading
from unittest.mock import MagicMock

import httpx
import pytest
import respx

from lmlogs.delivery import DeliveryClient, parse_response_message
from lmlogs.transport import HTTPResponse

PORTAL_URL = "https://acme.logicmonitor.com"
INGEST_URL = PORTAL_URL + "/rest/log/ingest"


@pytest.fixture
def metrics():
    return MagicMock()


@pytest.fixture
def client(config, diag_logger, metrics):
    delivery = DeliveryClient(config, diag_logger, metrics)
    yield delivery
    delivery.shutdown(timeout=5.0)


class TestParseResponseMessage:
    def test_message_field(self):
        assert parse_response_message(b'{"message": "accepted"}') == "accepted"

    def test_missing_message(self):
        assert parse_response_message(b"{}") == ""

    def test_not_json(self):
        with pytest.raises(ValueError):
            parse_response_message(b"<html>bad gateway</html>")

    def test_not_an_object(self):
        with pytest.raises(ValueError):
            parse_response_message(b"[1, 2]")


class TestSend:
    """Tests for DeliveryClient.send()."""

    @respx.mock
    def test_accepted_is_success(self, client, mock_otel_logger, emitted, metrics):
        route = respx.post(INGEST_URL).mock(
            return_value=httpx.Response(202, json={"message": "accepted"})
        )

        result = client.send("[\n]\n")

        assert result.ok
        assert result.status_code == 202
        assert result.message == "accepted"
        assert route.call_count == 1
        assert emitted(mock_otel_logger, "ERROR") == []
        metrics.deliveries.add.assert_called_once_with(1, {"outcome": "success"})

    @respx.mock
    def test_ok_is_success(self, client):
        respx.post(INGEST_URL).mock(return_value=httpx.Response(200, json={"message": "ok"}))

        assert client.send("[\n]\n").ok

    @respx.mock
    def test_server_error_is_logged_without_retry(
        self, client, mock_otel_logger, emitted, metrics
    ):
        route = respx.post(INGEST_URL).mock(
            return_value=httpx.Response(500, json={"message": "server error"})
        )

        result = client.send("[\n]\n")

        assert not result.ok
        assert result.status_code == 500
        assert route.call_count == 1
        errors = emitted(mock_otel_logger, "ERROR")
        assert len(errors) == 1
        assert "server error" in errors[0]
        metrics.deliveries.add.assert_called_once_with(1, {"outcome": "rejected"})

    @respx.mock
    def test_unparseable_body_stops_early(self, client, mock_otel_logger, emitted):
        respx.post(INGEST_URL).mock(return_value=httpx.Response(200, text="not json"))

        result = client.send("[\n]\n")

        assert not result.ok
        errors = emitted(mock_otel_logger, "ERROR")
        assert len(errors) == 1
        assert "Could not parse" in errors[0]

    @respx.mock
    def test_transport_error_is_logged(self, client, mock_otel_logger, emitted, metrics):
        route = respx.post(INGEST_URL).mock(side_effect=httpx.ConnectTimeout("timed out"))

        result = client.send("[\n]\n")

        assert not result.ok
        assert result.status_code is None
        assert route.call_count == 1
        errors = emitted(mock_otel_logger, "ERROR")
        assert len(errors) == 1
        assert "timed out" in errors[0]
        metrics.deliveries.add.assert_called_once_with(1, {"outcome": "transport_error"})

    @respx.mock
    def test_payload_size_is_recorded(self, client, metrics):
        respx.post(INGEST_URL).mock(return_value=httpx.Response(202, json={}))

        client.send("[\n]\n")

        metrics.payload_size.record.assert_called_once_with(4)


class TestDispatch:
    """Tests for DeliveryClient.dispatch()."""

    def test_dispatch_does_not_block(self, config, diag_logger):
        release = threading.Event()
        transport = MagicMock()

        def slow_request(*args, **kwargs):
            release.wait(5.0)
            return HTTPResponse(202, b'{"message": "accepted"}')

        transport.make_request.side_effect = slow_request
        client = DeliveryClient(config, diag_logger, transport=transport)

        assert client.dispatch("[\n]\n") is True
        assert client.in_flight == 1

        release.set()
        assert client.wait_idle(5.0)
        assert client.in_flight == 0
        client.shutdown(timeout=5.0)

    def test_unexpected_failure_is_logged(self, config, diag_logger, mock_otel_logger, emitted):
        transport = MagicMock()
        transport.make_request.side_effect = RuntimeError("boom")
        client = DeliveryClient(config, diag_logger, transport=transport)

        client.dispatch("[\n]\n")
        assert client.wait_idle(5.0)

        errors = emitted(mock_otel_logger, "ERROR")
        assert len(errors) == 1
        assert "boom" in errors[0]
        client.shutdown(timeout=5.0)

    def test_dispatch_after_shutdown_is_refused(self, config, diag_logger, mock_otel_logger, emitted):
        client = DeliveryClient(config, diag_logger, transport=MagicMock())
        client.shutdown(timeout=5.0)

        assert client.dispatch("[\n]\n") is False
        assert client.in_flight == 0
        assert "shut down" in emitted(mock_otel_logger, "ERROR")[0]

    def test_shutdown_closes_transport(self, config, diag_logger):
        transport = MagicMock()
        client = DeliveryClient(config, diag_logger, transport=transport)

        assert client.shutdown(timeout=5.0)
        transport.close.assert_called_once()

    def test_transport_closed_when_delivery_outlasts_shutdown(self, config, diag_logger):
        release = threading.Event()
        transport = MagicMock()

        def slow_request(*args, **kwargs):
            release.wait(5.0)
            return HTTPResponse(202, b'{"message": "accepted"}')

        transport.make_request.side_effect = slow_request
        client = DeliveryClient(config, diag_logger, transport=transport)
        client.dispatch("[\n]\n")

        assert client.shutdown(timeout=0.1) is False
        transport.close.assert_not_called()

        release.set()
        assert client.wait_idle(5.0)
        transport.close.assert_called_once()

        client.shutdown(timeout=1.0)
        transport.close.assert_called_once()
