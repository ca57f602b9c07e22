"""HTTP transport for the LogicMonitor REST API.

Wraps ``httpx.Client`` and adds the API version and authorization headers
every request to the portal needs.
"""

import base64
import hashlib
import hmac
import time
from dataclasses import dataclass

import httpx

from .config import APIToken
from .mechanism import TransportError


@dataclass(frozen=True)
class HTTPResponse:
    """Status code and raw body of a completed request."""

    status_code: int
    body: bytes


def lmv1_authorization(
    token: APIToken,
    method: str,
    resource_path: str,
    body: bytes,
    epoch_ms: int | None = None,
) -> str:
    """Build an ``LMv1`` authorization header value.

    The signature is the base64 encoding of the hex HMAC-SHA256 digest of
    ``method + epoch + body + resource_path``, keyed with the access key.
    """
    epoch = str(epoch_ms if epoch_ms is not None else int(time.time() * 1000))
    message = method.upper().encode() + epoch.encode() + body + resource_path.encode()
    digest = hmac.new(token.access_key.encode(), message, hashlib.sha256).hexdigest()
    signature = base64.b64encode(digest.encode()).decode()
    return f"LMv1 {token.access_id}:{signature}:{epoch}"


class LMHTTPClient:
    """Thread-safe HTTP client for the portal REST API.

    Example:
        client = LMHTTPClient(bearer_token="...", headers={"X-Team": "infra"})
        response = client.make_request(
            "3", "POST", "/rest", "/log/ingest",
            "https://acme.logicmonitor.com", 5.0, b"[]",
        )
    """

    def __init__(
        self,
        bearer_token: str | None = None,
        api_token: APIToken | None = None,
        headers: dict[str, str] | None = None,
        client: httpx.Client | None = None,
    ):
        self._bearer_token = bearer_token
        self._api_token = api_token
        self._default_headers = dict(headers or {})
        # httpx.Client pools connections and is safe to share across threads.
        self._client = client or httpx.Client(follow_redirects=False)

    def _authorization(self, method: str, uri: str, body: bytes) -> str | None:
        if self._bearer_token:
            return f"Bearer {self._bearer_token}"
        if self._api_token is not None:
            return lmv1_authorization(self._api_token, method, uri, body)
        return None

    def make_request(
        self,
        api_version: str,
        method: str,
        base_path: str,
        uri: str,
        url: str,
        timeout: float,
        body: bytes,
        headers: dict[str, str] | None = None,
    ) -> HTTPResponse:
        """Send one request to ``{url}{base_path}{uri}``.

        Raises:
            TransportError: if the request could not be sent or completed.
        """
        request_headers = {
            "Content-Type": "application/json",
            "X-Version": api_version,
            **self._default_headers,
            **(headers or {}),
        }
        authorization = self._authorization(method, uri, body)
        if authorization is not None:
            request_headers["Authorization"] = authorization

        target = url.rstrip("/") + base_path + uri
        try:
            response = self._client.request(
                method,
                target,
                content=body,
                headers=request_headers,
                timeout=timeout,
            )
        except httpx.HTTPError as e:
            raise TransportError(e, source="LMHTTPClient", note=f"{method} {target}") from e

        return HTTPResponse(status_code=response.status_code, body=response.content)

    def close(self) -> None:
        self._client.close()
