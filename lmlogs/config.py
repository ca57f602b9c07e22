"""Exporter configuration.

Provides the typed :class:`LMLogsConfig` dataclass, its validation and an
environment-variable loader.
"""

import os
from dataclasses import dataclass, field
from urllib.parse import urlparse

from .mechanism import ConfigurationError

DEFAULT_TIMEOUT = 5.0
DEFAULT_MAX_WORKERS = 4
DEFAULT_LOG_SOURCE_TYPE = "logfile"


def parse_headers(text: str) -> dict[str, str]:
    """Parse ``name=value`` pairs separated by commas into a header dict."""
    headers: dict[str, str] = {}
    for pair in text.split(","):
        if not pair.strip():
            continue
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise ConfigurationError(
                ValueError(f"header must be name=value, got {pair.strip()!r}"),
                source="LMLogsConfig",
                note="from_env",
            )
        headers[name.strip()] = value.strip()
    return headers


@dataclass(frozen=True)
class APIToken:
    """LMv1 access credentials."""

    access_id: str
    access_key: str


@dataclass(frozen=True)
class LMLogsConfig:
    """Typed exporter configuration.

    Attributes:
        url: Absolute base URL of the portal, e.g. ``https://acme.logicmonitor.com``.
        bearer_token: Bearer token sent as ``Authorization: Bearer ...``.
        api_token: LMv1 access id/key pair, used when no bearer token is set.
        headers: Extra static headers added to every request.
        timeout: Per-request timeout in seconds.
        max_workers: Upper bound on concurrent ingestion requests.
        log_source_type: Value of the ``_lm.logsource_type`` field, or None
            to omit the field.
        resource_attributes_override: If True, resource attributes overwrite
            record attributes with the same key. By default the record wins.
    """

    url: str
    bearer_token: str | None = None
    api_token: APIToken | None = None
    headers: dict[str, str] = field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS
    log_source_type: str | None = DEFAULT_LOG_SOURCE_TYPE
    resource_attributes_override: bool = False

    def validate(self) -> None:
        """Raise :class:`ConfigurationError` if the config cannot be used."""
        parsed = urlparse(self.url or "")
        if not parsed.scheme or not parsed.netloc:
            raise ConfigurationError(
                ValueError(f"URL must be a valid absolute URL: {self.url!r}"),
                source="LMLogsConfig",
                note="validate",
            )
        if self.timeout <= 0:
            raise ConfigurationError(
                ValueError(f"timeout must be positive, got {self.timeout}"),
                source="LMLogsConfig",
                note="validate",
            )
        if self.max_workers < 1:
            raise ConfigurationError(
                ValueError(f"max_workers must be at least 1, got {self.max_workers}"),
                source="LMLogsConfig",
                note="validate",
            )

    @classmethod
    def from_env(cls, prefix: str = "LM_LOGS_") -> "LMLogsConfig":
        """Build a config from environment variables.

        Reads ``URL``, ``BEARER_TOKEN``, ``ACCESS_ID``, ``ACCESS_KEY``,
        ``TIMEOUT``, ``MAX_WORKERS`` and ``HEADERS`` under ``prefix``.
        ``HEADERS`` holds comma-separated ``name=value`` pairs, e.g.
        ``X-Team=infra,X-Env=prod``. ``log_source_type`` and
        ``resource_attributes_override`` have no variable and keep their
        defaults; set them in code.
        """

        def _get(name: str) -> str | None:
            return os.environ.get(prefix + name) or None

        api_token = None
        access_id, access_key = _get("ACCESS_ID"), _get("ACCESS_KEY")
        if access_id and access_key:
            api_token = APIToken(access_id=access_id, access_key=access_key)

        try:
            timeout = float(_get("TIMEOUT") or DEFAULT_TIMEOUT)
            max_workers = int(_get("MAX_WORKERS") or DEFAULT_MAX_WORKERS)
        except ValueError as e:
            raise ConfigurationError(e, source="LMLogsConfig", note="from_env") from e

        return cls(
            url=_get("URL") or "",
            bearer_token=_get("BEARER_TOKEN"),
            api_token=api_token,
            headers=parse_headers(_get("HEADERS") or ""),
            timeout=timeout,
            max_workers=max_workers,
        )
