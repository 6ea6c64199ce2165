"""
Shared types and constants for the Feedly client.
"""

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import requests

API_BASE = "https://cloud.feedly.com"

TOKEN_PATH = "/v3/auth/token"

CLIENT_ID = "feedlydev"
CLIENT_SECRET = "feedlydev"

DEFAULT_TIMEOUT_SEC = 30.0

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "feedly-client/0.1.0 (+https://developer.feedly.com)",
}

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = API_BASE
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    refresh_token_instant: bool = False
    timeout: Optional[float] = DEFAULT_TIMEOUT_SEC

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """Build a config from FEEDLY_* environment variables."""
        env = os.environ if environ is None else environ
        timeout = env.get("FEEDLY_TIMEOUT")
        return cls(
            base_url=env.get("FEEDLY_BASE_URL") or API_BASE,
            access_token=env.get("FEEDLY_ACCESS_TOKEN") or None,
            refresh_token=env.get("FEEDLY_REFRESH_TOKEN") or None,
            refresh_token_instant=(
                env.get("FEEDLY_REFRESH_TOKEN_INSTANT", "").strip().lower()
                in _TRUTHY
            ),
            timeout=float(timeout) if timeout else DEFAULT_TIMEOUT_SEC,
        )


@dataclass(frozen=True)
class FeedlyResult:
    response: requests.Response
    body: Any


@dataclass(frozen=True)
class Failure:
    """A call that did not produce a result; `context` names the call."""

    context: str
    error: Exception

    def __str__(self) -> str:
        return f"{self.context}: {self.error}"


@dataclass(frozen=True)
class RateLimit:
    count: Optional[int] = None
    reset: Optional[int] = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "RateLimit":
        return cls(
            count=_parse_int(headers.get("X-Ratelimit-Count")),
            reset=_parse_int(headers.get("X-Ratelimit-Reset")),
        )

    def to_dict(self) -> dict[str, Optional[int]]:
        return {"count": self.count, "reset": self.reset}


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value.strip(), 10)
    except ValueError:
        return None
