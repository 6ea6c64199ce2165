"""
Feedly API Client
Bearer-token session with on-demand refresh, rate-limit snapshot, and a few
thin endpoint wrappers.
"""

import dataclasses
import logging
import threading
from typing import Any, Optional, Union

import requests

from .auth import RefreshCoordinator
from .errors import ConfigurationError, StateError
from .types import DEFAULT_HEADERS, TOKEN_PATH, ClientConfig, FeedlyResult, Failure, RateLimit

log = logging.getLogger("feedly")

_UNSET: Any = object()

_STREAM_PARAMS = {
    "count": "count",
    "ranked": "ranked",
    "unread_only": "unreadOnly",
    "newer_than": "newerThan",
    "continuation": "continuation",
}


class FeedlyClient:
    """Feedly API client that fetches an access token whenever none is held."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        logger: Optional[logging.Logger] = None,
        **overrides: Any,
    ):
        config = dataclasses.replace(config or ClientConfig(), **overrides)
        if not config.refresh_token:
            raise ConfigurationError("`refresh_token` is required")

        base_url = config.base_url
        if base_url.endswith("/"):
            base_url = base_url[:-1]
        self._config = dataclasses.replace(config, base_url=base_url)

        self._logger = logger or log
        self._access_token: Optional[str] = config.access_token
        self._last_response: Optional[requests.Response] = None
        self._refresher = RefreshCoordinator(
            self.try_request,
            config.refresh_token,
            self._store_access_token,
            self._logger,
            current_token=lambda: self._access_token,
        )

        self._instant_refresh: Optional[threading.Thread] = None
        if config.refresh_token_instant:
            self._instant_refresh = threading.Thread(
                target=self._refresh_at_startup,
                name="feedly-refresh",
                daemon=True,
            )
            self._instant_refresh.start()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    @property
    def refresh_token(self) -> str:
        return self._config.refresh_token

    @property
    def last_response(self) -> Optional[requests.Response]:
        return self._last_response

    @property
    def ratelimit(self) -> RateLimit:
        """Rate limits reported by the last response.

        Raises StateError when no response has been received yet.
        """
        response = self._last_response
        if response is None:
            raise StateError("Cannot get rate limits: there was no response yet")
        return RateLimit.from_headers(response.headers)

    def _store_access_token(self, token: str) -> None:
        self._access_token = token

    def _headers(self, headers: Optional[dict]) -> dict:
        if headers is None:
            headers = {"Authorization": f"OAuth {self._access_token}"}
        return {**DEFAULT_HEADERS, **headers}

    @staticmethod
    def _normalize(response: requests.Response) -> FeedlyResult:
        return FeedlyResult(response=response, body=response.json())

    # ── Dispatch ──────────────────────────────────────────

    def try_request(
        self,
        path: str,
        method: str = "GET",
        headers: Optional[dict] = None,
        timeout: Optional[float] = _UNSET,
        **kwargs,
    ) -> Union[FeedlyResult, Failure]:
        """Call `path`, returning the parsed result or a Failure.

        `headers`, when given, replaces the Authorization default; pass {}
        to send no bearer header. Remaining kwargs (json, data, params) go
        to requests unchanged.
        """
        if not self._access_token and path != TOKEN_PATH:
            self._refresher.refresh(only_if_missing=True)

        if timeout is _UNSET:
            timeout = self._config.timeout

        try:
            resp = requests.request(
                method,
                f"{self.base_url}{path}",
                headers=self._headers(headers),
                timeout=timeout,
                **kwargs,
            )
            self._last_response = resp
            return self._normalize(resp)
        except (requests.RequestException, ValueError) as exc:
            return Failure(context=f"Failed to make call to {path}", error=exc)

    def request(
        self,
        path: str,
        method: str = "GET",
        headers: Optional[dict] = None,
        timeout: Optional[float] = _UNSET,
        **kwargs,
    ) -> Optional[FeedlyResult]:
        """Like try_request, but logs a failure and returns None instead."""
        outcome = self.try_request(path, method, headers, timeout, **kwargs)
        if isinstance(outcome, Failure):
            self._logger.error("%s", outcome)
            return None
        return outcome

    def refresh_auth_token(self) -> Optional[str]:
        """Exchange the refresh token for a new access token.

        Joins a refresh already in flight. Failures are logged and leave the
        current access token untouched.
        """
        return self._refresher.refresh()

    def _refresh_at_startup(self) -> None:
        # A token given at construction is replaced; otherwise join any
        # request that already started the first exchange.
        self._refresher.refresh(only_if_missing=self._config.access_token is None)

    def wait_for_instant_refresh(self, timeout: Optional[float] = None) -> None:
        """Block until the refresh started at construction has finished."""
        if self._instant_refresh is not None:
            self._instant_refresh.join(timeout)

    # ── Endpoints ─────────────────────────────────────────

    def profile(self) -> Optional[FeedlyResult]:
        return self.request("/v3/profile")

    def collections(self) -> Optional[FeedlyResult]:
        return self.request("/v3/collections")

    def subscriptions(self) -> Optional[FeedlyResult]:
        return self.request("/v3/subscriptions")

    def streams(self, stream_id: str, **options) -> Optional[FeedlyResult]:
        """Read the contents of a stream.

        Options: count, ranked ("newest"/"oldest"), unread_only, newer_than,
        continuation. None values are left out.
        """
        params: dict[str, object] = {}
        for name, value in options.items():
            if name not in _STREAM_PARAMS:
                raise TypeError(f"unknown stream option: {name}")
            if value is None:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            params[_STREAM_PARAMS[name]] = value
        params["streamId"] = stream_id
        return self.request("/v3/streams/contents", params=params)
