"""
Feedly refresh-token exchange.
Trades the long-lived refresh token for a new access token, one flight at a time.
"""

import logging
import threading
from concurrent.futures import Future
from typing import Any, Callable, Optional, Union

import requests

from .types import CLIENT_ID, CLIENT_SECRET, TOKEN_PATH, FeedlyResult, Failure

REDACTED_KEYS = ("access_token", "refresh_token")

Dispatch = Callable[..., Union[FeedlyResult, Failure]]


def build_refresh_payload(refresh_token: str) -> dict[str, str]:
    """JSON body for the refresh_token grant."""
    return {
        "refresh_token": refresh_token,
        "client_id": CLIENT_ID,
        "client_secret": CLIENT_SECRET,
        "grant_type": "refresh_token",
    }


def redact_auth_body(body: dict) -> dict:
    """Copy of a token response with secrets replaced by `String[<len>]`."""
    redacted = dict(body)
    for key in REDACTED_KEYS:
        value = redacted.get(key)
        if isinstance(value, str):
            redacted[key] = f"String[{len(value)}]"
    return redacted


def extract_access_token(result: FeedlyResult) -> str:
    """Access token from a refresh response. Raises on anything unusable."""
    result.response.raise_for_status()

    body: Any = result.body
    token = body.get("access_token") if isinstance(body, dict) else None
    if not isinstance(token, str) or not token:
        raise ValueError("refresh response carries no access_token")
    return token


class RefreshCoordinator:
    """Runs the token exchange; concurrent callers share one in-flight call."""

    def __init__(
        self,
        dispatch: Dispatch,
        refresh_token: str,
        on_token: Callable[[str], None],
        logger: logging.Logger,
        current_token: Optional[Callable[[], Optional[str]]] = None,
    ):
        self._dispatch = dispatch
        self._refresh_token = refresh_token
        self._on_token = on_token
        self._logger = logger
        self._current_token = current_token or (lambda: None)
        self._lock = threading.Lock()
        self._pending: Optional[Future] = None

    def _in_flight(self) -> bool:
        with self._lock:
            return self._pending is not None

    def refresh(self, only_if_missing: bool = False) -> Optional[str]:
        """Refresh the access token, or join the refresh already running.

        With `only_if_missing`, a token stored since the caller last looked
        is returned as is and no exchange is started.

        Returns the new token, or None when the exchange failed (the failure
        is logged, never raised).
        """
        with self._lock:
            pending = self._pending
            if pending is None and only_if_missing:
                current = self._current_token()
                if current:
                    return current
            if pending is None:
                pending = self._pending = Future()
                owner = True
            else:
                owner = False

        if not owner:
            return pending.result()

        token = None
        try:
            token = self._exchange()
        finally:
            with self._lock:
                self._pending = None
            pending.set_result(token)
        return token

    def _exchange(self) -> Optional[str]:
        outcome = self._dispatch(
            TOKEN_PATH,
            method="POST",
            headers={},
            json=build_refresh_payload(self._refresh_token),
        )
        if isinstance(outcome, Failure):
            self._logger.error("Failed to refresh token: %s", outcome.error)
            return None

        try:
            token = extract_access_token(outcome)
        except (requests.RequestException, ValueError) as exc:
            self._logger.error("Failed to refresh token: %s", exc)
            return None

        self._logger.info(
            "Refresh of tokens was successful: %s", redact_auth_body(outcome.body)
        )
        self._on_token(token)
        return token
