"""
Exceptions raised by the Feedly client.

Failures inside the request pipeline are never raised; they are logged by
`FeedlyClient.request` or returned as `Failure` by `FeedlyClient.try_request`.
"""


class FeedlyError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(FeedlyError, ValueError):
    """The client was constructed with an unusable configuration."""


class StateError(FeedlyError, RuntimeError):
    """A value was read before the client had the state to compute it."""
