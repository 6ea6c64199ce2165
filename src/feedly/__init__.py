"""
feedly: Feedly cloud API client with automatic access-token refresh.
"""

from .client import FeedlyClient
from .errors import ConfigurationError, FeedlyError, StateError
from .types import ClientConfig, Failure, FeedlyResult, RateLimit

__all__ = [
    "ClientConfig",
    "ConfigurationError",
    "Failure",
    "FeedlyClient",
    "FeedlyError",
    "FeedlyResult",
    "RateLimit",
    "StateError",
]
__version__ = "0.1.0"
