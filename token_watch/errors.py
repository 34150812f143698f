"""
Errors
======

Exception hierarchy for the token watcher.

- FeedError: a price feed could not produce a price (local to one token)
- ConfigError: environment configuration is missing or malformed (fatal)
- DeliveryError: a Telegram message could not be sent (logged and dropped)
"""

from typing import Optional


class TokenWatchError(Exception):
    """Base class for all token watcher errors."""


class FeedError(TokenWatchError):
    """A price feed request or response could not be turned into a price."""

    def __init__(self, message: str, feed: Optional[str] = None, url: Optional[str] = None):
        super().__init__(message)
        self.feed = feed
        self.url = url


class ConfigError(TokenWatchError):
    """Required configuration is missing or malformed."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class DeliveryError(TokenWatchError):
    """An outbound message could not be delivered."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
