#!/usr/bin/env python3
"""
Standardized exception hierarchy for ytfd.

Every per-request failure is one of these; the connection task turns it into
a failure response whose payload is the exception message.
"""

from typing import Optional, Dict, Any

from .formatters import go_quote


class YtfdError(Exception):
    """Base exception for all ytfd errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message (sent to clients as-is)
            error_code: Machine-readable error code
            context: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'context': self.context
        }


# Store-related exceptions
class StoreError(YtfdError):
    """Base exception for subscription store errors."""
    pass


class EmptyFeedError(StoreError):
    """A channel with no videos cannot be stored."""

    def __init__(self, channel_name: str):
        super().__init__("channel with no videos", context={'channel_name': channel_name})


class NotSubscribedError(StoreError):
    """Lookup of a channel that is not in the store."""

    def __init__(self, key: str):
        super().__init__(f"not subscribed to channel '{key}'", context={'key': key})


class AlreadySubscribedError(StoreError):
    """The add endpoint refuses channels that are already stored."""

    def __init__(self, channel_name: str):
        super().__init__(f"already subscribed to channel {go_quote(channel_name)}",
                         context={'channel_name': channel_name})


# Source-related exceptions
class SourceError(YtfdError):
    """Base exception for resolver and fetcher errors."""
    pass


class EmptyChannelNameError(SourceError):
    """Resolution was asked for a blank channel name."""

    def __init__(self):
        super().__init__("empty channel name")


class ChannelNotFoundError(SourceError):
    """The channel page holds no feed address."""

    def __init__(self, channel_name: str):
        super().__init__(f"channel '{channel_name}' not found", context={'channel_name': channel_name})


class SourceConnectionError(SourceError):
    """HTTP request to YouTube failed."""

    def __init__(self, url: str, original_error: Exception):
        super().__init__(f"failed to get '{url}': {original_error}",
                         context={'url': url, 'original_error': str(original_error)})


class SourceParseError(SourceError):
    """Fetched document could not be parsed as a channel feed."""

    def __init__(self, url: str, original_error: Exception):
        super().__init__(f"failed to parse feed '{url}': {original_error}",
                         context={'url': url, 'original_error': str(original_error)})


class SearchError(YtfdError):
    """Channel search request failed."""

    def __init__(self, query: str, original_error: Exception):
        super().__init__(f"failed to search for '{query}': {original_error}",
                         context={'query': query, 'original_error': str(original_error)})


class NotificationError(YtfdError):
    """Desktop notification could not be shown."""

    def __init__(self, command: str, original_error: Exception):
        super().__init__(f"{command} failed: {original_error}",
                         context={'command': command, 'original_error': str(original_error)})


class ConfigurationError(YtfdError):
    """Configuration is invalid or an indispensable resource is unavailable."""

    def __init__(self, config_key: str, issue: str):
        super().__init__(f"Configuration error for {config_key}: {issue}",
                         context={'config_key': config_key, 'issue': issue})


# Connection-related exceptions
class RequestReadError(YtfdError):
    """The client closed the connection or the read failed."""

    def __init__(self, operation: str, original_error: str):
        super().__init__(original_error, context={'operation': operation})


class ProtocolError(YtfdError):
    """A response too short to carry the status and size header."""

    def __init__(self, message_length: int):
        super().__init__(f"response too short: {message_length} bytes",
                         context={'message_length': message_length})
