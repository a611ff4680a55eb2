"""
Common exception classes for querybot.

This module defines custom exception classes used throughout the application
for better error handling and categorization.
"""

from __future__ import annotations


class QueryBotError(Exception):
    """Base exception class for all querybot errors."""

    def __init__(self, message: str, details: dict | None = None, **kwargs):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        for key, value in (kwargs or {}).items():
            setattr(self, key, value)


class ConfigurationError(QueryBotError):
    """Raised when there's a configuration issue. Fatal at startup."""

    def __init__(
        self,
        message: str = "Configuration error",
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, details, **kwargs)


class AliasResolutionError(ConfigurationError):
    """Raised when an alias cannot be bound to a registered command."""

    def __init__(
        self,
        message: str = "Alias resolution failed",
        alias_name: str | None = None,
        command_name: str | None = None,
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, details, **kwargs)
        self.alias_name = alias_name
        self.command_name = command_name


class QueryError(QueryBotError):
    """Raised when a server status query fails."""

    def __init__(
        self,
        message: str = "Server query failed",
        address: str | None = None,
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, details, **kwargs)
        self.address = address


class QueryTransportError(QueryError):
    """Raised when the query transport fails (timeout, bad reply, unreachable)."""

    def __init__(
        self,
        message: str = "Server query transport failed",
        address: str | None = None,
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, address, details, **kwargs)


class QueryParseError(QueryError):
    """Raised when a query reply holds a value of the wrong type."""

    def __init__(
        self,
        message: str = "Server query reply could not be parsed",
        address: str | None = None,
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, address, details, **kwargs)


class InvalidAddressError(QueryError):
    """Raised when a server address is not of the form host:port."""

    def __init__(
        self,
        message: str = "Invalid server address",
        address: str | None = None,
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, address, details, **kwargs)


class ChatTransportError(QueryBotError):
    """Raised when the chat connection fails."""

    def __init__(
        self,
        message: str = "Chat transport error",
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, details, **kwargs)
