"""
Exception hierarchy for the delta arbitrage bot.

Provides specific exception types for the failure categories a decision cycle
can hit, so the event loop can tell a skipped cycle from a programming error.
"""

from typing import Any, Dict, Optional


class DeltaArbitrageError(Exception):
    """Base exception for all delta arbitrage related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(DeltaArbitrageError):
    """Raised when there are configuration-related issues."""

    pass


class PreconditionViolation(DeltaArbitrageError):
    """
    Raised when a caller breaks a contract of the core, e.g. passes the
    empty route to provisioning, leg building or execution.

    This is a programming error. The event loop does not swallow it.
    """

    def __init__(
        self,
        message: str,
        route: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.route = route


class InsufficientFundsError(DeltaArbitrageError):
    """Raised when the native balance is too low to wrap a top-up quantum."""

    def __init__(
        self,
        message: str,
        required: Optional[int] = None,
        available: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.required = required
        self.available = available


class MalformedVenueResponseError(DeltaArbitrageError):
    """Raised when a quote or swap result does not have the expected shape."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        response: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.operation = operation
        self.response = response


class CapabilityError(DeltaArbitrageError):
    """Raised when a call to the venue (RPC, contract, signer) fails."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.operation = operation
