"""Custom exceptions for the broadcast relay."""

from typing import Optional


class RelayError(Exception):
    """Base exception for relay errors."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ProtocolViolation(RelayError):
    """Raised when a registration would break a registry invariant."""

    def __init__(self, message: str):
        super().__init__(message, error_code="protocol_violation")


class UnknownConnection(RelayError):
    """Raised when an operation references a connection that is not registered."""

    def __init__(self, connection_id: str):
        self.connection_id = connection_id
        super().__init__(
            f"Connection {connection_id} is not registered",
            error_code="unknown_connection",
        )


class RecipientDeliveryFailure(RelayError):
    """Raised when sending to a single recipient fails."""

    def __init__(self, connection_id: str, cause: BaseException):
        self.connection_id = connection_id
        self.cause = cause
        reason = str(cause) or type(cause).__name__
        super().__init__(
            f"Delivery to {connection_id} failed: {reason}",
            error_code="delivery_failed",
        )
