"""
Custom exception hierarchy for the intake bot.
Provides structured error handling with proper HTTP status codes.
"""

from typing import Any, Optional


class IntakeBotError(Exception):
    """Base exception for all intake bot errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(IntakeBotError):
    """Error in application configuration."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details=details,
            status_code=500,
        )


# =============================================================================
# Validation Errors (400)
# =============================================================================


class ValidationError(IntakeBotError):
    """Request validation failed."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details=details,
            status_code=400,
        )


# =============================================================================
# Not Found Errors (404)
# =============================================================================


class NotFoundError(IntakeBotError):
    """Requested resource not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        msg = message or f"{resource_type} not found"
        if resource_id:
            msg = f"{resource_type} with ID '{resource_id}' not found"

        super().__init__(
            message=msg,
            code="NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id},
            status_code=404,
        )


class ConversationNotFoundError(NotFoundError):
    """Conversation record not found."""

    def __init__(self, conversation_key: str) -> None:
        super().__init__(resource_type="Conversation", resource_id=conversation_key)
        self.code = "CONVERSATION_NOT_FOUND"


# =============================================================================
# External Service Errors (502)
# =============================================================================


class ExternalServiceError(IntakeBotError):
    """Error communicating with external service."""

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=f"{service_name} error: {message}",
            code="EXTERNAL_SERVICE_ERROR",
            details={"service": service_name, **(details or {})},
            status_code=502,
        )


class OracleError(ExternalServiceError):
    """The text-completion oracle failed or answered with something unusable."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(service_name="Oracle", message=message, details=details)
        self.code = "ORACLE_ERROR"


class TicketSubmissionError(ExternalServiceError):
    """The ticket sink rejected or failed to record a proposal."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(service_name="Ticket API", message=message, details=details)
        self.code = "TICKET_SUBMISSION_ERROR"


class DeliveryError(ExternalServiceError):
    """A reply could not be delivered to the chat channel."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(service_name="Delivery", message=message, details=details)
        self.code = "DELIVERY_ERROR"


# =============================================================================
# Business Logic Errors (422)
# =============================================================================


class BusinessLogicError(IntakeBotError):
    """Business logic validation failed."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            code="BUSINESS_LOGIC_ERROR",
            details=details,
            status_code=422,
        )


class StateTransitionError(BusinessLogicError):
    """Invalid conversation lifecycle transition."""

    def __init__(self, from_state: str, to_state: str, message: Optional[str] = None) -> None:
        super().__init__(
            message=message or f"Cannot move conversation from '{from_state}' to '{to_state}'",
            details={"from_state": from_state, "to_state": to_state},
        )
        self.code = "INVALID_STATE_TRANSITION"
