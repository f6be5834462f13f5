"""Domain error codes for the session pricing package."""
from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_INPUT = "INVALID_INPUT"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    VISIT_NOT_FOUND = "VISIT_NOT_FOUND"
    PAYMENT_REJECTED = "PAYMENT_REJECTED"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict:
        return {"code": self.code.value, "message": self.message}


class InvalidInput(DomainError):
    """Raised when a caller passes a malformed session or an unknown plan."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_INPUT, message=message)


class ConfigurationError(DomainError):
    """Raised when the plan table or pricing rates are misconfigured."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.CONFIGURATION_ERROR, message=message)


class VisitNotFoundError(DomainError):
    """Raised when a visit is not found."""

    def __init__(self, visit_id: str) -> None:
        super().__init__(
            code=ErrorCode.VISIT_NOT_FOUND,
            message="Visit not found",
        )
        self.visit_id = visit_id


class PaymentRejectedError(DomainError):
    """Raised when a payment does not settle the confirmed quote."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.PAYMENT_REJECTED, message=message)
