"""Domain-level exceptions for the Bedrock chat adapter."""

from collections.abc import Sequence
from dataclasses import dataclass


class BadRequestError(ValueError):
    """Raised for client-side invalid requests at the domain layer."""


class ModelInvocationError(Exception):
    """Base class for model invocation failures."""


class FormatError(BadRequestError, ModelInvocationError):
    """Raised when a chat message carries a role the formatters do not understand."""


class UnsupportedModelError(ModelInvocationError):
    """Raised when a model id matches no known vendor family."""

    def __init__(self, model_id: str) -> None:
        self.model_id = model_id
        super().__init__(f"Unsupported model: {model_id}")


class TransportError(ModelInvocationError):
    """Raised when the backend call for a single model fails."""

    def __init__(self, model_id: str, message: str, error_code: str | None = None) -> None:
        self.model_id = model_id
        self.error_code = error_code
        super().__init__(message)


@dataclass(frozen=True)
class ModelAttempt:
    model_id: str
    error: Exception


class ExhaustedError(ModelInvocationError):
    """Raised when every fallback candidate has been tried and failed."""

    def __init__(self, attempts: Sequence[ModelAttempt]) -> None:
        if not attempts:
            raise ValueError("ExhaustedError requires at least one failed attempt")
        self.attempts = tuple(attempts)
        self.last_error = self.attempts[-1].error
        super().__init__(
            "No available models found. Please check your AWS Bedrock permissions: "
            f"{self.last_error}"
        )
