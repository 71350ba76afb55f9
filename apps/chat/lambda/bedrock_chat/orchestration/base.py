"""Invocation interfaces and the shared steps of the model fallback loop."""

import json
import logging
from collections.abc import Collection, Mapping, Sequence
from typing import Any, Protocol

from pydantic import ValidationError

from bedrock_chat.config import AdapterConfig
from bedrock_chat.constants import BEDROCK_CONTENT_TYPE
from bedrock_chat.errors import ExhaustedError, ModelAttempt, ModelInvocationError, TransportError
from bedrock_chat.model_registry import resolve_candidate
from bedrock_chat.providers.base import ModelBackend
from bedrock_chat.request_builder import build_request
from bedrock_chat.response_normalizer import normalize_response
from bedrock_chat.schemas import ChatMessage, InvocationOptions, NormalizedResponse

logger = logging.getLogger(__name__)


class ModelInvoker(Protocol):
    config: AdapterConfig

    def invoke(
        self,
        messages: Sequence[ChatMessage | Mapping[str, Any]],
        options: InvocationOptions | None = None,
    ) -> NormalizedResponse:
        """Invoke the first model candidate that answers, falling back in list order."""
        ...


def resolve_initial_model_id(config: AdapterConfig, options: InvocationOptions) -> str:
    if options.model_id:
        return options.model_id
    use_inference_profile = (
        options.use_inference_profile
        if options.use_inference_profile is not None
        else bool(config.inference_profile_arn)
    )
    if use_inference_profile and config.inference_profile_arn:
        return config.inference_profile_arn
    return config.effective_default_model


def select_next_model_id(fallback_models: Sequence[str], attempted: Collection[str]) -> str | None:
    return next((model for model in fallback_models if model not in attempted), None)


def attempt_model(
    backend: ModelBackend,
    model_id: str,
    messages: Sequence[ChatMessage],
    options: InvocationOptions,
) -> NormalizedResponse:
    """Run one attempt against ``model_id``.

    ``UnsupportedModelError`` is raised before any backend call. Backend and
    payload decoding or validation failures surface as ``TransportError``.
    """
    candidate = resolve_candidate(model_id)
    request = build_request(candidate, messages, options)
    logger.info(
        "Trying model",
        extra={"model": model_id, "inference_profile": candidate.is_inference_profile},
    )
    try:
        raw = backend.invoke_model(
            model_id, request.encode(), BEDROCK_CONTENT_TYPE, BEDROCK_CONTENT_TYPE
        )
        payload = json.loads(raw)
    except TransportError:
        raise
    except Exception as e:
        raise TransportError(model_id, str(e) or type(e).__name__) from e
    try:
        response = normalize_response(candidate, payload)
    except ValidationError as e:
        raise TransportError(model_id, f"Malformed response payload: {e}") from e
    logger.info("Model invocation succeeded", extra={"model": model_id})
    return response


def duplicate_attempt_error(model_id: str) -> ModelInvocationError:
    return ModelInvocationError(f"Already tried model {model_id}")


def log_failed_attempt(attempt: ModelAttempt, attempt_number: int) -> None:
    logger.warning(
        "Model invocation failed",
        extra={
            "model": attempt.model_id,
            "attempt": attempt_number,
            "error_code": getattr(attempt.error, "error_code", None),
            "error": str(attempt.error),
        },
    )


def exhausted(attempts: Sequence[ModelAttempt]) -> ExhaustedError:
    error = ExhaustedError(attempts)
    logger.error(
        "All model candidates failed",
        extra={
            "attempts": [
                {"model": attempt.model_id, "error": str(attempt.error)} for attempt in attempts
            ],
            "last_error": str(error.last_error),
        },
    )
    return error
