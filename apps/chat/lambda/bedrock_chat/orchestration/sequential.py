"""Sequential model fallback loop."""

from collections.abc import Mapping, Sequence
from typing import Any

from bedrock_chat.config import AdapterConfig
from bedrock_chat.errors import ModelAttempt, TransportError
from bedrock_chat.message_mappers import format_messages_for_bedrock
from bedrock_chat.orchestration.base import (
    ModelInvoker,
    attempt_model,
    duplicate_attempt_error,
    exhausted,
    log_failed_attempt,
    resolve_initial_model_id,
    select_next_model_id,
)
from bedrock_chat.providers.base import ModelBackend
from bedrock_chat.schemas import ChatMessage, InvocationOptions, NormalizedResponse


class SequentialFallbackInvoker(ModelInvoker):
    def __init__(self, backend: ModelBackend, config: AdapterConfig) -> None:
        self._backend = backend
        self.config = config

    def invoke(
        self,
        messages: Sequence[ChatMessage | Mapping[str, Any]],
        options: InvocationOptions | None = None,
    ) -> NormalizedResponse:
        options = options or InvocationOptions()
        chat_messages = format_messages_for_bedrock(messages)
        attempted: set[str] = set()
        attempts: list[ModelAttempt] = []

        model_id: str | None = resolve_initial_model_id(self.config, options)
        while model_id is not None:
            if model_id in attempted:
                error: Exception = duplicate_attempt_error(model_id)
            else:
                attempted.add(model_id)
                try:
                    return attempt_model(self._backend, model_id, chat_messages, options)
                except TransportError as e:
                    error = e
            attempts.append(ModelAttempt(model_id=model_id, error=error))
            log_failed_attempt(attempts[-1], len(attempts))
            model_id = select_next_model_id(self.config.fallback_models, attempted)

        raise exhausted(attempts) from attempts[-1].error
