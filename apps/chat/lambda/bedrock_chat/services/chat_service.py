"""Application service for chat requests."""

import logging
import time

from bedrock_chat.constants import DEFAULT_SYSTEM_PROMPT
from bedrock_chat.orchestration.base import ModelInvoker, resolve_initial_model_id
from bedrock_chat.schemas import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)


class ChatService:
    def __init__(
        self,
        invoker: ModelInvoker,
        default_system_prompt: str | None = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        self._invoker = invoker
        self._default_system_prompt = default_system_prompt

    def handle_chat(self, request: ChatRequest) -> ChatResponse:
        message_count = len(request.messages)
        logger.info("Chat request received", extra={"message_count": message_count})

        options = request.to_options(self._default_system_prompt)
        initial_model = resolve_initial_model_id(self._invoker.config, options)

        start = time.time()
        response = self._invoker.invoke(request.messages, options)
        duration_ms = int((time.time() - start) * 1000)

        used_fallback = response.model != initial_model
        logger.info(
            "Chat response generated",
            extra={
                "model": response.model,
                "used_fallback": used_fallback,
                "duration_ms": duration_ms,
                "response_length": len(response.text),
            },
        )
        return ChatResponse(
            message=response.content[0].text if response.content else "",
            model=response.model,
            used_fallback=used_fallback,
            duration_seconds=round(duration_ms / 1000, 2),
        )
