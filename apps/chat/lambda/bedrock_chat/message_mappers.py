"""Conversion helpers between chat messages and vendor-specific Bedrock prompts.

The flattening formatters only render ``user`` and ``assistant`` turns. System
content reaches the model exclusively through the separate ``system_prompt``
argument, so ``system`` entries inside the message list are skipped.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from .errors import FormatError
from .schemas import ChatMessage


def format_messages_for_bedrock(
    messages: Iterable[ChatMessage | Mapping[str, Any]],
) -> list[ChatMessage]:
    """Coerce loosely typed ``{role, content}`` items into ``ChatMessage`` values."""
    formatted: list[ChatMessage] = []
    for index, message in enumerate(messages):
        if isinstance(message, ChatMessage):
            formatted.append(message)
            continue
        try:
            formatted.append(ChatMessage.model_validate(message))
        except ValidationError as e:
            role = message.get("role") if isinstance(message, Mapping) else None
            raise FormatError(f"Invalid chat message at index {index} (role={role!r})") from e
    return formatted


def format_legacy_claude_prompt(messages: Sequence[ChatMessage], system_prompt: str | None) -> str:
    prompt = f"{system_prompt}\n\n" if system_prompt else ""
    for message in messages:
        if message.role == "user":
            prompt += f"\n\nHuman: {message.content}"
        elif message.role == "assistant":
            prompt += f"\n\nAssistant: {message.content}"
    return prompt + "\n\nAssistant:"


def format_titan_prompt(messages: Sequence[ChatMessage], system_prompt: str | None) -> str:
    prompt = f"System: {system_prompt}\n\n" if system_prompt else ""
    for message in messages:
        if message.role == "user":
            prompt += f"User: {message.content}\n"
        elif message.role == "assistant":
            prompt += f"Assistant: {message.content}\n"
    return prompt + "Assistant:"


def format_cohere_prompt(messages: Sequence[ChatMessage], system_prompt: str | None) -> str:
    prompt = f"{system_prompt}\n\n" if system_prompt else ""
    for message in messages:
        if message.role == "user":
            prompt += f"USER: {message.content}\n"
        elif message.role == "assistant":
            prompt += f"ASSISTANT: {message.content}\n"
    return prompt + "ASSISTANT:"


def format_llama_prompt(messages: Sequence[ChatMessage], system_prompt: str | None) -> str:
    """Render a Llama 2 chat prompt.

    Each user turn lives inside an ``[INST] ... [/INST]`` block; the system
    prompt is embedded in the first block. Assistant replies sit between
    blocks and close the exchange with ``</s>`` before the next ``[INST]``.
    Consecutive user turns with no reply between them share one block,
    joined by a blank line; a new block opens only after an assistant turn.
    """
    prompt = "<s>[INST] "
    if system_prompt:
        prompt += f"<<SYS>>\n{system_prompt}\n<</SYS>>\n\n"

    block_open = True
    block_has_user = False
    for message in messages:
        if message.role == "user":
            if not block_open:
                prompt += "<s>[INST] "
                block_open = True
            elif block_has_user:
                prompt += "\n\n"
            prompt += message.content
            block_has_user = True
        elif message.role == "assistant":
            if block_open:
                prompt += " [/INST]"
                block_open = False
            prompt += f" {message.content} </s>"
            block_has_user = False

    if block_open:
        prompt += " [/INST]"
    return prompt


def build_messages_payload(messages: Sequence[ChatMessage]) -> list[dict[str, str]]:
    """Pass-through rendering for the Anthropic messages API."""
    return [{"role": message.role, "content": message.content} for message in messages]
