"""Vendor-specific request body assembly for Bedrock InvokeModel."""

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from .constants import (
    ANTHROPIC_VERSION,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MESSAGES_API_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    LEGACY_CLAUDE_STOP_SEQUENCES,
    TITAN_TOP_P,
)
from .message_mappers import (
    build_messages_payload,
    format_cohere_prompt,
    format_legacy_claude_prompt,
    format_llama_prompt,
    format_titan_prompt,
)
from .model_registry import ModelCandidate, VendorFamily
from .schemas import ChatMessage, InvocationOptions


@dataclass(frozen=True)
class BedrockRequest:
    model_id: str
    family: VendorFamily
    body: dict[str, Any]

    def encode(self) -> str:
        return json.dumps(self.body)


def build_request(
    candidate: ModelCandidate,
    messages: Sequence[ChatMessage],
    options: InvocationOptions,
) -> BedrockRequest:
    family = candidate.family
    system_prompt = options.system_prompt or ""
    temperature = DEFAULT_TEMPERATURE if options.temperature is None else options.temperature

    def max_tokens(default: int = DEFAULT_MAX_TOKENS) -> int:
        return default if options.max_tokens is None else options.max_tokens

    body: dict[str, Any]
    if family is VendorFamily.LEGACY_CLAUDE:
        body = {
            "prompt": format_legacy_claude_prompt(messages, system_prompt),
            "max_tokens_to_sample": max_tokens(),
            "temperature": temperature,
            "stop_sequences": list(LEGACY_CLAUDE_STOP_SEQUENCES),
        }
    elif family.uses_messages_api:
        body = {
            "anthropic_version": ANTHROPIC_VERSION,
            "max_tokens": max_tokens(DEFAULT_MESSAGES_API_MAX_TOKENS),
            "messages": build_messages_payload(messages),
            "temperature": temperature,
        }
        if system_prompt:
            body["system"] = system_prompt
    elif family is VendorFamily.TITAN:
        body = {
            "inputText": format_titan_prompt(messages, system_prompt),
            "textGenerationConfig": {
                "maxTokenCount": max_tokens(),
                "temperature": temperature,
                "topP": TITAN_TOP_P,
            },
        }
    elif family is VendorFamily.COHERE:
        body = {
            "prompt": format_cohere_prompt(messages, system_prompt),
            "max_tokens": max_tokens(),
            "temperature": temperature,
        }
    elif family is VendorFamily.LLAMA:
        body = {
            "prompt": format_llama_prompt(messages, system_prompt),
            "max_gen_len": max_tokens(),
            "temperature": temperature,
        }
    else:
        raise AssertionError(f"Unhandled vendor family: {family}")

    return BedrockRequest(model_id=candidate.model_id, family=family, body=body)
