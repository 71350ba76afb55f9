"""Map vendor response envelopes onto the common ``NormalizedResponse`` shape."""

from collections.abc import Mapping
from typing import Any

from .model_registry import ModelCandidate, VendorFamily
from .schemas import NormalizedResponse


def _first_text(payload: Mapping[str, Any], list_key: str, text_key: str) -> str | None:
    items = payload.get(list_key)
    if isinstance(items, list) and items and isinstance(items[0], Mapping):
        return items[0].get(text_key)
    return None


def extract_text(family: VendorFamily, payload: Mapping[str, Any]) -> str:
    if family is VendorFamily.LEGACY_CLAUDE:
        text = payload.get("completion")
    elif family is VendorFamily.TITAN:
        text = _first_text(payload, "results", "outputText") or payload.get("outputText")
    elif family is VendorFamily.COHERE:
        text = _first_text(payload, "generations", "text") or payload.get("text")
    elif family is VendorFamily.LLAMA:
        text = payload.get("generation")
    else:
        raise ValueError(f"{family.value} responses are not flattened to text")
    return text if isinstance(text, str) else ""


def _content_blocks(content: Any) -> list[dict[str, Any]]:
    if not isinstance(content, list):
        return []
    blocks = []
    for block in content:
        if not isinstance(block, Mapping):
            continue
        text = block.get("text")
        blocks.append({**block, "text": text if isinstance(text, str) else ""})
    return blocks


def normalize_response(candidate: ModelCandidate, payload: Any) -> NormalizedResponse:
    if not isinstance(payload, Mapping):
        payload = {}
    if candidate.family.uses_messages_api:
        return NormalizedResponse.model_validate(
            {
                **payload,
                "content": _content_blocks(payload.get("content")),
                "model": candidate.model_id,
            }
        )
    return NormalizedResponse(
        content=[{"text": extract_text(candidate.family, payload)}],
        model=candidate.model_id,
    )
