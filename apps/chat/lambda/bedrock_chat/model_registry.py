"""Vendor family registry for Bedrock model identifiers."""

from dataclasses import dataclass
from enum import Enum

from .errors import UnsupportedModelError


class VendorFamily(str, Enum):
    LEGACY_CLAUDE = "legacy_claude"
    MODERN_CLAUDE = "modern_claude"
    INFERENCE_PROFILE = "inference_profile"
    TITAN = "titan"
    COHERE = "cohere"
    LLAMA = "llama"

    @property
    def uses_messages_api(self) -> bool:
        return self in (VendorFamily.MODERN_CLAUDE, VendorFamily.INFERENCE_PROFILE)


@dataclass(frozen=True)
class ModelCandidate:
    model_id: str
    family: VendorFamily

    @property
    def is_inference_profile(self) -> bool:
        return self.family is VendorFamily.INFERENCE_PROFILE


INFERENCE_PROFILE_MARKER = "inference-profile"
LEGACY_CLAUDE_MARKERS = ("claude-v2", "claude-instant")

# Checked in order; the first matching substring wins.
FAMILY_MARKERS: tuple[tuple[str, VendorFamily], ...] = (
    ("amazon.titan", VendorFamily.TITAN),
    ("cohere", VendorFamily.COHERE),
    ("meta.llama", VendorFamily.LLAMA),
)


def classify_model(model_id: str) -> VendorFamily:
    if INFERENCE_PROFILE_MARKER in model_id:
        return VendorFamily.INFERENCE_PROFILE
    if "claude" in model_id:
        if any(marker in model_id for marker in LEGACY_CLAUDE_MARKERS):
            return VendorFamily.LEGACY_CLAUDE
        return VendorFamily.MODERN_CLAUDE
    for marker, family in FAMILY_MARKERS:
        if marker in model_id:
            return family
    raise UnsupportedModelError(model_id)


def resolve_candidate(model_id: str) -> ModelCandidate:
    """Classify a model id once so downstream code can dispatch on the family."""
    return ModelCandidate(model_id=model_id, family=classify_model(model_id))
