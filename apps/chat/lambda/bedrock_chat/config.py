"""Adapter configuration resolved from the process environment."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .constants import DEFAULT_AWS_REGION, DEFAULT_FALLBACK_MODELS


@dataclass(frozen=True)
class AdapterConfig:
    fallback_models: tuple[str, ...] = DEFAULT_FALLBACK_MODELS
    default_model_id: str | None = None
    inference_profile_arn: str | None = None
    region: str = DEFAULT_AWS_REGION

    def __post_init__(self) -> None:
        if not self.fallback_models:
            raise ValueError("fallback_models must contain at least one model id")
        duplicates = sorted(
            {model for model in self.fallback_models if self.fallback_models.count(model) > 1}
        )
        if duplicates:
            raise ValueError(f"Duplicate fallback models: {', '.join(duplicates)}")

    @property
    def effective_default_model(self) -> str:
        return self.default_model_id or self.fallback_models[0]


def _parse_model_list(raw: str) -> tuple[str, ...]:
    return tuple(model.strip() for model in raw.split(",") if model.strip())


def load_adapter_config(environ: Mapping[str, str] | None = None) -> AdapterConfig:
    env = os.environ if environ is None else environ
    fallback_raw = env.get("BEDROCK_FALLBACK_MODELS", "")
    return AdapterConfig(
        fallback_models=_parse_model_list(fallback_raw) or DEFAULT_FALLBACK_MODELS,
        default_model_id=env.get("DEFAULT_BEDROCK_MODEL") or None,
        inference_profile_arn=env.get("BEDROCK_INFERENCE_PROFILE_ARN") or None,
        region=env.get("AWS_REGION") or DEFAULT_AWS_REGION,
    )
