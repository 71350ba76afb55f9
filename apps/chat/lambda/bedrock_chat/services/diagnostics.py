"""Bedrock access diagnostics: catalog listing and per-candidate probes."""

import logging

from bedrock_chat.config import AdapterConfig
from bedrock_chat.constants import BEDROCK_CONTENT_TYPE, PROBE_MAX_TOKENS, PROBE_PROMPT
from bedrock_chat.model_registry import resolve_candidate
from bedrock_chat.providers.base import ModelBackend, ModelCatalog
from bedrock_chat.request_builder import build_request
from bedrock_chat.schemas import (
    ChatMessage,
    DiagnosticsConfig,
    DiagnosticsReport,
    InvocationOptions,
    ModelSummary,
    ProbeResult,
)

logger = logging.getLogger(__name__)

PROBE_MESSAGES = (ChatMessage(role="user", content=PROBE_PROMPT),)
PROBE_OPTIONS = InvocationOptions(max_tokens=PROBE_MAX_TOKENS, temperature=0)


class ModelDiagnostics:
    def __init__(self, backend: ModelBackend, catalog: ModelCatalog, config: AdapterConfig) -> None:
        self._backend = backend
        self._catalog = catalog
        self._config = config

    def run(self) -> DiagnosticsReport:
        list_result, models = self._list_models()
        return DiagnosticsReport(
            config=DiagnosticsConfig(
                region=self._config.region,
                model_id=self._config.effective_default_model,
                has_inference_profile=bool(self._config.inference_profile_arn),
                fallback_models=list(self._config.fallback_models),
            ),
            list_models=list_result,
            available_models=models,
            model_test_results={
                model_id: self.probe(model_id) for model_id in self._config.fallback_models
            },
        )

    def _list_models(self) -> tuple[ProbeResult, list[ModelSummary]]:
        try:
            models = self._catalog.list_models()
        except Exception as e:
            logger.warning("Failed to list foundation models", exc_info=True)
            return ProbeResult(success=False, message=str(e) or type(e).__name__), []
        logger.info("Listed foundation models", extra={"model_count": len(models)})
        return ProbeResult(success=True, message=f"Found {len(models)} models"), models

    def probe(self, model_id: str) -> ProbeResult:
        """Send a minimal request to one model and report whether it answered."""
        try:
            request = build_request(resolve_candidate(model_id), PROBE_MESSAGES, PROBE_OPTIONS)
            self._backend.invoke_model(
                model_id, request.encode(), BEDROCK_CONTENT_TYPE, BEDROCK_CONTENT_TYPE
            )
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.warning("Model probe failed", extra={"model": model_id, "error": message})
            return ProbeResult(
                success=False, message=message, error_code=getattr(e, "error_code", None)
            )
        return ProbeResult(success=True, message="Model is available")
