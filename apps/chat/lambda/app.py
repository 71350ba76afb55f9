"""Bedrock chat API backend using FastAPI + Mangum for AWS Lambda."""

import logging
import os
import secrets
from functools import lru_cache

from fastapi import APIRouter, FastAPI, HTTPException
from mangum import Mangum

from bedrock_chat.errors import BadRequestError, UnsupportedModelError
from bedrock_chat.infra.runtime import (
    ensure_langsmith_configured,
    flush_langsmith_traces,
    get_adapter_config,
    get_api_credentials,
    get_bedrock_client,
    get_invoke_model_runnable,
)
from bedrock_chat.orchestration.base import ModelInvoker
from bedrock_chat.orchestration.langgraph_flow import LangGraphFallbackInvoker
from bedrock_chat.orchestration.sequential import SequentialFallbackInvoker
from bedrock_chat.providers.bedrock_provider import BedrockModelCatalog, BedrockRuntimeBackend
from bedrock_chat.schemas import ChatRequest, ChatResponse, DiagnosticsReport, ModelListResponse
from bedrock_chat.services.chat_service import ChatService
from bedrock_chat.services.diagnostics import ModelDiagnostics

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

FALLBACK_STRATEGY_ENV = "BEDROCK_FALLBACK_STRATEGY"

app = FastAPI()
router = APIRouter(prefix="/api")


@lru_cache(maxsize=1)
def get_backend() -> BedrockRuntimeBackend:
    return BedrockRuntimeBackend(get_invoke_runnable=get_invoke_model_runnable)


@lru_cache(maxsize=1)
def get_catalog() -> BedrockModelCatalog:
    return BedrockModelCatalog(get_bedrock_client=get_bedrock_client)


def _build_invoker() -> ModelInvoker:
    strategy = os.environ.get(FALLBACK_STRATEGY_ENV, "sequential").lower()
    if strategy == "langgraph":
        return LangGraphFallbackInvoker(backend=get_backend(), config=get_adapter_config())
    if strategy != "sequential":
        logger.warning(
            "Unknown fallback strategy; using sequential", extra={"strategy": strategy}
        )
    return SequentialFallbackInvoker(backend=get_backend(), config=get_adapter_config())


@lru_cache(maxsize=1)
def get_chat_service() -> ChatService:
    return ChatService(invoker=_build_invoker())


@lru_cache(maxsize=1)
def get_diagnostics() -> ModelDiagnostics:
    return ModelDiagnostics(
        backend=get_backend(), catalog=get_catalog(), config=get_adapter_config()
    )


@router.post("/chat", response_model=ChatResponse)
def chat(request: ChatRequest) -> ChatResponse:
    """Send messages to the first available Bedrock model and return its reply."""
    ensure_langsmith_configured()
    try:
        return get_chat_service().handle_chat(request)
    except (BadRequestError, UnsupportedModelError) as e:
        logger.warning("Chat request rejected", extra={"error": str(e)})
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        logger.exception("Bedrock chat call failed")
        raise HTTPException(status_code=502, detail=str(e)) from e
    finally:
        flush_langsmith_traces()


@router.get("/models", response_model=ModelListResponse)
def list_models() -> ModelListResponse:
    """List the foundation models visible to the configured AWS credentials."""
    try:
        models = get_catalog().list_models()
    except Exception as e:
        logger.exception("Failed to retrieve available models")
        raise HTTPException(
            status_code=500,
            detail={
                "error": "Failed to retrieve available models",
                "message": str(e) or "Unknown error",
                "hint": (
                    "Make sure your AWS credentials have access to Bedrock and the "
                    "ListFoundationModels permission"
                ),
            },
        ) from e
    return ModelListResponse(models=models, region=get_adapter_config().region)


@router.get("/models/diagnostics", response_model=DiagnosticsReport)
def model_diagnostics(debug_key: str | None = None) -> DiagnosticsReport:
    """Probe every fallback candidate; guarded by the configured debug key."""
    expected = get_api_credentials().debug_key
    if not expected or not debug_key or not secrets.compare_digest(debug_key, expected):
        raise HTTPException(status_code=403, detail="Debug key required")
    return get_diagnostics().run()


@router.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


app.include_router(router)


handler = Mangum(app)
