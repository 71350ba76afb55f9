"""Runtime infrastructure helpers for configuration, secrets, tracing, and Bedrock clients."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import boto3
from langchain_core.runnables import Runnable, RunnableLambda
from langsmith import traceable
from langsmith.run_trees import get_cached_client

from bedrock_chat.config import AdapterConfig, load_adapter_config
from bedrock_chat.constants import (
    DEBUG_KEY_PARAMETER_NAME,
    LANGSMITH_API_KEY_PARAMETER_NAME,
    LANGSMITH_PROJECT,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiCredentials:
    langsmith_api_key: str | None
    debug_key: str | None


def _get_secure_parameter(ssm_client: Any, parameter_name: str) -> str:
    result = ssm_client.get_parameter(Name=parameter_name, WithDecryption=True)
    value = result["Parameter"].get("Value")
    if not value:
        raise RuntimeError(f"SSM parameter {parameter_name} has no value")
    return value


def _get_optional_secure_parameter(ssm_client: Any, parameter_name: str) -> str | None:
    try:
        return _get_secure_parameter(ssm_client, parameter_name)
    except Exception:
        logger.warning(
            "Optional SSM parameter is unavailable; disabling dependent feature",
            extra={"parameter_name": parameter_name},
            exc_info=True,
        )
        return None


@lru_cache(maxsize=1)
def get_adapter_config() -> AdapterConfig:
    return load_adapter_config()


@lru_cache(maxsize=1)
def get_api_credentials() -> ApiCredentials:
    ssm_client = boto3.client("ssm", region_name=get_adapter_config().region)
    return ApiCredentials(
        langsmith_api_key=_get_optional_secure_parameter(
            ssm_client, LANGSMITH_API_KEY_PARAMETER_NAME
        ),
        debug_key=_get_optional_secure_parameter(ssm_client, DEBUG_KEY_PARAMETER_NAME),
    )


def _configure_langsmith(langsmith_api_key: str | None) -> None:
    if not langsmith_api_key:
        os.environ.pop("LANGSMITH_TRACING", None)
        os.environ.pop("LANGSMITH_API_KEY", None)
        logger.info("LangSmith tracing disabled because API key is unavailable")
        return

    os.environ["LANGSMITH_TRACING"] = "true"
    os.environ["LANGSMITH_API_KEY"] = langsmith_api_key
    os.environ.setdefault("LANGSMITH_PROJECT", LANGSMITH_PROJECT)


@lru_cache(maxsize=1)
def ensure_langsmith_configured() -> None:
    """Configure LangSmith environment variables (called once via lru_cache)."""
    credentials = get_api_credentials()
    _configure_langsmith(credentials.langsmith_api_key)


def flush_langsmith_traces() -> None:
    if os.environ.get("LANGSMITH_TRACING", "").lower() != "true":
        return
    if not os.environ.get("LANGSMITH_API_KEY"):
        return
    try:
        get_cached_client().flush()
    except Exception:
        logger.warning("Failed to flush LangSmith traces", exc_info=True)


@lru_cache(maxsize=1)
def get_bedrock_runtime_client() -> Any:
    return boto3.client("bedrock-runtime", region_name=get_adapter_config().region)


@lru_cache(maxsize=1)
def get_bedrock_client() -> Any:
    return boto3.client("bedrock", region_name=get_adapter_config().region)


@traceable(run_type="llm", name="bedrock.invoke_model")
def _invoke_bedrock_model(params: dict[str, Any]) -> bytes:
    response = get_bedrock_runtime_client().invoke_model(**params)
    return response["body"].read()


@lru_cache(maxsize=1)
def get_invoke_model_runnable() -> Runnable[dict[str, Any], bytes]:
    return RunnableLambda(_invoke_bedrock_model).with_config(
        {"run_name": "chat_lambda_bedrock_invoke_model"}
    )
