"""Bedrock backend implementations backed by boto3 clients."""

import logging
import time
from collections.abc import Callable
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from langchain_core.runnables import Runnable

from bedrock_chat.errors import TransportError
from bedrock_chat.schemas import ModelSummary

logger = logging.getLogger(__name__)


def _client_error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "") or type(error).__name__


class BedrockRuntimeBackend:
    def __init__(self, get_invoke_runnable: Callable[[], Runnable[dict[str, Any], bytes]]) -> None:
        self._get_invoke_runnable = get_invoke_runnable

    def invoke_model(self, model_id: str, body: str, content_type: str, accept: str) -> bytes:
        params = {
            "modelId": model_id,
            "body": body,
            "contentType": content_type,
            "accept": accept,
        }
        start = time.time()
        try:
            payload = self._get_invoke_runnable().invoke(
                params,
                config={
                    "run_name": "bedrock_invoke_model",
                    "tags": ["bedrock-chat", model_id],
                },
            )
        except ClientError as e:
            raise TransportError(model_id, str(e), error_code=_client_error_code(e)) from e
        except BotoCoreError as e:
            raise TransportError(model_id, str(e), error_code=type(e).__name__) from e

        logger.info(
            "Bedrock model invoked",
            extra={
                "model": model_id,
                "bedrock_duration_ms": int((time.time() - start) * 1000),
                "response_bytes": len(payload),
            },
        )
        return payload


class BedrockModelCatalog:
    def __init__(self, get_bedrock_client: Callable[[], Any]) -> None:
        self._get_bedrock_client = get_bedrock_client

    def list_models(self) -> list[ModelSummary]:
        response = self._get_bedrock_client().list_foundation_models()
        return [
            ModelSummary(
                model_id=summary["modelId"],
                model_name=summary.get("modelName"),
                provider=summary.get("providerName"),
                response_streaming_supported=summary.get("responseStreamingSupported"),
                input_modalities=summary.get("inputModalities", []),
                output_modalities=summary.get("outputModalities", []),
                customizations_supported=summary.get("customizationsSupported", []),
            )
            for summary in response.get("modelSummaries", [])
        ]
