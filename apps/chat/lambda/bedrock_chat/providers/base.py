"""Backend interfaces for Bedrock model invocation and catalog lookups."""

from typing import Protocol

from bedrock_chat.schemas import ModelSummary


class ModelBackend(Protocol):
    def invoke_model(self, model_id: str, body: str, content_type: str, accept: str) -> bytes:
        """Send one request body to a model and return the raw response payload."""
        ...


class ModelCatalog(Protocol):
    def list_models(self) -> list[ModelSummary]:
        """Return the foundation models visible to the configured credentials."""
        ...
