"""Pydantic schemas for the Bedrock chat adapter and API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .constants import Role


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class InvocationOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, protected_namespaces=())

    model_id: str | None = Field(default=None, alias="modelId")
    max_tokens: int | None = Field(default=None, alias="maxTokens", ge=1)
    temperature: float | None = Field(default=None, ge=0, le=1)
    system_prompt: str | None = Field(default=None, alias="systemPrompt")
    use_inference_profile: bool | None = Field(default=None, alias="useInferenceProfile")


class ContentBlock(BaseModel):
    model_config = ConfigDict(extra="allow")

    text: str = ""


class NormalizedResponse(BaseModel):
    """Common response shape; extra keys from the messages API are carried through."""

    model_config = ConfigDict(extra="allow")

    content: list[ContentBlock] = Field(default_factory=list)
    model: str

    @property
    def text(self) -> str:
        return "".join(block.text for block in self.content)


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    messages: list[dict[str, Any]]
    model_id: str | None = Field(default=None, alias="modelId")
    system_prompt: str | None = Field(default=None, alias="systemPrompt")
    temperature: float | None = Field(default=None, ge=0, le=1)
    max_tokens: int | None = Field(default=None, alias="maxTokens", ge=1, le=4096)
    use_inference_profile: bool | None = Field(default=None, alias="useInferenceProfile")

    def to_options(self, default_system_prompt: str | None = None) -> InvocationOptions:
        return InvocationOptions(
            model_id=self.model_id,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            system_prompt=self.system_prompt or default_system_prompt,
            use_inference_profile=self.use_inference_profile,
        )


class ChatResponse(BaseModel):
    message: str
    model: str
    used_fallback: bool = Field(serialization_alias="usedFallback")
    duration_seconds: float = Field(serialization_alias="durationSeconds")


class ModelSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    model_id: str = Field(alias="modelId")
    model_name: str | None = Field(default=None, alias="modelName")
    provider: str | None = None
    response_streaming_supported: bool | None = Field(
        default=None, alias="responseStreamingSupported"
    )
    input_modalities: list[str] = Field(default_factory=list, alias="inputModalities")
    output_modalities: list[str] = Field(default_factory=list, alias="outputModalities")
    customizations_supported: list[str] = Field(
        default_factory=list, alias="customizationsSupported"
    )


class ModelListResponse(BaseModel):
    models: list[ModelSummary]
    region: str


class ProbeResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    error_code: str | None = Field(default=None, alias="errorCode")


class DiagnosticsConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    region: str
    model_id: str = Field(alias="modelId")
    has_inference_profile: bool = Field(alias="hasInferenceProfile")
    fallback_models: list[str] = Field(alias="fallbackModels")


class DiagnosticsReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    config: DiagnosticsConfig
    list_models: ProbeResult = Field(alias="listModels")
    available_models: list[ModelSummary] = Field(default_factory=list, alias="availableModels")
    model_test_results: dict[str, ProbeResult] = Field(
        default_factory=dict, alias="modelTestResults"
    )
