"""Shared constants and literal types for the Bedrock chat Lambda."""

from typing import Literal

LANGSMITH_API_KEY_PARAMETER_NAME = "/chat-app/langsmith-api-key"
DEBUG_KEY_PARAMETER_NAME = "/chat-app/bedrock-debug-key"
DEFAULT_AWS_REGION = "us-east-1"
LANGSMITH_PROJECT = "bedrock-chat"

DEFAULT_FALLBACK_MODELS = (
    "anthropic.claude-v2",
    "anthropic.claude-instant-v1",
    "amazon.titan-text-express-v1",
    "amazon.titan-text-lite-v1",
    "cohere.command-text-v14",
    "meta.llama2-13b-chat-v1",
)

BEDROCK_CONTENT_TYPE = "application/json"
ANTHROPIC_VERSION = "bedrock-2023-05-31"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2048
DEFAULT_MESSAGES_API_MAX_TOKENS = 4096
TITAN_TOP_P = 0.9
LEGACY_CLAUDE_STOP_SEQUENCES = ("\n\nHuman:", "\n\nAssistant:")

PROBE_PROMPT = "Hello, are you available?"
PROBE_MAX_TOKENS = 10

DEFAULT_SYSTEM_PROMPT = (
    "You are VIBE Assistant, a helpful AI that assists users with generating "
    "meetings, projects, and documents based on conversations."
)

Role = Literal["user", "assistant", "system"]
