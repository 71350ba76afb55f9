import json
import unittest

from bedrock_chat.errors import UnsupportedModelError
from bedrock_chat.model_registry import VendorFamily, classify_model, resolve_candidate
from bedrock_chat.request_builder import build_request
from bedrock_chat.schemas import ChatMessage, InvocationOptions

PROFILE_ARN = (
    "arn:aws:bedrock:us-east-1:123456789012:inference-profile/"
    "us.anthropic.claude-3-5-sonnet-20241022-v2:0"
)
MESSAGES = [ChatMessage(role="user", content="hi")]


class ClassifyModelTests(unittest.TestCase):
    def test_known_families(self) -> None:
        cases = {
            "anthropic.claude-v2": VendorFamily.LEGACY_CLAUDE,
            "anthropic.claude-v2:1": VendorFamily.LEGACY_CLAUDE,
            "anthropic.claude-instant-v1": VendorFamily.LEGACY_CLAUDE,
            "anthropic.claude-3-haiku-20240307-v1:0": VendorFamily.MODERN_CLAUDE,
            PROFILE_ARN: VendorFamily.INFERENCE_PROFILE,
            "amazon.titan-text-express-v1": VendorFamily.TITAN,
            "cohere.command-text-v14": VendorFamily.COHERE,
            "meta.llama2-13b-chat-v1": VendorFamily.LLAMA,
        }
        for model_id, family in cases.items():
            with self.subTest(model_id=model_id):
                self.assertIs(classify_model(model_id), family)

    def test_inference_profile_wins_over_legacy_claude_marker(self) -> None:
        arn = "arn:aws:bedrock:us-east-1:1:application-inference-profile/claude-v2"

        candidate = resolve_candidate(arn)

        self.assertIs(candidate.family, VendorFamily.INFERENCE_PROFILE)
        self.assertTrue(candidate.is_inference_profile)

    def test_unknown_model_raises(self) -> None:
        with self.assertRaisesRegex(UnsupportedModelError, "unknown.model-x"):
            classify_model("unknown.model-x")


class BuildRequestTests(unittest.TestCase):
    def test_legacy_claude_body_uses_defaults(self) -> None:
        request = build_request(
            resolve_candidate("anthropic.claude-v2"), MESSAGES, InvocationOptions()
        )

        self.assertEqual(request.model_id, "anthropic.claude-v2")
        self.assertEqual(
            request.body,
            {
                "prompt": "\n\nHuman: hi\n\nAssistant:",
                "max_tokens_to_sample": 2048,
                "temperature": 0.7,
                "stop_sequences": ["\n\nHuman:", "\n\nAssistant:"],
            },
        )

    def test_modern_claude_body_includes_system_field(self) -> None:
        request = build_request(
            resolve_candidate("anthropic.claude-3-haiku-20240307-v1:0"),
            MESSAGES,
            InvocationOptions(system_prompt="Be brief."),
        )

        self.assertEqual(
            request.body,
            {
                "anthropic_version": "bedrock-2023-05-31",
                "max_tokens": 4096,
                "messages": [{"role": "user", "content": "hi"}],
                "temperature": 0.7,
                "system": "Be brief.",
            },
        )

    def test_inference_profile_uses_messages_api_without_system(self) -> None:
        request = build_request(resolve_candidate(PROFILE_ARN), MESSAGES, InvocationOptions())

        self.assertEqual(request.family, VendorFamily.INFERENCE_PROFILE)
        self.assertNotIn("system", request.body)
        self.assertEqual(request.body["messages"], [{"role": "user", "content": "hi"}])

    def test_titan_body_fixes_top_p(self) -> None:
        request = build_request(
            resolve_candidate("amazon.titan-text-lite-v1"),
            MESSAGES,
            InvocationOptions(max_tokens=100, temperature=0.2),
        )

        self.assertEqual(
            request.body,
            {
                "inputText": "User: hi\nAssistant:",
                "textGenerationConfig": {"maxTokenCount": 100, "temperature": 0.2, "topP": 0.9},
            },
        )

    def test_cohere_body(self) -> None:
        request = build_request(
            resolve_candidate("cohere.command-text-v14"), MESSAGES, InvocationOptions()
        )

        self.assertEqual(
            request.body,
            {"prompt": "USER: hi\nASSISTANT:", "max_tokens": 2048, "temperature": 0.7},
        )

    def test_llama_body(self) -> None:
        request = build_request(
            resolve_candidate("meta.llama2-13b-chat-v1"), MESSAGES, InvocationOptions()
        )

        self.assertEqual(
            request.body,
            {"prompt": "<s>[INST] hi [/INST]", "max_gen_len": 2048, "temperature": 0.7},
        )

    def test_explicit_zero_temperature_is_kept(self) -> None:
        request = build_request(
            resolve_candidate("cohere.command-text-v14"),
            MESSAGES,
            InvocationOptions(temperature=0),
        )

        self.assertEqual(request.body["temperature"], 0)

    def test_encode_renders_json(self) -> None:
        request = build_request(
            resolve_candidate("meta.llama2-13b-chat-v1"), MESSAGES, InvocationOptions()
        )

        self.assertEqual(json.loads(request.encode()), request.body)


if __name__ == "__main__":
    unittest.main()
