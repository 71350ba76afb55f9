import json
import unittest
from unittest.mock import Mock

from bedrock_chat.config import AdapterConfig
from bedrock_chat.errors import TransportError
from bedrock_chat.schemas import ModelSummary
from bedrock_chat.services.diagnostics import ModelDiagnostics

CONFIG = AdapterConfig(
    fallback_models=("anthropic.claude-v2", "amazon.titan-text-lite-v1", "meta.llama2-13b-chat-v1")
)


class ModelDiagnosticsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.backend = Mock()
        self.catalog = Mock()
        self.catalog.list_models.return_value = [ModelSummary(model_id="anthropic.claude-v2")]

    def test_checks_every_fallback_candidate_with_minimal_request(self) -> None:
        def invoke_model(model_id: str, body: str, content_type: str, accept: str) -> bytes:
            if model_id == "amazon.titan-text-lite-v1":
                raise TransportError(model_id, "denied", error_code="AccessDeniedException")
            return b"{}"

        self.backend.invoke_model.side_effect = invoke_model

        report = ModelDiagnostics(self.backend, self.catalog, CONFIG).run()

        self.assertTrue(report.list_models.success)
        self.assertEqual(report.list_models.message, "Found 1 models")
        self.assertEqual(list(report.model_test_results), list(CONFIG.fallback_models))
        self.assertTrue(report.model_test_results["anthropic.claude-v2"].success)
        failed = report.model_test_results["amazon.titan-text-lite-v1"]
        self.assertFalse(failed.success)
        self.assertEqual(failed.error_code, "AccessDeniedException")

        bodies = {
            call.args[0]: json.loads(call.args[1])
            for call in self.backend.invoke_model.call_args_list
        }
        self.assertEqual(
            bodies["anthropic.claude-v2"]["prompt"],
            "\n\nHuman: Hello, are you available?\n\nAssistant:",
        )
        self.assertEqual(bodies["anthropic.claude-v2"]["max_tokens_to_sample"], 10)
        self.assertEqual(bodies["anthropic.claude-v2"]["temperature"], 0)
        self.assertEqual(
            bodies["meta.llama2-13b-chat-v1"]["prompt"],
            "<s>[INST] Hello, are you available? [/INST]",
        )

    def test_catalog_failure_is_reported_not_raised(self) -> None:
        self.catalog.list_models.side_effect = RuntimeError("AccessDenied")
        self.backend.invoke_model.return_value = b"{}"

        report = ModelDiagnostics(self.backend, self.catalog, CONFIG).run()

        self.assertFalse(report.list_models.success)
        self.assertEqual(report.list_models.message, "AccessDenied")
        self.assertEqual(report.available_models, [])
        self.assertEqual(len(report.model_test_results), 3)

    def test_unexpected_backend_exception_is_reported_per_candidate(self) -> None:
        def invoke_model(model_id: str, body: str, content_type: str, accept: str) -> bytes:
            if model_id == "amazon.titan-text-lite-v1":
                raise RuntimeError("boom")
            return b"{}"

        self.backend.invoke_model.side_effect = invoke_model

        report = ModelDiagnostics(self.backend, self.catalog, CONFIG).run()

        self.assertEqual(list(report.model_test_results), list(CONFIG.fallback_models))
        failed = report.model_test_results["amazon.titan-text-lite-v1"]
        self.assertFalse(failed.success)
        self.assertEqual(failed.message, "boom")
        self.assertIsNone(failed.error_code)
        self.assertTrue(report.model_test_results["meta.llama2-13b-chat-v1"].success)

    def test_config_echo_hides_profile_arn(self) -> None:
        config = AdapterConfig(inference_profile_arn="arn:aws:bedrock:x:inference-profile/y")
        self.backend.invoke_model.return_value = b"{}"

        report = ModelDiagnostics(self.backend, self.catalog, config).run()

        dumped = report.model_dump(by_alias=True)
        self.assertTrue(dumped["config"]["hasInferenceProfile"])
        self.assertNotIn("arn:aws:bedrock", json.dumps(dumped["config"]))


if __name__ == "__main__":
    unittest.main()
