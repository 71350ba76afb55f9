"""LangGraph-based model fallback loop.

The graph alternates between two nodes until a model answers or the fallback
list runs out::

    START -> attempt -> (response?) END
                  \\-> select_next -> (next id?) attempt | END
"""

from collections.abc import Mapping, Sequence
from typing import Any, Literal, NotRequired, TypedDict, cast

from langgraph.graph import END, START, StateGraph

from bedrock_chat.config import AdapterConfig
from bedrock_chat.errors import ModelAttempt, TransportError
from bedrock_chat.message_mappers import format_messages_for_bedrock
from bedrock_chat.providers.base import ModelBackend
from bedrock_chat.schemas import ChatMessage, InvocationOptions, NormalizedResponse

from .base import (
    ModelInvoker,
    attempt_model,
    duplicate_attempt_error,
    exhausted,
    log_failed_attempt,
    resolve_initial_model_id,
    select_next_model_id,
)


class FallbackGraphState(TypedDict):
    messages: list[ChatMessage]
    options: InvocationOptions
    model_id: str | None
    attempted: list[str]
    attempts: list[ModelAttempt]
    response: NotRequired[NormalizedResponse]


class LangGraphFallbackInvoker(ModelInvoker):
    def __init__(self, backend: ModelBackend, config: AdapterConfig) -> None:
        self._backend = backend
        self.config = config
        graph = StateGraph(FallbackGraphState)
        graph.add_node("attempt", self._attempt)
        graph.add_node("select_next", self._select_next)
        graph.add_edge(START, "attempt")
        graph.add_conditional_edges("attempt", self._after_attempt, ["select_next", END])
        graph.add_conditional_edges("select_next", self._after_select, ["attempt", END])
        self._graph = graph.compile()

    def _attempt(self, state: FallbackGraphState) -> dict[str, Any]:
        model_id = cast(str, state["model_id"])
        attempted = state["attempted"]
        if model_id in attempted:
            error: Exception = duplicate_attempt_error(model_id)
        else:
            attempted = [*attempted, model_id]
            try:
                response = attempt_model(
                    self._backend, model_id, state["messages"], state["options"]
                )
                return {"attempted": attempted, "response": response}
            except TransportError as e:
                error = e

        attempts = [*state["attempts"], ModelAttempt(model_id=model_id, error=error)]
        log_failed_attempt(attempts[-1], len(attempts))
        return {"attempted": attempted, "attempts": attempts}

    def _select_next(self, state: FallbackGraphState) -> dict[str, Any]:
        return {"model_id": select_next_model_id(self.config.fallback_models, state["attempted"])}

    @staticmethod
    def _after_attempt(state: FallbackGraphState) -> Literal["select_next", "__end__"]:
        return END if state.get("response") is not None else "select_next"

    @staticmethod
    def _after_select(state: FallbackGraphState) -> Literal["attempt", "__end__"]:
        return END if state["model_id"] is None else "attempt"

    def invoke(
        self,
        messages: Sequence[ChatMessage | Mapping[str, Any]],
        options: InvocationOptions | None = None,
    ) -> NormalizedResponse:
        options = options or InvocationOptions()
        initial_state: FallbackGraphState = {
            "messages": format_messages_for_bedrock(messages),
            "options": options,
            "model_id": resolve_initial_model_id(self.config, options),
            "attempted": [],
            "attempts": [],
        }
        # Two graph steps per candidate, plus the initial id when it is not in the list.
        recursion_limit = 2 * (len(self.config.fallback_models) + 1) + 2
        result = cast(
            "FallbackGraphState",
            self._graph.invoke(initial_state, config={"recursion_limit": recursion_limit}),
        )
        response = result.get("response")
        if response is None:
            attempts = result["attempts"]
            raise exhausted(attempts) from attempts[-1].error
        return response
