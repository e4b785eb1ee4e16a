from __future__ import annotations

import json
import threading
import time
from types import SimpleNamespace
from typing import List, Optional

import pytest

from seo_insight.adapters.gemini_invoker import GeminiModelInvoker
from seo_insight.ports.llm import ModelInvoker
from seo_insight.domain.errors import ModelInvocationError
from seo_insight.domain.models import AnalysisState
from seo_insight.services.keyword_analysis import GENERIC_ERROR_MESSAGE, KeywordAnalysisService
from seo_insight.services.prompt_builder import AnalysisStage, build_prompt
from seo_insight.services.url_normalization import SchemePrefixUrlNormalizer


# -----------------------------
# Test doubles
# -----------------------------
class FakeModelInvoker(ModelInvoker):
    """Replays scripted answers; an Exception in the script is raised instead."""

    def __init__(self, answers: list):
        self.answers = list(answers)
        self.prompts: List[str] = []
        self.grounding: List[bool] = []
        self.states_seen: List[AnalysisState] = []
        self.service: Optional[KeywordAnalysisService] = None
        self.on_call = None

    def invoke(self, prompt: str, enable_search_grounding: bool = True) -> str:
        self.prompts.append(prompt)
        self.grounding.append(enable_search_grounding)
        if self.service is not None:
            self.states_seen.append(self.service.state)
        if self.on_call is not None:
            self.on_call()
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer


class FakeModels:
    def __init__(self, text):
        self.text = text
        self.calls = 0

    def generate_content(self, **kwargs):
        self.calls += 1
        return SimpleNamespace(text=self.text)


# -----------------------------
# Helpers
# -----------------------------
def fenced_records(prefix: str, n: int) -> str:
    items = [
        {"keyword": f"{prefix} keyword {i}", "metric": "Alto", "details": f"motivo {i}"}
        for i in range(n)
    ]
    return "```json\n" + json.dumps(items, ensure_ascii=False) + "\n```"


def make_service(invoker: ModelInvoker, **kwargs) -> KeywordAnalysisService:
    service = KeywordAnalysisService(
        model_invoker=invoker,
        url_normalizer=SchemePrefixUrlNormalizer(default_scheme="https"),
        **kwargs,
    )
    if isinstance(invoker, FakeModelInvoker):
        invoker.service = service
    return service


def wait_until_settled(service: KeywordAnalysisService, timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while service.state.is_active and time.monotonic() < deadline:
        time.sleep(0.01)
    assert not service.state.is_active, "run did not finish in time"


# -----------------------------
# Scenarios
# -----------------------------
def test_initial_state_is_idle():
    service = make_service(FakeModelInvoker([]))
    assert service.state == AnalysisState.IDLE
    assert service.run.url == ""
    assert service.run.current_keywords == ()
    assert service.run.potential_keywords == ()
    assert service.run.error is None


def test_full_run_reaches_complete():
    invoker = FakeModelInvoker([fenced_records("current", 20), fenced_records("potential", 20)])
    service = make_service(invoker)

    assert service.submit("example.com") is True

    assert invoker.states_seen == [AnalysisState.ANALYZING_CURRENT, AnalysisState.ANALYZING_POTENTIAL]
    assert service.state == AnalysisState.COMPLETE
    assert len(service.run.current_keywords) == 20
    assert len(service.run.potential_keywords) == 20
    assert service.run.current_keywords[0].keyword == "current keyword 0"
    assert service.run.potential_keywords[19].keyword == "potential keyword 19"
    assert service.run.error is None


def test_prompts_follow_stage_order_and_use_grounding():
    invoker = FakeModelInvoker([fenced_records("c", 1), fenced_records("p", 1)])
    service = make_service(invoker, keyword_count=20)

    service.submit("example.com")

    assert invoker.prompts == [
        build_prompt(AnalysisStage.CURRENT_TRAFFIC, "https://example.com", 20),
        build_prompt(AnalysisStage.POTENTIAL_GAP, "https://example.com", 20),
    ]
    assert invoker.grounding == [True, True]


def test_grounding_flag_is_configurable():
    invoker = FakeModelInvoker([fenced_records("c", 1), fenced_records("p", 1)])
    service = make_service(invoker, search_grounding=False)

    service.submit("example.com")

    assert invoker.grounding == [False, False]


def test_empty_stage_one_answer_stops_before_stage_two():
    models = FakeModels(text="")
    invoker = GeminiModelInvoker(api_key="k", model="gemini-2.5-flash", client=SimpleNamespace(models=models))
    service = make_service(invoker)

    assert service.submit("example.com") is True

    assert service.state == AnalysisState.ERROR
    assert service.run.current_keywords == ()
    assert service.run.potential_keywords == ()
    assert service.run.error == GENERIC_ERROR_MESSAGE
    assert models.calls == 1


def test_url_is_normalized_before_prompting():
    invoker = FakeModelInvoker([fenced_records("c", 1), fenced_records("p", 1)])
    service = make_service(invoker)

    service.submit("bad site")

    assert service.run.url == "https://bad site"
    assert all("https://bad site" in p for p in invoker.prompts)


def test_stage_two_failure_keeps_stage_one_records():
    invoker = FakeModelInvoker([fenced_records("c", 3), "not json"])
    service = make_service(invoker)

    service.submit("example.com")

    assert service.state == AnalysisState.ERROR
    assert len(service.run.current_keywords) == 3
    assert service.run.potential_keywords == ()
    assert service.run.error == GENERIC_ERROR_MESSAGE


def test_parse_failure_in_stage_one_is_an_error():
    invoker = FakeModelInvoker(['{"keyword": "not an array"}'])
    service = make_service(invoker)

    service.submit("example.com")

    assert service.state == AnalysisState.ERROR
    assert len(invoker.prompts) == 1


def test_transport_failure_is_an_error():
    invoker = FakeModelInvoker([ModelInvocationError("boom")])
    service = make_service(invoker)

    service.submit("example.com")

    assert service.state == AnalysisState.ERROR
    assert service.run.error == GENERIC_ERROR_MESSAGE


def test_empty_url_is_a_no_op():
    invoker = FakeModelInvoker([])
    service = make_service(invoker)

    assert service.submit("   ") is False
    assert service.state == AnalysisState.IDLE
    assert invoker.prompts == []


@pytest.mark.parametrize("stage_index", [0, 1])
def test_submit_while_analyzing_is_ignored(stage_index):
    invoker = FakeModelInvoker([fenced_records("c", 2), fenced_records("p", 2)])
    service = make_service(invoker)
    nested_results = []

    def resubmit():
        if len(invoker.prompts) - 1 == stage_index:
            nested_results.append(service.submit("other.com"))

    invoker.on_call = resubmit

    assert service.submit("example.com") is True

    assert nested_results == [False]
    assert len(invoker.prompts) == 2
    assert service.run.url == "https://example.com"
    assert service.state == AnalysisState.COMPLETE


def test_new_submit_after_error_resets_run():
    invoker = FakeModelInvoker([fenced_records("c", 2), "garbage", fenced_records("c2", 1), fenced_records("p2", 1)])
    service = make_service(invoker)

    service.submit("first.com")
    assert service.state == AnalysisState.ERROR

    service.submit("second.com")

    assert service.state == AnalysisState.COMPLETE
    assert service.run.url == "https://second.com"
    assert service.run.error is None
    assert [r.keyword for r in service.run.current_keywords] == ["c2 keyword 0"]
    assert [r.keyword for r in service.run.potential_keywords] == ["p2 keyword 0"]


def test_new_submit_after_complete_replaces_run():
    invoker = FakeModelInvoker([
        fenced_records("a", 2), fenced_records("b", 2),
        ModelInvocationError("down"),
    ])
    service = make_service(invoker)

    service.submit("first.com")
    first_run = service.run
    assert service.state == AnalysisState.COMPLETE

    service.submit("second.com")

    assert service.state == AnalysisState.ERROR
    assert service.run is not first_run
    assert service.run.current_keywords == ()
    assert service.run.potential_keywords == ()
    assert len(first_run.current_keywords) == 2


def test_submit_async_runs_in_background_and_blocks_overlap():
    release = threading.Event()
    invoker = FakeModelInvoker([fenced_records("c", 2), fenced_records("p", 2)])
    invoker.on_call = lambda: release.wait(timeout=5)
    service = make_service(invoker)

    assert service.submit_async("example.com") is True
    assert service.state == AnalysisState.ANALYZING_CURRENT
    assert service.submit_async("other.com") is False

    release.set()
    wait_until_settled(service)

    assert service.state == AnalysisState.COMPLETE
    assert service.run.url == "https://example.com"
    assert len(service.run.potential_keywords) == 2


def test_unexpected_failure_in_background_moves_to_error():
    invoker = FakeModelInvoker([RuntimeError("unexpected"), fenced_records("c", 1), fenced_records("p", 1)])
    service = make_service(invoker)

    assert service.submit_async("example.com") is True
    wait_until_settled(service)

    assert service.state == AnalysisState.ERROR
    assert service.run.error == GENERIC_ERROR_MESSAGE
    assert len(invoker.prompts) == 1

    assert service.submit("example.com") is True
    assert service.state == AnalysisState.COMPLETE


def test_deeply_nested_answer_ends_in_error_not_stuck():
    invoker = FakeModelInvoker(["[" * 100000 + "]" * 100000])
    service = make_service(invoker)

    assert service.submit_async("example.com") is True
    wait_until_settled(service)

    assert service.state == AnalysisState.ERROR
    assert service.run.current_keywords == ()


def test_snapshot_is_consistent_pair():
    invoker = FakeModelInvoker([fenced_records("c", 1), fenced_records("p", 1)])
    service = make_service(invoker)
    service.submit("example.com")

    state, run = service.snapshot()
    assert state == AnalysisState.COMPLETE
    assert run is service.run
