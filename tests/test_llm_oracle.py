"""Tests for the LLM-backed reasoning oracle and the provider router."""

import json
import threading
from unittest.mock import AsyncMock, MagicMock

import pytest

from impactscope.core.config import LLMConfig
from impactscope.core.exceptions import LLMConnectionError, LLMError, OracleInvocationFailure
from impactscope.llm.prompts import NO_CALLERS_CONTEXT, format_impact_analysis
from impactscope.llm.router import LLMRouter
from impactscope.oracle.llm_oracle import LLMReasoningOracle, clean_json_response, parse_verdict
from impactscope.oracle.models import ImpactType, OracleRequest, Priority

VERDICT = {
    "analysisId": "run-1",
    "riskScore": 8,
    "reasoning": "generateData now returns Integer; callers assign it to String.",
    "testStrategy": {
        "scope": "Integration",
        "priority": "high",
        "testCases": [
            {"moduleName": "com.example.client.Consumer", "testType": "Unit Test", "focus": "consume()"},
        ],
    },
    "impactedModules": [
        {
            "moduleName": "com.example.client.Consumer",
            "impactType": "SYNTACTIC_BREAK",
            "description": "Assignment to String no longer compiles.",
        }
    ],
}


@pytest.fixture
def request_bundle() -> OracleRequest:
    return OracleRequest(
        diff_text="// TYPE: METHOD_MODIFIED\n// MEMBER: generateData",
        context_snippets="// Module: com.example.client.Consumer - Method: consume",
        target_member_name="generateData",
    )


def make_oracle(response=None, side_effect=None) -> tuple[LLMReasoningOracle, MagicMock]:
    router = MagicMock()
    router.complete = AsyncMock(return_value=response, side_effect=side_effect)
    return LLMReasoningOracle(LLMConfig(), router=router), router


def test_clean_json_response_strips_fences():
    """Test markdown fences around JSON are removed."""
    assert clean_json_response('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert clean_json_response('```\n{"a": 1}\n```') == '{"a": 1}'
    assert clean_json_response(' {"a": 1} ') == '{"a": 1}'


def test_parse_verdict_normalizes_enums():
    """Test lower-case priority values are accepted."""
    verdict = parse_verdict(json.dumps(VERDICT), "generateData")

    assert verdict.risk_score == 8
    assert verdict.test_strategy.priority == Priority.HIGH
    assert verdict.test_strategy.test_cases[0].module_name == "com.example.client.Consumer"
    assert verdict.impacted_modules[0].impact_type == ImpactType.SYNTACTIC_BREAK


def test_parse_verdict_accepts_legacy_test_case_key():
    """Test the testCasesRequired spelling is accepted."""
    data = dict(VERDICT)
    data["testStrategy"] = {"scope": "Unit", "priority": "LOW", "testCasesRequired": [{"moduleName": "m"}]}

    verdict = parse_verdict(json.dumps(data), "generateData")

    assert len(verdict.test_strategy.test_cases) == 1


@pytest.mark.parametrize(
    "text",
    [
        "I think the risk is moderate.",
        json.dumps([VERDICT]),
        json.dumps({**VERDICT, "riskScore": 11}),
        json.dumps({"reasoning": "missing fields"}),
    ],
)
def test_parse_verdict_rejects_malformed(text: str):
    """Test non-JSON and schema-invalid responses raise OracleInvocationFailure."""
    with pytest.raises(OracleInvocationFailure) as exc_info:
        parse_verdict(text, "generateData")

    assert exc_info.value.category == "malformed_response"
    assert exc_info.value.member == "generateData"


@pytest.mark.asyncio
async def test_analyze_accepts_fenced_json(request_bundle: OracleRequest):
    """Test a fenced JSON answer becomes a verdict."""
    oracle, router = make_oracle(response="```json\n" + json.dumps(VERDICT) + "\n```")

    verdict = await oracle.analyze(request_bundle)

    assert verdict.analysis_id == "run-1"
    prompt = router.complete.await_args.args[0]
    assert "generateData" in prompt
    assert "com.example.client.Consumer" in prompt
    assert router.complete.await_args.kwargs["json_mode"] is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, category",
    [
        (LLMConnectionError("refused"), "connection_error"),
        (LLMError("quota exceeded"), "provider_error"),
    ],
)
async def test_analyze_wraps_provider_errors(request_bundle: OracleRequest, error, category):
    """Test provider errors become OracleInvocationFailure."""
    oracle, _ = make_oracle(side_effect=error)

    with pytest.raises(OracleInvocationFailure) as exc_info:
        await oracle.analyze(request_bundle)

    assert exc_info.value.category == category


def test_prompt_uses_placeholder_without_callers():
    """Test the prompt says so when no callers were found."""
    prompt = format_impact_analysis("// diff", "", "generateData")

    assert NO_CALLERS_CONTEXT in prompt
    assert '"riskScore"' in prompt


def _provider(name: str, available: bool, response: str | None = None, error: Exception | None = None):
    provider = MagicMock()
    provider.name = name
    provider.is_available.return_value = available
    provider.complete = AsyncMock(return_value=response, side_effect=error)
    return provider


@pytest.mark.asyncio
async def test_router_uses_preferred_provider():
    """Test the preferred provider answers when available."""
    router = LLMRouter(LLMConfig(preferred_provider="claude"))
    router._claude = _provider("claude", True, "from claude")
    router._ollama = _provider("ollama", True, "from ollama")

    assert await router.complete("prompt") == "from claude"
    router._ollama.complete.assert_not_awaited()


@pytest.mark.asyncio
async def test_router_falls_back_on_connection_error():
    """Test a connection error on the preferred provider uses the fallback."""
    router = LLMRouter(LLMConfig(preferred_provider="ollama"))
    router._ollama = _provider("ollama", True, error=LLMConnectionError("down"))
    router._claude = _provider("claude", True, "from claude")

    assert await router.complete("prompt", json_mode=True) == "from claude"


@pytest.mark.asyncio
async def test_router_without_providers_raises():
    """Test an error is raised when nothing is available."""
    router = LLMRouter(LLMConfig(fallback_enabled=False))
    router._claude = _provider("claude", False)

    with pytest.raises(LLMError):
        await router.complete("prompt")


@pytest.mark.asyncio
async def test_router_probes_availability_off_the_event_loop():
    """Test blocking availability checks run in a worker thread."""
    loop_thread = threading.get_ident()
    probe_threads: list[int] = []

    router = LLMRouter(LLMConfig(preferred_provider="ollama"))
    router._ollama = _provider("ollama", True, "from ollama")
    router._ollama.is_available.side_effect = lambda: probe_threads.append(threading.get_ident()) or True

    assert await router.complete("prompt") == "from ollama"
    assert probe_threads and loop_thread not in probe_threads
