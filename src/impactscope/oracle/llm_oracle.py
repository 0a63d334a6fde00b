"""Reasoning oracle backed by an LLM provider."""

import json
import logging

from pydantic import ValidationError

from impactscope.core.config import LLMConfig
from impactscope.core.exceptions import LLMConnectionError, LLMError, OracleInvocationFailure
from impactscope.llm.prompts import SYSTEM_PROMPT, format_impact_analysis
from impactscope.llm.router import LLMRouter
from impactscope.oracle.base import ReasoningOracle
from impactscope.oracle.models import ImpactVerdict, OracleRequest

logger = logging.getLogger(__name__)


def clean_json_response(text: str) -> str:
    """Strip markdown code fences around a JSON payload."""
    text = text.strip()
    if text.startswith("```json"):
        text = text[len("```json"):].strip()
    elif text.startswith("```"):
        text = text[3:].strip()
    if text.endswith("```"):
        text = text[:-3].strip()
    return text


def parse_verdict(text: str, member: str) -> ImpactVerdict:
    """
    Parse and validate a raw oracle response.

    Raises:
        OracleInvocationFailure: If the text is not a valid verdict
    """
    try:
        data = json.loads(clean_json_response(text))
    except json.JSONDecodeError as e:
        raise OracleInvocationFailure(member, "malformed_response", f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise OracleInvocationFailure(member, "malformed_response", "expected a JSON object")

    try:
        return ImpactVerdict.model_validate(data)
    except ValidationError as e:
        raise OracleInvocationFailure(
            member, "malformed_response", f"{e.error_count()} schema error(s): {e.errors()[0]['msg']}"
        ) from e


class LLMReasoningOracle(ReasoningOracle):
    """Asks an LLM for a structured impact verdict."""

    def __init__(self, config: LLMConfig, router: LLMRouter | None = None) -> None:
        """
        Initialize the oracle.

        Args:
            config: LLM configuration
            router: Router to use instead of one built from config
        """
        self.config = config
        self.router = router or LLMRouter(config)

    async def analyze(self, request: OracleRequest) -> ImpactVerdict:
        member = request.target_member_name
        prompt = format_impact_analysis(request.diff_text, request.context_snippets, member)

        try:
            text = await self.router.complete(prompt, system=SYSTEM_PROMPT, json_mode=True)
        except LLMConnectionError as e:
            raise OracleInvocationFailure(member, "connection_error", str(e)) from e
        except LLMError as e:
            raise OracleInvocationFailure(member, "provider_error", str(e)) from e

        verdict = parse_verdict(text, member)
        logger.debug(
            "Verdict for %s: risk %d, %d impacted module(s)",
            member,
            verdict.risk_score,
            len(verdict.impacted_modules),
        )
        return verdict
