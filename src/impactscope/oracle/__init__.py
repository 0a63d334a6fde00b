"""Oracle module - verdict models and reasoning oracles."""

from impactscope.oracle.base import ReasoningOracle
from impactscope.oracle.llm_oracle import LLMReasoningOracle
from impactscope.oracle.models import (
    ImpactedModule,
    ImpactType,
    ImpactVerdict,
    OracleRequest,
    Priority,
    TestCase,
    TestStrategy,
)

__all__ = [
    "ReasoningOracle",
    "LLMReasoningOracle",
    "ImpactVerdict",
    "ImpactedModule",
    "ImpactType",
    "OracleRequest",
    "Priority",
    "TestCase",
    "TestStrategy",
]
