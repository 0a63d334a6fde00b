"""Request and verdict models exchanged with the reasoning oracle."""

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Accepts and emits the camelCase names used on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ImpactType(str, Enum):
    """Kinds of impact a change can have on a dependent module."""

    SYNTACTIC_BREAK = "SYNTACTIC_BREAK"
    SEMANTIC_BREAK = "SEMANTIC_BREAK"
    PERFORMANCE_RISK = "PERFORMANCE_RISK"
    RUNTIME_RISK = "RUNTIME_RISK"
    NO_IMPACT = "NO_IMPACT"


class Priority(str, Enum):
    """Test priority."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @classmethod
    def from_risk(cls, risk_score: int) -> "Priority":
        if risk_score >= 8:
            return cls.HIGH
        if risk_score >= 5:
            return cls.MEDIUM
        return cls.LOW


class TestCase(_CamelModel):
    """A test the oracle recommends for one module."""

    __test__ = False  # not a pytest class

    module_name: str
    test_type: str = Field("Integration Test")
    focus: str = Field("")


class TestStrategy(_CamelModel):
    """Recommended regression scope for a change."""

    __test__ = False

    scope: str = Field("")
    priority: Priority = Field(Priority.MEDIUM)
    test_cases: list[TestCase] = Field(
        default_factory=list,
        validation_alias=AliasChoices("testCases", "testCasesRequired", "test_cases"),
    )

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value


class ImpactedModule(_CamelModel):
    """One module the oracle believes is affected."""

    module_name: str
    impact_type: ImpactType
    description: str = Field("")

    @field_validator("impact_type", mode="before")
    @classmethod
    def _normalize_impact_type(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper().replace(" ", "_")
        return value


class ImpactVerdict(_CamelModel):
    """Risk and impact verdict for one change."""

    analysis_id: str
    risk_score: int = Field(..., ge=1, le=10)
    reasoning: str
    test_strategy: TestStrategy | None = Field(None)
    impacted_modules: list[ImpactedModule] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "ImpactVerdict":
        """Sentinel verdict carried by failed or no-change reports."""
        return cls.model_construct(
            analysisId="",
            riskScore=0,
            reasoning="",
            testStrategy=None,
            impactedModules=[],
        )

    @property
    def is_empty(self) -> bool:
        return not self.analysis_id and self.risk_score == 0


class OracleRequest(BaseModel):
    """Context bundle for one change."""

    model_config = ConfigDict(frozen=True)

    diff_text: str
    context_snippets: str = ""
    target_member_name: str
