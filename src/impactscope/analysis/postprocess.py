"""Condensed, presentation-ready views of aggregated reports."""

import logging

from pydantic import BaseModel, Field

from impactscope.analysis.models import AggregatedReport, ChangeKind, ReportStatus
from impactscope.core.constants import FAILED_SUFFIX, REASONING_SUMMARY_CHARS
from impactscope.oracle.models import ImpactedModule, ImpactType, Priority, TestCase, TestStrategy

logger = logging.getLogger(__name__)


class ConciseReport(BaseModel):
    """Summary of one aggregated report."""

    changed_file: str
    changed_member: str
    member_type: str = Field(..., description="METHOD, FIELD, TYPE, METADATA or UNKNOWN")
    change_kind: str | None = Field(None)
    status: ReportStatus
    risk_score: int = Field(0)
    priority: Priority | None = Field(None)
    reasoning: str = Field("")
    impacted_modules: list[ImpactedModule] = Field(default_factory=list)
    test_strategy: TestStrategy | None = Field(None)
    caller_files: list[str] = Field(default_factory=list)
    error: str | None = Field(None)


def trim_reasoning(text: str, limit: int = REASONING_SUMMARY_CHARS) -> str:
    """Cut reasoning at the last sentence end within *limit* characters."""
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    cut = text[:limit]
    end = cut.rfind(". ")
    if end > limit // 2:
        return cut[: end + 1]
    return cut.rstrip() + "..."


def guess_member_type(report: AggregatedReport) -> str:
    """Best guess of the changed member's kind."""
    change = report.change
    if change is not None:
        if change.change_kind == ChangeKind.METADATA or change.member_kind is None:
            return "METADATA"
        return change.member_kind.name

    name = report.changed_member.removesuffix(FAILED_SUFFIX)
    if not name or " " in name:
        return "UNKNOWN"
    if "." in name or (name[0].isupper() and not name.isupper()):
        return "TYPE"
    if name.isupper():
        return "FIELD"
    return "METHOD"


def fallback_test_strategy(member: str, risk_score: int, modules: list[ImpactedModule]) -> TestStrategy:
    """Derive a test strategy when the oracle did not provide one."""
    cases = [
        TestCase(
            module_name=module.module_name,
            test_type="Unit Test" if module.impact_type == ImpactType.SYNTACTIC_BREAK else "Integration Test",
            focus=module.description or f"Behaviour of {module.module_name} after the change to {member}",
        )
        for module in modules
        if module.impact_type != ImpactType.NO_IMPACT
    ]
    return TestStrategy(
        scope=f"Regression tests for callers of {member}" if cases else f"Unit tests for {member}",
        priority=Priority.from_risk(risk_score),
        test_cases=cases,
    )


def summarize_report(report: AggregatedReport, changed_file_fqcn: str) -> ConciseReport:
    """Condense one report."""
    change = report.change
    member = report.changed_member or changed_file_fqcn
    base = {
        "changed_file": change.file_id if change else changed_file_fqcn,
        "changed_member": member,
        "member_type": guess_member_type(report),
        "change_kind": change.change_kind.name if change else None,
        "status": report.status,
        "caller_files": list(report.caller_files),
    }

    if report.status != ReportStatus.ANALYZED:
        return ConciseReport(**base, error=report.error_message)

    verdict = report.verdict
    strategy = verdict.test_strategy or fallback_test_strategy(
        member, verdict.risk_score, verdict.impacted_modules
    )
    return ConciseReport(
        **base,
        risk_score=verdict.risk_score,
        priority=strategy.priority,
        reasoning=trim_reasoning(verdict.reasoning),
        impacted_modules=list(verdict.impacted_modules),
        test_strategy=strategy,
    )


def summarize_reports(reports: list[AggregatedReport], changed_file_fqcn: str) -> list[ConciseReport]:
    """
    Condense aggregated reports, highest risk first.

    Args:
        reports: Reports returned by the pipeline
        changed_file_fqcn: FQCN of the analyzed file, used when a report
            names no member

    Returns:
        One ConciseReport per input report
    """
    summaries = [summarize_report(report, changed_file_fqcn) for report in reports]
    summaries.sort(key=lambda s: (s.status != ReportStatus.ANALYZED, -s.risk_score, s.changed_member))
    logger.debug("Summarized %d report(s) for %s", len(summaries), changed_file_fqcn)
    return summaries
