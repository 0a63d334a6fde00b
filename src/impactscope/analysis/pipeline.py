"""Orchestrates diffing, caller discovery and concurrent oracle calls."""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from impactscope.analysis.discovery import DependencyDiscovery, TextualCallDiscovery
from impactscope.analysis.models import AggregatedReport, CallerMatch, ChangeKind, ChangeRecord
from impactscope.analysis.structural_diff import StructuralDiffEngine
from impactscope.core.config import DiscoveryConfig, PipelineConfig
from impactscope.core.exceptions import MissingInput, OracleInvocationFailure, TargetNotFound
from impactscope.oracle.base import ReasoningOracle
from impactscope.oracle.models import ImpactVerdict, OracleRequest
from impactscope.sources.fqn import matches_target
from impactscope.sources.store import RepositoryStore

logger = logging.getLogger(__name__)


class AnalysisPipeline:
    """
    Runs one impact analysis for a modified file.

    The target is diffed once, each change record gets its own caller
    discovery over the original corpus, and the oracle is called for every
    record concurrently. Failures of a single oracle call are turned into a
    failed report; only invalid input or an unparsable target abort a run.
    """

    def __init__(
        self,
        store: RepositoryStore,
        oracle: ReasoningOracle,
        discovery: DependencyDiscovery | None = None,
        diff_engine: StructuralDiffEngine | None = None,
        config: PipelineConfig | None = None,
        discovery_config: DiscoveryConfig | None = None,
    ) -> None:
        """
        Initialize the pipeline.

        Args:
            store: Repository sources to analyze against
            oracle: Reasoning oracle producing verdicts
            discovery: Caller discovery strategy
            diff_engine: Structural diff engine
            config: Concurrency and timeout settings
            discovery_config: Context size settings
        """
        self.store = store
        self.oracle = oracle
        self.diff_engine = diff_engine or StructuralDiffEngine()
        self.discovery = discovery or TextualCallDiscovery(self.diff_engine.builder)
        self.config = config or PipelineConfig()
        self.discovery_config = discovery_config or DiscoveryConfig()

    async def run_analysis(
        self,
        selected_repository_id: str,
        compare_repository_ids: Sequence[str] | None,
        changed_file_content: str,
        target_file_name: str,
    ) -> list[AggregatedReport]:
        """
        Analyze the impact of replacing one file with new content.

        Args:
            selected_repository_id: Repository that contains the target file
            compare_repository_ids: Further repositories searched for callers
            changed_file_content: New text of the target file
            target_file_name: FQCN, simple class name or path of the target

        Returns:
            One report per change record, or a single no-change report.
            Order is not guaranteed.

        Raises:
            MissingInput: If a required argument is blank
            TargetNotFound: If the target cannot be resolved
            UnparsableSource: If either version of the target cannot be parsed
        """
        if not selected_repository_id or not selected_repository_id.strip():
            raise MissingInput("selected_repository_id")
        if not changed_file_content or not changed_file_content.strip():
            raise MissingInput("changed_file_content")
        if not target_file_name or not target_file_name.strip():
            raise MissingInput("target_file_name")

        repository_ids = self._repository_ids(selected_repository_id, compare_repository_ids)
        original = self.store.merged(repository_ids)
        target_id = self.resolve_target(target_file_name, original)
        logger.info("Analyzing %s across %d repository(ies)", target_id, len(repository_ids))

        modified = dict(original)
        modified[target_id] = changed_file_content
        modified = MappingProxyType(modified)

        records = self.diff_engine.diff_sources(target_id, original[target_id], modified[target_id])
        if not records:
            logger.info("No structural changes detected in %s", target_id)
            return [AggregatedReport.no_change()]

        prepared = []
        for record in records:
            callers = self._discover(target_id, record, original)
            prepared.append((record, self.build_request(record, callers), sorted(callers)))
        tasks = [self._analyze_change(record, request, callers) for record, request, callers in prepared]

        if self.config.max_concurrency:
            logger.debug("Dispatching %d oracle call(s), at most %d at a time", len(tasks), self.config.max_concurrency)
        reports = await asyncio.gather(*self._bounded(tasks))

        failed = sum(1 for report in reports if report.failed)
        logger.info("Analysis of %s finished: %d report(s), %d failed", target_id, len(reports), failed)
        return list(reports)

    def run_analysis_sync(
        self,
        selected_repository_id: str,
        compare_repository_ids: Sequence[str] | None,
        changed_file_content: str,
        target_file_name: str,
    ) -> list[AggregatedReport]:
        """Blocking wrapper around run_analysis for non-async callers."""
        return asyncio.run(
            self.run_analysis(
                selected_repository_id,
                compare_repository_ids,
                changed_file_content,
                target_file_name,
            )
        )

    @staticmethod
    def _repository_ids(selected: str, compare: Sequence[str] | None) -> list[str]:
        ids = [selected]
        for repo_id in compare or []:
            if repo_id and repo_id not in ids:
                ids.append(repo_id)
        return ids

    @staticmethod
    def resolve_target(target_file_name: str, corpus: Mapping[str, str]) -> str:
        """
        Resolve a user-supplied target name to a corpus FQCN.

        An exact FQCN wins; otherwise the first suffix or path match is used.

        Raises:
            TargetNotFound: If nothing in the corpus matches
        """
        name = target_file_name.strip()
        if name in corpus:
            return name

        candidates = [fqcn for fqcn in corpus if matches_target(fqcn, name)]
        if not candidates:
            raise TargetNotFound(name)
        if len(candidates) > 1:
            logger.warning("Target %s is ambiguous (%s); using %s", name, ", ".join(candidates), candidates[0])
        return candidates[0]

    def _discover(
        self,
        target_id: str,
        record: ChangeRecord,
        corpus: Mapping[str, str],
    ) -> dict[str, CallerMatch]:
        # Metadata changes have no member to search for
        if record.change_kind == ChangeKind.METADATA or not record.member_name:
            return {}
        try:
            return self.discovery.find_callers(target_id, record.member_name, corpus)
        except Exception as e:
            logger.warning("Caller discovery failed for %s: %s", record.display_name, e, exc_info=True)
            return {}

    def build_request(self, record: ChangeRecord, callers: Mapping[str, CallerMatch]) -> OracleRequest:
        """Bundle one change with its caller excerpts, capped in size."""
        limit = self.discovery_config.max_context_chars
        snippets: list[str] = []
        used = 0
        for file_id in sorted(callers):
            context = callers[file_id].to_context()
            if limit and used + len(context) > limit:
                logger.debug("Context limit reached for %s; dropping caller %s", record.display_name, file_id)
                continue
            snippets.append(context)
            used += len(context) + 2

        return OracleRequest(
            diff_text=record.render_diff(),
            context_snippets="\n\n".join(snippets),
            target_member_name=record.display_name,
        )

    def _bounded(self, coroutines: list) -> list:
        if not self.config.max_concurrency:
            return coroutines
        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async def run_with_limit(coroutine):
            async with semaphore:
                return await coroutine

        return [run_with_limit(coroutine) for coroutine in coroutines]

    async def _analyze_change(
        self,
        record: ChangeRecord,
        request: OracleRequest,
        caller_files: list[str],
    ) -> AggregatedReport:
        member = record.display_name
        timeout = self.config.oracle_timeout_seconds
        try:
            verdict = await asyncio.wait_for(self.oracle.analyze(request), timeout=timeout)
            if not isinstance(verdict, ImpactVerdict):
                raise OracleInvocationFailure(member, "malformed_response", "oracle returned no verdict")
        except OracleInvocationFailure as e:
            logger.error("Oracle failed for %s: %s", member, e, exc_info=True)
            return AggregatedReport.failure(record, e.category, e.detail, caller_files)
        except asyncio.TimeoutError:
            logger.error("Oracle timed out for %s after %ss", member, timeout)
            return AggregatedReport.failure(record, "timeout", f"no verdict within {timeout}s", caller_files)
        except Exception as e:
            logger.error("Unexpected oracle error for %s: %s", member, e, exc_info=True)
            return AggregatedReport.failure(record, "unexpected_error", str(e) or type(e).__name__, caller_files)

        logger.info("Verdict for %s: risk %d", member, verdict.risk_score)
        return AggregatedReport(
            changed_member=member,
            verdict=verdict,
            change=record,
            caller_files=caller_files,
        )
