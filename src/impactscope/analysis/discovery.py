"""Cross-file caller discovery.

The shipped strategy is a deliberately cheap textual heuristic: a file is a
candidate when its text contains ``symbol(``, and its matching methods are the
ones whose canonical rendering contains the same pattern. String literals and
unrelated symbols that share the name produce false positives; that is
accepted. A symbol-resolving strategy can be plugged in through
``DependencyDiscovery``.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping

from impactscope.analysis.models import CallerMatch, MemberKind
from impactscope.analysis.snapshot import DeclarationSnapshotBuilder
from impactscope.core.exceptions import UnparsableSource

logger = logging.getLogger(__name__)


class DependencyDiscovery(ABC):
    """Finds files in a corpus that plausibly call a symbol."""

    @abstractmethod
    def find_callers(
        self,
        target_file_id: str,
        symbol_name: str,
        corpus: Mapping[str, str],
    ) -> dict[str, CallerMatch]:
        """
        Find candidate callers of a symbol.

        Args:
            target_file_id: File that declares the symbol (never reported)
            symbol_name: Simple name of the changed member
            corpus: file id -> source text, treated as read-only

        Returns:
            Mapping of file id to the matches found in that file
        """
        ...


class TextualCallDiscovery(DependencyDiscovery):
    """Matches the literal call pattern ``symbol(`` in corpus text."""

    def __init__(self, builder: DeclarationSnapshotBuilder | None = None) -> None:
        self.builder = builder or DeclarationSnapshotBuilder()

    def find_callers(
        self,
        target_file_id: str,
        symbol_name: str,
        corpus: Mapping[str, str],
    ) -> dict[str, CallerMatch]:
        callers: dict[str, CallerMatch] = {}
        if not symbol_name or not symbol_name.strip():
            return callers

        pattern = symbol_name + "("
        logger.info("Searching for callers of %s.%s()...", target_file_id, symbol_name)

        for file_id, source in corpus.items():
            if file_id == target_file_id:
                logger.debug("Skipping target file itself: %s", target_file_id)
                continue
            if not source or pattern not in source:
                continue

            try:
                match = self._match_file(file_id, source, pattern)
            except UnparsableSource as e:
                logger.warning("Skipping %s during caller discovery: %s", file_id, e.reason)
                continue

            if match.excerpts:
                logger.info("-> Discovered impact in %s (%d method(s))", file_id, len(match.excerpts))
                logger.debug("   Calling methods: %s", ", ".join(match.method_names))
                callers[file_id] = match
            else:
                logger.debug("Pattern '%s' in %s matched no method body", pattern, file_id)

        logger.info("Finished search for %s. Found %d impacted file(s).", symbol_name, len(callers))
        return callers

    def _match_file(self, file_id: str, source: str, pattern: str) -> CallerMatch:
        snapshot = self.builder.build(source, file_id, kinds={MemberKind.METHOD})
        match = CallerMatch(file_id=file_id)
        for method in snapshot.of_kind(MemberKind.METHOD):
            if pattern in method.rendering:
                match.method_names.append(method.name)
                match.excerpts.append(method.source)
        return match
