"""Declaration snapshots of a single file version."""

import logging

from impactscope.analysis.models import DeclarationSnapshot, DeclaredMember, MemberKind
from impactscope.core.exceptions import UnparsableSource
from impactscope.parsing.base import DeclarationParser
from impactscope.parsing.java_parser import JavaDeclarationParser

logger = logging.getLogger(__name__)

OVERLOAD_SEPARATOR = "\n"
SIGNATURE_SEPARATOR = "; "


class DeclarationSnapshotBuilder:
    """Builds name-keyed member maps from raw source text.

    Members are keyed by (kind, name). Declarations that share a key, such as
    overloaded methods, collapse into one slot whose rendering and signature
    join every declaration in source order, so editing any overload marks the
    whole slot as modified.
    """

    def __init__(self, parser: DeclarationParser | None = None) -> None:
        self.parser = parser or JavaDeclarationParser()

    def build(
        self,
        content: str,
        file_id: str | None = None,
        kinds: set[MemberKind] | None = None,
    ) -> DeclarationSnapshot:
        """
        Build a snapshot of one file version.

        Args:
            content: Raw source text
            file_id: Identifier used in log and error messages
            kinds: Restrict extraction to these member kinds

        Returns:
            DeclarationSnapshot keyed by (kind, name)

        Raises:
            UnparsableSource: If the text cannot be parsed
        """
        if content is None:
            raise UnparsableSource(file_id, "no content")

        grouped: dict[tuple[MemberKind, str], list[DeclaredMember]] = {}
        for member in self.parser.extract_members(content, file_id):
            if kinds and member.kind not in kinds:
                continue
            grouped.setdefault(member.key, []).append(member)

        snapshot = DeclarationSnapshot(source=content)
        for key, members in grouped.items():
            if len(members) > 1:
                logger.debug("Collapsing %d declarations of %s %s", len(members), key[0].value, key[1])
            snapshot.members[key] = self._collapse(members)

        logger.debug("Built snapshot for %s with %d member(s)", file_id or "<source>", len(snapshot))
        return snapshot

    @staticmethod
    def _collapse(members: list[DeclaredMember]) -> DeclaredMember:
        if len(members) == 1:
            return members[0]
        first = members[0]
        return DeclaredMember(
            kind=first.kind,
            name=first.name,
            signature=SIGNATURE_SEPARATOR.join(m.signature for m in members),
            rendering=OVERLOAD_SEPARATOR.join(m.rendering for m in members),
            source=(OVERLOAD_SEPARATOR * 2).join(m.source for m in members),
        )
