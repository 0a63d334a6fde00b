"""Structural diff between two versions of one file."""

import difflib
import logging

from impactscope.analysis.models import (
    ChangeKind,
    ChangeRecord,
    DeclarationSnapshot,
    DeclaredMember,
)
from impactscope.analysis.snapshot import DeclarationSnapshotBuilder

logger = logging.getLogger(__name__)


class StructuralDiffEngine:
    """Compares declaration snapshots and emits typed change records."""

    def __init__(self, builder: DeclarationSnapshotBuilder | None = None) -> None:
        """
        Initialize the diff engine.

        Args:
            builder: Snapshot builder used by diff_sources
        """
        self.builder = builder or DeclarationSnapshotBuilder()

    def diff_sources(self, file_id: str, original_text: str, modified_text: str) -> list[ChangeRecord]:
        """
        Diff two raw versions of the same file.

        Args:
            file_id: FQCN of the file
            original_text: Source before the change
            modified_text: Source after the change

        Returns:
            Change records (order carries no meaning)

        Raises:
            UnparsableSource: If either version cannot be parsed
        """
        if original_text == modified_text:
            logger.info("No content change detected for %s.", file_id)
            return []

        original = self.builder.build(original_text, file_id)
        modified = self.builder.build(modified_text, file_id)
        return self.diff(file_id, original, modified)

    def diff(
        self,
        file_id: str,
        original: DeclarationSnapshot,
        modified: DeclarationSnapshot,
    ) -> list[ChangeRecord]:
        """
        Diff two snapshots of the same file.

        Members only in *modified* are added, members whose canonical
        rendering differs are modified (body-only edits included), members
        only in *original* are removed. When no member changed but the raw
        text did, a single metadata record is emitted.
        """
        records: list[ChangeRecord] = []
        visited: set = set()

        for key, new_member in modified.members.items():
            visited.add(key)
            old_member = original.members.get(key)
            if old_member is None:
                records.append(self._added(file_id, new_member))
                logger.debug("Found %s_ADDED: %s", key[0].value.upper(), key[1])
            elif old_member.rendering != new_member.rendering:
                records.append(self._modified(file_id, old_member, new_member))
                logger.debug("Found %s_MODIFIED: %s", key[0].value.upper(), key[1])

        for key, old_member in original.members.items():
            if key in visited:
                continue
            records.append(self._removed(file_id, old_member))
            logger.debug("Found %s_REMOVED: %s", key[0].value.upper(), key[1])

        if not records and original.source != modified.source:
            records.append(self._metadata(file_id, original.source, modified.source))
            logger.debug("Found STRUCTURAL_METADATA_CHANGE in %s", file_id)

        logger.info("Structural diff of %s produced %d change record(s).", file_id, len(records))
        return records

    @staticmethod
    def _added(file_id: str, member: DeclaredMember) -> ChangeRecord:
        return ChangeRecord(
            file_id=file_id,
            member_kind=member.kind,
            member_name=member.name,
            change_kind=ChangeKind.ADDED,
            new_signature=member.signature,
            rendered_body=member.source,
        )

    @staticmethod
    def _modified(file_id: str, old: DeclaredMember, new: DeclaredMember) -> ChangeRecord:
        return ChangeRecord(
            file_id=file_id,
            member_kind=new.kind,
            member_name=new.name,
            change_kind=ChangeKind.MODIFIED,
            old_signature=old.signature,
            new_signature=new.signature,
            rendered_body=new.source,
            previous_body=old.source,
        )

    @staticmethod
    def _removed(file_id: str, member: DeclaredMember) -> ChangeRecord:
        return ChangeRecord(
            file_id=file_id,
            member_kind=member.kind,
            member_name=member.name,
            change_kind=ChangeKind.REMOVED,
            old_signature=member.signature,
            rendered_body=member.source,
        )

    @staticmethod
    def _metadata(file_id: str, original_text: str, modified_text: str) -> ChangeRecord:
        diff = difflib.unified_diff(
            original_text.splitlines(),
            modified_text.splitlines(),
            fromfile=f"a/{file_id}",
            tofile=f"b/{file_id}",
            lineterm="",
        )
        return ChangeRecord(
            file_id=file_id,
            change_kind=ChangeKind.METADATA,
            rendered_body="\n".join(diff),
        )
