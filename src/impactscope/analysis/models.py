"""Data models for structural diffing, discovery and aggregation."""

import difflib
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from impactscope.core.constants import FAILED_SUFFIX, NO_CHANGE_MEMBER
from impactscope.oracle.models import ImpactVerdict


class MemberKind(str, Enum):
    """Kinds of structural members tracked per file."""

    METHOD = "method"
    FIELD = "field"
    TYPE = "type"


class ChangeKind(str, Enum):
    """Kinds of structural change."""

    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"
    METADATA = "metadata"  # imports, package or comment-only edits


class ReportStatus(str, Enum):
    """Outcome of one per-change analysis task."""

    ANALYZED = "analyzed"
    FAILED = "failed"
    NO_CHANGE = "no_change"


@dataclass(frozen=True)
class DeclaredMember:
    """One member of a file version, keyed by (kind, name)."""

    kind: MemberKind
    name: str
    signature: str
    rendering: str  # canonical, layout-insensitive text used for comparison
    source: str  # raw declaration text as written

    @property
    def key(self) -> tuple[MemberKind, str]:
        return (self.kind, self.name)


@dataclass
class DeclarationSnapshot:
    """Name-keyed extraction of a file's methods, fields and types."""

    source: str
    members: dict[tuple[MemberKind, str], DeclaredMember] = field(default_factory=dict)

    def get(self, kind: MemberKind, name: str) -> DeclaredMember | None:
        return self.members.get((kind, name))

    def of_kind(self, kind: MemberKind) -> list[DeclaredMember]:
        """Members of one kind, in extraction order."""
        return [m for m in self.members.values() if m.kind == kind]

    def __contains__(self, key: object) -> bool:
        return key in self.members

    def __len__(self) -> int:
        return len(self.members)


class ChangeRecord(BaseModel):
    """One structural delta for a single named member of a file."""

    model_config = ConfigDict(frozen=True)

    file_id: str = Field(..., description="FQCN of the changed file")
    member_kind: MemberKind | None = Field(None, description="None for metadata changes")
    member_name: str | None = Field(None, description="None for metadata changes")
    change_kind: ChangeKind
    old_signature: str | None = Field(None)
    new_signature: str | None = Field(None)
    rendered_body: str = Field("", description="Member source (new for added/modified, old for removed)")
    previous_body: str | None = Field(None, description="Old member source for modified records")

    @property
    def display_name(self) -> str:
        """Member name, falling back to the file id."""
        return self.member_name or self.file_id

    @property
    def marker(self) -> str:
        """Marker such as METHOD_MODIFIED or STRUCTURAL_METADATA_CHANGE."""
        if self.change_kind == ChangeKind.METADATA or self.member_kind is None:
            return "STRUCTURAL_METADATA_CHANGE"
        return f"{self.member_kind.value.upper()}_{self.change_kind.value.upper()}"

    def render_diff(self) -> str:
        """Render the change as text for the reasoning oracle."""
        lines = [
            f"// FILE: {self.file_id}",
            f"// TYPE: {self.marker}",
        ]
        if self.member_name:
            lines.append(f"// MEMBER: {self.member_name}")
        if self.old_signature is not None:
            lines.append(f"// OLD Signature: {self.old_signature}")
        if self.new_signature is not None:
            lines.append(f"// NEW Signature: {self.new_signature}")
        if self.change_kind == ChangeKind.METADATA:
            lines.append(
                "// DESCRIPTION: Changes detected outside of primary members "
                "(e.g., imports, package, file-level comments)."
            )

        if self.change_kind == ChangeKind.MODIFIED and self.previous_body is not None:
            diff = difflib.unified_diff(
                self.previous_body.splitlines(),
                self.rendered_body.splitlines(),
                fromfile=f"a/{self.display_name}",
                tofile=f"b/{self.display_name}",
                lineterm="",
            )
            lines.append("\n".join(diff))
        elif self.rendered_body:
            lines.append(self.rendered_body)

        return "\n".join(lines) + "\n"


@dataclass
class CallerMatch:
    """Methods in one corpus file that appear to call a symbol."""

    file_id: str
    method_names: list[str] = field(default_factory=list)
    excerpts: list[str] = field(default_factory=list)

    def to_context(self) -> str:
        """Format the excerpts as labelled snippets."""
        parts = []
        for name, excerpt in zip(self.method_names, self.excerpts):
            parts.append(f"// Module: {self.file_id} - Method: {name}\n{excerpt}")
        return "\n\n".join(parts)


class AggregatedReport(BaseModel):
    """Result of one per-change task, created once and never mutated."""

    model_config = ConfigDict(frozen=True)

    changed_member: str
    verdict: ImpactVerdict = Field(default_factory=ImpactVerdict.empty)
    status: ReportStatus = Field(ReportStatus.ANALYZED)
    change: ChangeRecord | None = Field(None)
    caller_files: list[str] = Field(default_factory=list)
    error_category: str | None = Field(None, description="Failure category, kept for observability")
    error_message: str | None = Field(None)

    @property
    def failed(self) -> bool:
        return self.status == ReportStatus.FAILED

    @classmethod
    def no_change(cls) -> "AggregatedReport":
        """Sentinel report for a run without structural changes."""
        return cls(changed_member=NO_CHANGE_MEMBER, status=ReportStatus.NO_CHANGE)

    @classmethod
    def failure(
        cls,
        change: ChangeRecord,
        category: str,
        message: str,
        caller_files: list[str] | None = None,
    ) -> "AggregatedReport":
        """Degraded report for a change whose oracle call failed."""
        return cls(
            changed_member=change.display_name + FAILED_SUFFIX,
            status=ReportStatus.FAILED,
            change=change,
            caller_files=caller_files or [],
            error_category=category,
            error_message=message,
        )
