"""Analysis module - snapshots, structural diff, caller discovery, pipeline.

Only the data models are re-exported here; the parsing layer depends on them,
so the engine modules are imported from their own submodules.
"""

from impactscope.analysis.models import (
    AggregatedReport,
    CallerMatch,
    ChangeKind,
    ChangeRecord,
    DeclarationSnapshot,
    DeclaredMember,
    MemberKind,
    ReportStatus,
)

__all__ = [
    "AggregatedReport",
    "CallerMatch",
    "ChangeKind",
    "ChangeRecord",
    "DeclarationSnapshot",
    "DeclaredMember",
    "MemberKind",
    "ReportStatus",
]
