"""Repository source loading and storage."""

from impactscope.sources.fqn import extract_fqcn, fqcn_from_path, matches_target
from impactscope.sources.loaders import (
    AutoLoader,
    DirectoryLoader,
    GitRepositoryLoader,
    RepositoryLoader,
)
from impactscope.sources.store import RepositoryStore

__all__ = [
    "AutoLoader",
    "DirectoryLoader",
    "GitRepositoryLoader",
    "RepositoryLoader",
    "RepositoryStore",
    "extract_fqcn",
    "fqcn_from_path",
    "matches_target",
]
