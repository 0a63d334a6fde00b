"""Loaders that turn a repository into a map of FQCN to Java source."""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

import pathspec
from git import GitCommandError, Repo

from impactscope.core.config import RepositoriesConfig
from impactscope.core.constants import JAVA_EXTENSION
from impactscope.core.exceptions import RepositoryLoadError
from impactscope.sources.fqn import extract_fqcn, fqcn_from_path

logger = logging.getLogger(__name__)


class RepositoryLoader(ABC):
    """Loads every Java source file of one repository."""

    @abstractmethod
    def load(self, location: str) -> dict[str, str]:
        """
        Load a repository.

        Args:
            location: Loader-specific location (directory path, git URL)

        Returns:
            Mapping of FQCN to source text

        Raises:
            RepositoryLoadError: If the repository cannot be read
        """
        ...


class DirectoryLoader(RepositoryLoader):
    """Reads Java files from a local checkout."""

    def __init__(self, config: RepositoriesConfig | None = None) -> None:
        self.config = config or RepositoriesConfig()
        self._ignore_spec = pathspec.PathSpec.from_lines("gitwildmatch", self.config.exclude_patterns)

    def should_ignore(self, rel_path: Path | str, is_dir: bool = False) -> bool:
        """Check if a repository-relative path matches an exclude pattern."""
        path = str(rel_path).replace(os.sep, "/")
        if is_dir:
            path += "/"
        return self._ignore_spec.match_file(path)

    def iter_files(self, root: Path):
        """Iterate over the Java files under *root* that should be loaded."""
        for current, dirs, files in os.walk(root):
            current_path = Path(current)

            # Prune ignored and hidden directories in place
            dirs[:] = [
                d
                for d in sorted(dirs)
                if not d.startswith(".") and not self.should_ignore((current_path / d).relative_to(root), is_dir=True)
            ]

            for name in sorted(files):
                if not name.endswith(JAVA_EXTENSION):
                    continue
                file_path = current_path / name
                if self.should_ignore(file_path.relative_to(root)):
                    continue
                try:
                    if file_path.stat().st_size / 1024 > self.config.max_file_size_kb:
                        logger.debug("Skipping oversized file %s", file_path)
                        continue
                except OSError:
                    continue
                yield file_path

    def load(self, location: str) -> dict[str, str]:
        root = Path(location).expanduser()
        if not root.is_dir():
            raise RepositoryLoadError(f"Repository directory not found: {root}")

        sources: dict[str, str] = {}
        for file_path in self.iter_files(root):
            rel_path = file_path.relative_to(root).as_posix()
            try:
                content = file_path.read_text(encoding="utf-8")
            except (UnicodeDecodeError, OSError) as e:
                logger.warning("Skipping unreadable file %s: %s", rel_path, e)
                continue

            fqcn = extract_fqcn(content, file_path.name) or fqcn_from_path(rel_path)
            if fqcn in sources:
                logger.warning("Duplicate FQCN %s in %s; keeping the first file", fqcn, root)
                continue
            sources[fqcn] = content

        logger.info("Loaded %d Java file(s) from %s", len(sources), root)
        return sources


class GitRepositoryLoader(RepositoryLoader):
    """Shallow-clones a git repository and reads it with a DirectoryLoader."""

    def __init__(self, config: RepositoriesConfig | None = None) -> None:
        self.config = config or RepositoriesConfig()
        self.directory_loader = DirectoryLoader(self.config)

    def load(self, location: str) -> dict[str, str]:
        with tempfile.TemporaryDirectory(prefix="impactscope-") as checkout:
            kwargs = {"depth": self.config.clone_depth} if self.config.clone_depth else {}
            if self.config.branch:
                kwargs["branch"] = self.config.branch

            logger.info("Cloning %s", location)
            try:
                Repo.clone_from(location, checkout, **kwargs)
            except GitCommandError as e:
                raise RepositoryLoadError(f"Failed to clone {location}: {e}") from e

            return self.directory_loader.load(checkout)


def is_git_location(location: str) -> bool:
    """Guess whether *location* is a remote git URL rather than a local path."""
    return location.startswith(("http://", "https://", "git@", "ssh://", "git://")) or (
        location.endswith(".git") and not Path(location).expanduser().is_dir()
    )


class AutoLoader(RepositoryLoader):
    """Dispatches to the git or directory loader based on the location."""

    def __init__(self, config: RepositoriesConfig | None = None) -> None:
        self.config = config or RepositoriesConfig()
        self.directory = DirectoryLoader(self.config)
        self.git = GitRepositoryLoader(self.config)

    def load(self, location: str) -> dict[str, str]:
        if is_git_location(location):
            return self.git.load(location)
        return self.directory.load(location)
