"""Explicit store of per-repository Java sources."""

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from impactscope.core.exceptions import RepositoryLoadError
from impactscope.sources.loaders import AutoLoader, RepositoryLoader

logger = logging.getLogger(__name__)


class RepositoryStore:
    """
    Holds ``repository_id -> {fqcn -> source}`` for analysis runs.

    Repositories registered with a location are loaded lazily through the
    loader and can be refreshed with ``invalidate()`` / ``reload()``.
    Repositories registered with in-memory sources are kept as given.
    """

    def __init__(
        self,
        loader: RepositoryLoader | None = None,
        repositories: Mapping[str, str] | None = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            loader: Loader used for repositories registered by location
            repositories: Optional repository id -> location mapping
        """
        self.loader = loader or AutoLoader()
        self._locations: dict[str, str] = {}
        self._sources: dict[str, dict[str, str]] = {}
        for repo_id, location in (repositories or {}).items():
            self.add_repository(repo_id, location=location)

    def add_repository(
        self,
        repository_id: str,
        location: str | None = None,
        sources: Mapping[str, str] | None = None,
    ) -> None:
        """
        Register a repository by location, by in-memory sources, or both.

        Sources given directly take precedence until the next invalidate.
        """
        if not repository_id or not repository_id.strip():
            raise RepositoryLoadError("Repository id must not be blank")
        if location is None and sources is None:
            raise RepositoryLoadError(f"Repository '{repository_id}' needs a location or sources")

        if location is not None:
            self._locations[repository_id] = location
        else:
            self._locations.pop(repository_id, None)
        if sources is not None:
            self._sources[repository_id] = dict(sources)
        else:
            self._sources.pop(repository_id, None)

    @property
    def repository_ids(self) -> list[str]:
        """Known repository ids, in registration order."""
        ids = list(self._locations)
        ids.extend(repo_id for repo_id in self._sources if repo_id not in self._locations)
        return ids

    def __contains__(self, repository_id: object) -> bool:
        return repository_id in self._locations or repository_id in self._sources

    def sources(self, repository_id: str) -> dict[str, str]:
        """Get the sources of one repository, loading it on first use."""
        if repository_id in self._sources:
            return self._sources[repository_id]
        location = self._locations.get(repository_id)
        if location is None:
            raise RepositoryLoadError(f"Unknown repository: {repository_id}")

        logger.info("Loading repository %s from %s", repository_id, location)
        self._sources[repository_id] = self.loader.load(location)
        return self._sources[repository_id]

    def get_source(self, repository_id: str, fqcn: str) -> str | None:
        """Get one file's source, or None if the repository lacks it."""
        return self.sources(repository_id).get(fqcn)

    def file_ids(self, repository_ids: Iterable[str]) -> list[str]:
        """FQCNs across the given repositories, de-duplicated, first seen first."""
        seen: dict[str, None] = {}
        for repo_id in repository_ids:
            for fqcn in self.sources(repo_id):
                seen.setdefault(fqcn, None)
        return list(seen)

    def merged(self, repository_ids: Iterable[str]) -> Mapping[str, str]:
        """
        Combine repositories into one read-only file set.

        When two repositories contain the same FQCN, the first repository
        listed wins.
        """
        combined: dict[str, str] = {}
        for repo_id in repository_ids:
            for fqcn, source in self.sources(repo_id).items():
                if fqcn in combined:
                    logger.debug("%s from %s shadowed by an earlier repository", fqcn, repo_id)
                    continue
                combined[fqcn] = source
        return MappingProxyType(combined)

    def invalidate(self, repository_id: str | None = None) -> None:
        """
        Drop cached sources so they are reloaded on next use.

        Only repositories with a location are affected; in-memory
        repositories have nothing to reload from.
        """
        targets = [repository_id] if repository_id is not None else list(self._locations)
        for repo_id in targets:
            if repo_id in self._locations:
                self._sources.pop(repo_id, None)
                logger.debug("Invalidated repository %s", repo_id)

    def reload(self) -> None:
        """Invalidate and eagerly reload every location-backed repository."""
        self.invalidate()
        for repo_id in self._locations:
            self.sources(repo_id)

    def metadata(self) -> dict[str, list[str]]:
        """Raw repository metadata: repository id -> sorted FQCNs."""
        return {repo_id: sorted(self.sources(repo_id)) for repo_id in self.repository_ids}
