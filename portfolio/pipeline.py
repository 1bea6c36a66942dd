"""Batched enrichment of repositories into display-ready projects."""

from __future__ import annotations

import asyncio
from typing import Iterator, List, Optional, Sequence, TypeVar

from .github.client import RemoteError
from .github.manifests import ManifestLoader, ManifestRejected
from .github.thumbnails import ThumbnailResolver
from .logging import get_logger
from .models import EnrichedProject, Manifest, RepositorySummary

T = TypeVar("T")

DEFAULT_BATCH_SIZE = 5


def batched(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """Yield consecutive groups of at most ``size`` items."""
    if size < 1:
        raise ValueError("batch size must be at least 1")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


class EnrichmentPipeline:
    """Merges repositories with their manifests and thumbnails.

    Repositories are processed in groups of ``batch_size``; requests within a
    group overlap, and the next group starts only after the previous one has
    finished. A repository is kept only when its manifest loads cleanly; there
    is no default manifest, so every surviving priority was declared by its
    owner.
    """

    def __init__(
        self,
        thumbnails: ThumbnailResolver,
        manifests: ManifestLoader,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch size must be at least 1")
        self.thumbnails = thumbnails
        self.manifests = manifests
        self.batch_size = batch_size
        self.logger = get_logger("pipeline")

    async def enrich(self, repos: Sequence[RepositorySummary]) -> List[EnrichedProject]:
        projects: List[EnrichedProject] = []
        for number, group in enumerate(batched(repos, self.batch_size), start=1):
            self.logger.info("Processing batch %d (%d repos)", number, len(group))
            results = await asyncio.gather(*(self._enrich_one(repo) for repo in group))
            for project in results:
                if project is None:
                    continue
                self.logger.info("Adding %s (Priority=%s)", project.name, project.priority)
                projects.append(project)

        # list.sort is stable, so equal priorities keep fetch order.
        projects.sort(key=lambda project: project.priority)
        return projects

    async def _enrich_one(self, repo: RepositorySummary) -> Optional[EnrichedProject]:
        try:
            thumbnail, manifest = await asyncio.gather(
                self.thumbnails.resolve(repo),
                self._load_manifest(repo),
            )
        except Exception as exc:  # pragma: no cover - unexpected per-repo failure
            self.logger.exception("%s: enrichment failed (%s), skipping", repo.name, exc)
            return None
        if manifest is None:
            return None
        return EnrichedProject.merge(repo, manifest, thumbnail)

    async def _load_manifest(self, repo: RepositorySummary) -> Optional[Manifest]:
        try:
            return await self.manifests.load(repo)
        except ManifestRejected as exc:
            self.logger.info("%s, skipping", exc)
        except RemoteError as exc:
            self.logger.warning("%s: error fetching manifest (%s), skipping", repo.name, exc)
        return None


__all__ = ["DEFAULT_BATCH_SIZE", "EnrichmentPipeline", "batched"]
