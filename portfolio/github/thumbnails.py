"""Thumbnail selection from a repository's images directory."""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Sequence

from ..logging import get_logger
from ..models import RepositorySummary
from .client import GitHubClient, RemoteError

_STATIC_IMAGE = re.compile(r"\.(png|jpe?g)$", re.IGNORECASE)


def select_thumbnail(
    entries: Iterable[Mapping[str, Any]],
    priority_names: Sequence[str],
    default: str,
) -> str:
    """Pick a download URL following the thumbnail precedence rules.

    Canonical ``thumbnail.*`` names win in the given order, then any GIF, then
    any PNG/JPEG. Entries without a download URL never match.
    """
    candidates = [
        (str(entry.get("name") or ""), str(entry.get("download_url")))
        for entry in entries
        if isinstance(entry, Mapping) and entry.get("download_url")
    ]

    for wanted in priority_names:
        for name, url in candidates:
            if name.lower() == wanted.lower():
                return url

    for name, url in candidates:
        if name.lower().endswith(".gif"):
            return url

    for name, url in candidates:
        if _STATIC_IMAGE.search(name):
            return url

    return default


class ThumbnailResolver:
    """Resolves a thumbnail URL for a repository; never raises."""

    def __init__(
        self,
        client: GitHubClient,
        owner: str,
        *,
        images_dir: str = "images",
        priority_names: Sequence[str] = (
            "thumbnail.gif",
            "thumbnail.jpeg",
            "thumbnail.jpg",
            "thumbnail.png",
        ),
        default: str = "images/blank-thumbnail.jpg",
    ) -> None:
        self.client = client
        self.owner = owner
        self.images_dir = images_dir
        self.priority_names = list(priority_names)
        self.default = default
        self.logger = get_logger("thumbnails")

    async def resolve(self, repo: RepositorySummary) -> str:
        try:
            entries = await self.client.list_directory(
                self.owner, repo.name, self.images_dir
            )
        except RemoteError as exc:
            self.logger.warning(
                "%s: error fetching thumbnails (%s), using default", repo.name, exc
            )
            return self.default

        if entries is None:
            self.logger.info("%s: no %s directory, using default", repo.name, self.images_dir)
            return self.default
        if not isinstance(entries, list):
            self.logger.info("%s: %s is not a directory, using default", repo.name, self.images_dir)
            return self.default

        url = select_thumbnail(entries, self.priority_names, self.default)
        if url == self.default:
            self.logger.info("%s: no matching images, using default", repo.name)
        else:
            self.logger.debug("%s: thumbnail %s", repo.name, url)
        return url


__all__ = ["ThumbnailResolver", "select_thumbnail"]
