"""Core data models shared across portfolio components."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from .logging import get_logger


@dataclass(frozen=True)
class RepositorySummary:
    """Repository metadata as returned by the GitHub listing endpoint."""

    name: str
    url: str
    description: Optional[str] = None
    topics: List[str] = field(default_factory=list)
    archived: bool = False
    is_fork: bool = False

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RepositorySummary":
        topics = payload.get("topics") or []
        description = payload.get("description")
        return cls(
            name=str(payload.get("name", "")),
            url=str(payload.get("html_url", "")),
            description=description if isinstance(description, str) else None,
            topics=[str(topic) for topic in topics if isinstance(topic, str)],
            archived=bool(payload.get("archived")),
            is_fork=bool(payload.get("fork")),
        )


@dataclass(frozen=True)
class SummaryGroup:
    """A summary heading with nested bullet items."""

    heading: str
    items: List[str] = field(default_factory=list)


SummaryItem = Union[str, SummaryGroup]


@dataclass(frozen=True)
class Manifest:
    """Display metadata declared by a repository's portfolio.json."""

    summary: List[SummaryItem]
    priority: Union[int, float]
    link: Optional[str] = None


@dataclass
class EnrichedProject:
    """A repository merged with its manifest and resolved thumbnail."""

    name: str
    html_url: str
    thumbnail: str
    description: Optional[str]
    summary: List[SummaryItem]
    priority: Union[int, float]
    link: Optional[str] = None
    topics: List[str] = field(default_factory=list)
    archived: bool = False
    fork: bool = False

    @classmethod
    def merge(
        cls, repo: RepositorySummary, manifest: Manifest, thumbnail: str
    ) -> "EnrichedProject":
        return cls(
            name=repo.name,
            html_url=repo.url,
            thumbnail=thumbnail,
            description=repo.description,
            summary=list(manifest.summary),
            priority=manifest.priority,
            link=manifest.link,
            topics=list(repo.topics),
            archived=repo.archived,
            fork=repo.is_fork,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialise into the artifact record shape."""
        return {
            "name": self.name,
            "html_url": self.html_url,
            "thumbnail": self.thumbnail,
            "description": self.description,
            "summary": [_summary_item_to_json(item) for item in self.summary],
            "priority": self.priority,
            "link": self.link,
            "topics": list(self.topics),
            "archived": self.archived,
            "fork": self.fork,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "EnrichedProject":
        """Rebuild a project from an artifact record, tolerating absent optionals."""
        description = payload.get("description")
        link = payload.get("link")
        priority = payload.get("priority", 0)
        if isinstance(priority, bool) or not isinstance(priority, (int, float)):
            priority = 0
        elif not math.isfinite(priority):
            priority = 0
        return cls(
            name=str(payload.get("name", "")),
            html_url=str(payload.get("html_url", "")),
            thumbnail=str(payload.get("thumbnail") or ""),
            description=description if isinstance(description, str) else None,
            summary=normalize_summary(payload.get("summary")),
            priority=priority,
            link=link if isinstance(link, str) and link else None,
            topics=[str(t) for t in payload.get("topics") or [] if isinstance(t, str)],
            archived=bool(payload.get("archived")),
            fork=bool(payload.get("fork")),
        )


@dataclass(frozen=True)
class CategoryBucket:
    """Presentation-only count of projects sharing an inferred category."""

    name: str
    count: int
    label: str
    icon: str
    tie_break_weight: int = 0


def normalize_summary(raw: Any) -> List[SummaryItem]:
    """Convert raw summary JSON into strings and SummaryGroup entries.

    Object items may hold several headings; each key becomes its own group.
    Anything that is neither a string nor an object is dropped and logged at
    debug level.
    """
    if not isinstance(raw, list):
        return []
    logger = get_logger("manifests")
    items: List[SummaryItem] = []
    for index, entry in enumerate(raw):
        if isinstance(entry, str):
            items.append(entry)
        elif isinstance(entry, dict):
            for heading, values in entry.items():
                sub_items = (
                    [str(value) for value in values] if isinstance(values, list) else []
                )
                items.append(SummaryGroup(heading=str(heading), items=sub_items))
        else:
            logger.debug(
                "Dropping summary item %d of type %s", index, type(entry).__name__
            )
    return items


def _summary_item_to_json(item: SummaryItem) -> Any:
    if isinstance(item, SummaryGroup):
        return {item.heading: list(item.items)}
    return item
