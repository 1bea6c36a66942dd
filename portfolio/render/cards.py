"""HTML rendering for the projects grid."""

from __future__ import annotations

import re
from dataclasses import dataclass
from html import escape
from typing import Iterable, List, Optional, Sequence
from urllib.parse import urlsplit

from ..config import CategoryConfig, CategoryRule
from ..models import CategoryBucket, EnrichedProject, SummaryGroup, SummaryItem
from .categories import match_rule

DEFAULT_THUMBNAIL = "images/blank-thumbnail.jpg"
UNAVAILABLE_MESSAGE = "Unable to load projects right now. Please try again later."


@dataclass(frozen=True)
class WebsiteInfo:
    href: str
    label: str
    favicon: Optional[str]


def esc(value: object) -> str:
    return escape("" if value is None else str(value), quote=True)


def visible_projects(projects: Iterable[EnrichedProject]) -> List[EnrichedProject]:
    """Drop archived and forked repositories, ordered by ascending priority."""
    kept = [project for project in projects if not project.archived and not project.fork]
    kept.sort(key=lambda project: project.priority)
    return kept


def format_repo_name(name: str) -> str:
    """Turn ``my-CoolRepo`` into ``My Cool Repo``."""
    if not name:
        return ""
    words: List[str] = []
    for part in name.split("-"):
        words.extend(word for word in re.split(r"(?=[A-Z])", part) if word)
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


def render_summary(summary: Sequence[SummaryItem]) -> str:
    if not summary:
        return "<p>No summary available.</p>"
    parts = ["<ul>"]
    for item in summary:
        if isinstance(item, SummaryGroup):
            parts.append(f"<li>{esc(item.heading)}</li>")
            parts.append("<ul>")
            parts.extend(f"<li>{esc(sub)}</li>" for sub in item.items)
            parts.append("</ul>")
        else:
            parts.append(f"<li>{esc(item)}</li>")
    parts.append("</ul>")
    return "".join(parts)


def render_engine_badge(topics: Sequence[str], rules: Sequence[CategoryRule]) -> str:
    """Badge for the first category rule matching ``topics``.

    Every rule is a substring test, so python and minecraft badges also
    appear for topics such as ``cpython`` or ``minecraft-mod``, not only
    for the exact tag.
    """
    rule = match_rule(topics, rules)
    if rule is None or not rule.icon:
        return ""
    return (
        '<div class="engine-badge">'
        f'<img src="{esc(rule.icon)}" alt="{esc(rule.label)} Project">'
        "</div>"
    )


def website_info(url: str) -> WebsiteInfo:
    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        return WebsiteInfo(href=url, label=url, favicon=None)
    hostname = parts.hostname
    if hostname.startswith("www."):
        hostname = hostname[4:]
    label = hostname
    if hostname.endswith("itch.io"):
        label = "itch.io"
    elif hostname.endswith("github.io"):
        label = "GitHub Pages"
    origin = f"{parts.scheme}://{parts.netloc}"
    return WebsiteInfo(href=url, label=label, favicon=f"{origin}/favicon.ico")


def render_link_flag(url: str) -> str:
    info = website_info(url)
    if info.favicon:
        icon = (
            f'<img src="{esc(info.favicon)}" alt="{esc(info.label)} icon" '
            'class="link-flag-favicon" loading="lazy">'
        )
    else:
        icon = '<span class="link-flag-default-icon">&#8599;</span>'
    return (
        f'<a class="link-flag" href="{esc(info.href)}" target="_blank" '
        f'rel="noopener noreferrer" aria-label="Open {esc(info.label)}" '
        f'title="{esc(info.label)}">'
        f'{icon}<span class="link-flag-text">{esc(info.label)}</span></a>'
    )


def render_card(project: EnrichedProject, rules: Sequence[CategoryRule]) -> str:
    thumbnail = project.thumbnail or DEFAULT_THUMBNAIL
    link_flag = render_link_flag(project.link) if project.link else ""
    tags = "".join(f'<span class="tag3">{esc(topic)}</span>' for topic in project.topics)
    return f"""<div class="project-item" data-repo="{esc(project.name)}">
  <div class="project-thumbnail-container">
    <a href="{esc(project.html_url)}" rel="noopener noreferrer" target="_blank" class="project-thumbnail-link">
      {render_engine_badge(project.topics, rules)}
      <div class="thumbnail-spinner loading-spinner-card"></div>
      <img src="{esc(thumbnail)}" alt="{esc(project.name)} Thumbnail" class="project-thumbnail" loading="lazy">
    </a>
    {link_flag}
  </div>
  <div class="project-details">
    <a href="{esc(project.html_url)}" target="_blank" rel="noopener noreferrer">
      <h3>{esc(format_repo_name(project.name))}</h3>
    </a>
    <p>{esc(project.description or "No description available")}</p>
    <div class="project-summary">
      {render_summary(project.summary)}
    </div>
  </div>
  <div class="tag-group-2">{tags}</div>
</div>"""


def render_project_grid(projects: Iterable[EnrichedProject], config: CategoryConfig) -> str:
    """Render cards for every displayable project."""
    cards = [render_card(project, config.rules) for project in visible_projects(projects)]
    return "\n".join(cards).strip() + "\n"


def render_category_summary(
    buckets: Sequence[CategoryBucket], other_count: int, *, other_label: str = "Other"
) -> str:
    parts = ['<div class="category-summary">']
    for bucket in buckets:
        icon = (
            f'<img src="{esc(bucket.icon)}" alt="{esc(bucket.label)}" class="category-icon">'
            if bucket.icon
            else ""
        )
        parts.append(
            f'<span class="category-badge" data-category="{esc(bucket.name)}" '
            f'title="{esc(bucket.label)}">{icon}'
            f'<span class="category-count">{bucket.count}</span></span>'
        )
    if other_count > 0:
        parts.append(
            f'<span class="category-badge category-other" title="{esc(other_label)}">'
            f'+{other_count} {esc(other_label.lower())}</span>'
        )
    parts.append("</div>")
    return "".join(parts)


def render_unavailable(message: str = UNAVAILABLE_MESSAGE) -> str:
    return f'<p class="projects-error">{esc(message)}</p>\n'


__all__ = [
    "UNAVAILABLE_MESSAGE",
    "WebsiteInfo",
    "format_repo_name",
    "render_card",
    "render_category_summary",
    "render_engine_badge",
    "render_link_flag",
    "render_project_grid",
    "render_summary",
    "render_unavailable",
    "visible_projects",
    "website_info",
]
