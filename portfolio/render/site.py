"""Rendering for the hand-maintained sections described by data/site.json."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping

from .cards import esc

_MARKDOWN_LINK = re.compile(r"\[([^\]]+)\]\((https?://[^)]+)\)")

SKILL_GROUPS = {
    "SKILLS_CORE": "core",
    "SKILLS_SYSTEMS": "systemsTools",
    "SKILLS_LEARNING": "learning",
}


class SiteDataError(RuntimeError):
    """Raised when site.json is missing or unreadable."""


def load_site(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise SiteDataError(f"Missing {path}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise SiteDataError(f"Unable to read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise SiteDataError(f"{path} must contain a JSON object")
    return data


def render_bullet_text(raw: object) -> str:
    """Escape bullet text, converting only Markdown links into anchors."""
    text = "" if raw is None else str(raw)
    parts: List[str] = []
    position = 0
    for match in _MARKDOWN_LINK.finditer(text):
        if match.start() > position:
            parts.append(esc(text[position : match.start()]))
        parts.append(
            f'<a href="{esc(match.group(2))}" target="_blank" '
            f'rel="noopener noreferrer">{esc(match.group(1))}</a>'
        )
        position = match.end()
    if position < len(text):
        parts.append(esc(text[position:]))
    return "".join(parts)


def render_bullets(bullets: Any) -> str:
    items = bullets if isinstance(bullets, list) else []
    return "<ul>" + "".join(f"<li>{render_bullet_text(b)}</li>" for b in items) + "</ul>"


def render_tags(tags: Any) -> str:
    rendered: List[str] = []
    for tag in tags if isinstance(tags, list) else []:
        if isinstance(tag, Mapping):
            priority = tag.get("priority")
            label = tag.get("label", "")
        else:
            priority, label = 1, tag
        css = {2: "tag2", 3: "tag3"}.get(priority if isinstance(priority, int) else 1, "tag1")
        rendered.append(f'<span class="{css}">{esc(label)}</span>')
    return "".join(rendered)


def _title(item: Mapping[str, Any]) -> str:
    company = item.get("company") or ""
    role = item.get("role")
    return f"{company} - {role}" if role else str(company)


def _logo_alt(item: Mapping[str, Any]) -> str:
    return str(item.get("logoAlt") or f"{item.get('company') or ''} Logo")


def render_featured(item: Any) -> str:
    if not isinstance(item, Mapping):
        return ""

    logo = ""
    if item.get("logo"):
        logo = (
            '<div class="featured-logo-container">'
            f'<img src="{esc(item["logo"])}" alt="{esc(_logo_alt(item))}" '
            'class="featured-thumbnail" loading="lazy"></div>'
        )

    links = [link for link in item.get("links") or [] if isinstance(link, Mapping)]
    links_html = ""
    if links:
        anchors = "".join(
            f'<a href="{esc(link.get("href") or "#")}" target="_blank" '
            f'rel="noopener noreferrer">{esc(link.get("label") or "Link")}</a>'
            for link in links
        )
        links_html = f'<div class="featured-links">{anchors}</div>'

    return f"""<article class="featured-item">
  {logo}
  <div class="featured-content">
    <div class="featured-header">
      <h3 class="featured-title">{esc(_title(item))}</h3>
      <div class="featured-meta">
        <span class="featured-years">{esc(item.get("years") or "")}</span>
        {links_html}
      </div>
    </div>
    <div class="featured-body">
      {render_bullets(item.get("bullets"))}
    </div>
  </div>
</article>"""


def render_work(items: Any) -> str:
    cards: List[str] = []
    for item in items if isinstance(items, list) else []:
        if not isinstance(item, Mapping):
            continue
        logo = ""
        if item.get("logo"):
            logo = (
                '<div class="logo-container">'
                f'<img src="{esc(item["logo"])}" alt="{esc(_logo_alt(item))}" '
                'class="work-thumbnail" loading="lazy"></div>'
            )
        cards.append(
            f"""<div class="work-item">
  {logo}
  <h3>{esc(_title(item))}</h3>
  <p>{esc(item.get("years") or "")}</p>
  {render_bullets(item.get("bullets"))}
</div>"""
        )
    return "\n".join(cards)


__all__ = [
    "SKILL_GROUPS",
    "SiteDataError",
    "load_site",
    "render_bullet_text",
    "render_bullets",
    "render_featured",
    "render_tags",
    "render_work",
]
