"""Tests for site.json section rendering."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from portfolio.render.site import (
    SiteDataError,
    load_site,
    render_bullet_text,
    render_featured,
    render_tags,
    render_work,
)


def test_bullet_text_only_converts_markdown_links() -> None:
    html = render_bullet_text("See [Chess](https://chess.example) <script>")
    assert html == (
        'See <a href="https://chess.example" target="_blank" rel="noopener noreferrer">Chess</a>'
        " &lt;script&gt;"
    )
    assert render_bullet_text("[x](javascript:alert(1))") == "[x](javascript:alert(1))"


def test_render_tags_maps_priorities() -> None:
    html = render_tags([{"label": "C#", "priority": 2}, {"label": "Go", "priority": 3}, "Python", {"label": "Lua"}])
    assert html == (
        '<span class="tag2">C#</span><span class="tag3">Go</span>'
        '<span class="tag1">Python</span><span class="tag1">Lua</span>'
    )


def test_render_featured_and_work() -> None:
    featured = render_featured(
        {
            "company": "Studio",
            "role": "Engineer",
            "years": "2024",
            "logo": "logo.png",
            "links": [{"label": "Site", "href": "https://studio.example"}],
            "bullets": ["Shipped"],
        }
    )
    assert "Studio - Engineer" in featured
    assert 'alt="Studio Logo"' in featured
    assert 'class="featured-links"' in featured
    assert render_featured(None) == ""

    work = render_work([{"company": "Acme", "years": "2020", "bullets": []}, "junk"])
    assert work.count('class="work-item"') == 1
    assert "<h3>Acme</h3>" in work
    assert "<ul></ul>" in work


def test_load_site_errors(tmp_path: Path) -> None:
    with pytest.raises(SiteDataError):
        load_site(tmp_path / "site.json")
    path = tmp_path / "site.json"
    path.write_text(json.dumps([1]), encoding="utf-8")
    with pytest.raises(SiteDataError):
        load_site(path)
