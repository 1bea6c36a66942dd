"""Tests for portfolio.orchestrator."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from portfolio.config import CredentialError
from portfolio.github.client import ListingError
from portfolio.orchestrator import Orchestrator
from portfolio.render.markers import MarkerError
from portfolio.stores import ArtifactError
from tests._fixtures.github_api import FakeGitHub

INDEX = """<html><body>
<!-- PROJECT_CATEGORIES_START --><!-- PROJECT_CATEGORIES_END -->
<div id="projects-grid">
<!-- PROJECTS_PRERENDER_START -->
<p>stale</p>
<!-- PROJECTS_PRERENDER_END -->
</div>
<!-- SKILLS_CORE_START --><!-- SKILLS_CORE_END -->
<!-- SKILLS_SYSTEMS_START --><!-- SKILLS_SYSTEMS_END -->
<!-- SKILLS_LEARNING_START --><!-- SKILLS_LEARNING_END -->
</body></html>
"""


def _orchestrator(github: FakeGitHub, environ: dict[str, str] | None = None) -> Orchestrator:
    return Orchestrator(
        client_factory=lambda config, token: github.client(),
        environ={"ACTIONS_TOKEN": "token"} if environ is None else environ,
    )


def _write_config(root: Path) -> None:
    (root / ".portfolio.yml").write_text("github:\n  owner: octo\n  batch_size: 2\n", encoding="utf-8")


def test_run_fetch_writes_sorted_artifact(tmp_path: Path, github: FakeGitHub) -> None:
    _write_config(tmp_path)
    github.add_repo("A", manifest={"Summary": ["x"], "Priority": 5}, topics=["unity"])
    github.add_repo("B", manifest={"Summary": [], "Priority": 1}, images=["thumbnail.png"])
    github.add_repo("C")

    projects = _orchestrator(github).run_fetch(str(tmp_path))

    assert [p.name for p in projects] == ["B", "A"]
    data = json.loads((tmp_path / "data" / "repos.json").read_text(encoding="utf-8"))
    assert [item["name"] for item in data] == ["B", "A"]
    assert data[0]["thumbnail"] == "https://raw.example/B/images/thumbnail.png"
    assert set(data[0]) == {
        "name", "html_url", "thumbnail", "description", "summary",
        "priority", "link", "topics", "archived", "fork",
    }


def test_run_fetch_requires_credential_before_any_request(tmp_path: Path, github: FakeGitHub) -> None:
    with pytest.raises(CredentialError):
        _orchestrator(github, environ={}).run_fetch(str(tmp_path))
    assert github.requests == []


def test_run_fetch_fails_on_malformed_listing(tmp_path: Path, github: FakeGitHub) -> None:
    _write_config(tmp_path)
    github.owner = "someone-else"

    with pytest.raises(ListingError):
        _orchestrator(github).run_fetch(str(tmp_path))
    assert not (tmp_path / "data" / "repos.json").exists()


def _seed_artifact(root: Path) -> None:
    data_dir = root / "data"
    data_dir.mkdir()
    records = [
        {"name": "late", "html_url": "u", "thumbnail": "t", "priority": 9, "topics": ["python"]},
        {"name": "early", "html_url": "u", "thumbnail": "t", "priority": 1, "topics": ["unity3d"]},
        {"name": "old", "html_url": "u", "thumbnail": "t", "priority": 0, "archived": True},
    ]
    (data_dir / "repos.json").write_text(json.dumps(records), encoding="utf-8")


def test_run_prerender_writes_fragments(tmp_path: Path) -> None:
    _seed_artifact(tmp_path)
    (tmp_path / "data" / "site.json").write_text(
        json.dumps({"featuredProject": {"company": "Studio"}, "workExperience": [{"company": "Acme"}]}),
        encoding="utf-8",
    )

    written = Orchestrator().run_prerender(str(tmp_path))

    assert set(written) == {
        "repos.prerender.html",
        "categories.prerender.html",
        "featured.prerender.html",
        "work.prerender.html",
    }
    grid = written["repos.prerender.html"].read_text(encoding="utf-8")
    assert grid.index('data-repo="early"') < grid.index('data-repo="late"')
    assert 'data-repo="old"' not in grid
    categories = written["categories.prerender.html"].read_text(encoding="utf-8")
    assert 'data-category="unity"' in categories
    assert 'data-category="python"' in categories


def test_run_prerender_requires_artifact(tmp_path: Path) -> None:
    with pytest.raises(ArtifactError):
        Orchestrator().run_prerender(str(tmp_path))


def test_run_inject_updates_index(tmp_path: Path) -> None:
    _seed_artifact(tmp_path)
    (tmp_path / "data" / "site.json").write_text(
        json.dumps({"core": [{"label": "C#", "priority": 1}], "learning": ["Rust"]}),
        encoding="utf-8",
    )
    (tmp_path / "index.html").write_text(INDEX, encoding="utf-8")
    orchestrator = Orchestrator()
    orchestrator.run_prerender(str(tmp_path))

    index_path = orchestrator.run_inject(str(tmp_path))

    html = index_path.read_text(encoding="utf-8")
    assert "<p>stale</p>" not in html
    assert 'data-repo="early"' in html
    assert 'class="category-summary"' in html
    assert '<span class="tag1">C#</span>' in html
    assert '<span class="tag1">Rust</span>' in html


def test_run_inject_requires_project_markers(tmp_path: Path) -> None:
    _seed_artifact(tmp_path)
    (tmp_path / "index.html").write_text("<html></html>", encoding="utf-8")
    orchestrator = Orchestrator()
    orchestrator.run_prerender(str(tmp_path))

    with pytest.raises(MarkerError):
        orchestrator.run_inject(str(tmp_path))
