"""Tests for category classification and badge selection."""

from __future__ import annotations

from portfolio.config import CategoryConfig, CategoryRule
from portfolio.models import EnrichedProject
from portfolio.render.categories import OTHER, classify, summarize_categories

RULES = CategoryConfig().rules


def _project(name: str, topics: list[str]) -> EnrichedProject:
    return EnrichedProject(
        name=name, html_url="", thumbnail="", description=None, summary=[], priority=1, topics=topics
    )


def test_classify_uses_first_matching_rule() -> None:
    assert classify(["python", "unity-tools"], RULES) == "unity"
    assert classify(["unreal-engine"], RULES) == "unreal"
    assert classify(["cpython"], RULES) == "python"
    assert classify(["rust"], RULES) == OTHER
    assert classify([], RULES) == OTHER


def test_single_unity3d_project_is_visible() -> None:
    config = CategoryConfig(always_include=["unity", "unreal", "python"], max_visible=3)

    visible, other_count = summarize_categories([_project("a", ["unity3d"])], config)

    assert [(b.name, b.count) for b in visible] == [("unity", 1)]
    assert other_count == 0


def test_always_include_comes_first_then_counts_then_weight() -> None:
    config = CategoryConfig(always_include=["python"], max_visible=3)
    projects = (
        [_project(f"m{i}", ["minecraft"]) for i in range(3)]
        + [_project(f"u{i}", ["unity"]) for i in range(2)]
        + [_project(f"r{i}", ["unreal"]) for i in range(2)]
        + [_project("p", ["python"])]
        + [_project("x", ["go"])]
    )

    visible, other_count = summarize_categories(projects, config)

    # unity and unreal tie on count; unity carries the higher weight.
    assert [b.name for b in visible] == ["python", "minecraft", "unity"]
    assert other_count == len(projects) - sum(b.count for b in visible)
    assert other_count == 3


def test_name_breaks_remaining_ties() -> None:
    rules = [
        CategoryRule("zeta", "Zeta", "", ("zeta",)),
        CategoryRule("alpha", "Alpha", "", ("alpha",)),
    ]
    config = CategoryConfig(rules=rules, always_include=[], max_visible=1)

    visible, other_count = summarize_categories(
        [_project("z", ["zeta"]), _project("a", ["alpha"])], config
    )

    assert [b.name for b in visible] == ["alpha"]
    assert other_count == 1


def test_visible_never_exceeds_limit_and_skips_empty_always_include() -> None:
    config = CategoryConfig(always_include=["unreal", "unity", "python"], max_visible=2)
    projects = [_project("a", ["python"]), _project("b", ["minecraft"]), _project("c", ["python"])]

    visible, other_count = summarize_categories(projects, config)

    assert len(visible) <= 2
    assert [b.name for b in visible] == ["python", "minecraft"]
    assert other_count == 0


def test_zero_slots_puts_everything_in_other() -> None:
    config = CategoryConfig(max_visible=0)
    visible, other_count = summarize_categories([_project("a", ["unity"])], config)
    assert visible == []
    assert other_count == 1
