"""Category classification and badge selection for the project grid."""

from __future__ import annotations

from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import CategoryConfig, CategoryRule
from ..models import CategoryBucket, EnrichedProject

OTHER = "other"


def match_rule(topics: Sequence[str], rules: Sequence[CategoryRule]) -> Optional[CategoryRule]:
    """Return the first rule whose patterns occur in any topic."""
    for rule in rules:
        if rule.matches(topics):
            return rule
    return None


def classify(topics: Sequence[str], rules: Sequence[CategoryRule]) -> str:
    """Map a topic list onto exactly one category name.

    Rules are evaluated in order and the first match wins, so a repository
    tagged both ``unity`` and ``python`` counts as ``unity``.
    """
    rule = match_rule(topics, rules)
    return rule.name if rule is not None else OTHER


def summarize_categories(
    projects: Sequence[EnrichedProject], config: CategoryConfig
) -> Tuple[List[CategoryBucket], int]:
    """Pick the visible category badges and count everything else as other."""
    counts: Counter[str] = Counter(classify(p.topics, config.rules) for p in projects)
    rules: Dict[str, CategoryRule] = {rule.name: rule for rule in config.rules}
    limit = max(config.max_visible, 0)

    chosen: List[str] = []
    for name in config.always_include:
        if len(chosen) >= limit:
            break
        if name == OTHER or name in chosen or name not in rules:
            continue
        if counts.get(name, 0) > 0:
            chosen.append(name)

    remaining = sorted(
        (name for name in counts if name != OTHER and name not in chosen),
        key=lambda name: (-counts[name], -rules[name].weight, name),
    )
    for name in remaining:
        if len(chosen) >= limit:
            break
        chosen.append(name)

    visible = [
        CategoryBucket(
            name=name,
            count=counts[name],
            label=rules[name].label,
            icon=rules[name].icon,
            tie_break_weight=rules[name].weight,
        )
        for name in chosen
    ]
    other_count = len(projects) - sum(bucket.count for bucket in visible)
    return visible, other_count


__all__ = ["OTHER", "classify", "match_rule", "summarize_categories"]
