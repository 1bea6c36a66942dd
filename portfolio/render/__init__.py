"""Presentation helpers: category badges, project cards, site sections."""

from .cards import render_category_summary, render_project_grid, render_unavailable, visible_projects
from .categories import OTHER, classify, summarize_categories
from .markers import MarkerError, MarkerManager

__all__ = [
    "MarkerError",
    "MarkerManager",
    "OTHER",
    "classify",
    "render_category_summary",
    "render_project_grid",
    "render_unavailable",
    "summarize_categories",
    "visible_projects",
]
