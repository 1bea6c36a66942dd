"""FastAPI application serving the project grid from the persisted artifact."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import AsyncIterator, List, Optional

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from ..config import CategoryConfig, PortfolioConfig, load_config
from ..logging import get_logger
from ..models import EnrichedProject
from ..render.cards import render_category_summary, render_project_grid, render_unavailable, visible_projects
from ..render.categories import summarize_categories
from ..stores import ArtifactError, ProjectStore

DEFAULT_POLL_INTERVAL = 300.0


@dataclass
class RefreshState:
    """Polling bookkeeping owned by a single feed."""

    last_refresh_at: Optional[datetime] = None
    poll_task: Optional[asyncio.Task[None]] = None


class ProjectFeed:
    """Holds the last successfully parsed project list."""

    def __init__(self, store: ProjectStore) -> None:
        self.store = store
        self.state = RefreshState()
        self.last_error: Optional[str] = None
        self._projects: Optional[List[EnrichedProject]] = None
        self.logger = get_logger("service")

    def refresh(self) -> bool:
        """Reload the artifact; keep the previous list when it cannot be parsed."""
        try:
            projects = self.store.load()
        except ArtifactError as exc:
            # The artifact may be mid-write; the next interval retries.
            self.last_error = str(exc)
            self.logger.warning("Project refresh failed: %s", exc)
            return False
        self._projects = projects
        self.last_error = None
        self.state.last_refresh_at = datetime.now(UTC)
        return True

    def current(self) -> Optional[List[EnrichedProject]]:
        if self._projects is None:
            self.refresh()
        return self._projects


async def _poll(feed: ProjectFeed, interval: float) -> None:
    while True:
        await asyncio.sleep(interval)
        await asyncio.to_thread(feed.refresh)


def start_polling(feed: ProjectFeed, state: RefreshState, interval: float) -> None:
    """Begin periodic refreshes unless a poll task is already running."""
    if state.poll_task is not None and not state.poll_task.done():
        return
    state.poll_task = asyncio.get_running_loop().create_task(_poll(feed, interval))


async def stop_polling(state: RefreshState) -> None:
    task = state.poll_task
    state.poll_task = None
    if task is None:
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


class CategoryPayload(BaseModel):
    name: str
    label: str
    icon: str
    count: int


class ProjectsResponse(BaseModel):
    projects: List[dict]
    categories: List[CategoryPayload]
    other_count: int
    last_refresh_at: Optional[datetime] = None


class HealthResponse(BaseModel):
    status: str


def create_app(
    config: PortfolioConfig,
    *,
    feed: ProjectFeed | None = None,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> FastAPI:
    """Create the FastAPI application exposing the project grid."""
    feed = feed or ProjectFeed(ProjectStore(config.artifact_path))
    categories: CategoryConfig = config.categories

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        await asyncio.to_thread(feed.refresh)
        start_polling(feed, feed.state, poll_interval)
        try:
            yield
        finally:
            await stop_polling(feed.state)

    app = FastAPI(title="Portfolio Service", version="1.0.0", lifespan=lifespan)
    app.state.feed = feed

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/projects", response_model=ProjectsResponse)
    async def projects() -> ProjectsResponse | JSONResponse:
        current = await asyncio.to_thread(feed.current)
        if current is None:
            return JSONResponse(
                status_code=503,
                content={"detail": "Unable to load projects", "error": feed.last_error},
            )
        shown = visible_projects(current)
        buckets, other_count = summarize_categories(shown, categories)
        return ProjectsResponse(
            projects=[project.to_dict() for project in shown],
            categories=[
                CategoryPayload(name=b.name, label=b.label, icon=b.icon, count=b.count)
                for b in buckets
            ],
            other_count=other_count,
            last_refresh_at=feed.state.last_refresh_at,
        )

    @app.get("/projects.html", response_class=HTMLResponse)
    async def projects_html() -> HTMLResponse:
        current = await asyncio.to_thread(feed.current)
        if current is None:
            return HTMLResponse(render_unavailable())
        shown = visible_projects(current)
        buckets, other_count = summarize_categories(shown, categories)
        summary = render_category_summary(
            buckets, other_count, other_label=categories.other_label
        )
        return HTMLResponse(summary + "\n" + render_project_grid(shown, categories))

    return app


def run_service(
    root: str = ".", host: str = "0.0.0.0", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(load_config(Path(root)))
    uvicorn.run(app, host=host, port=port)


__all__ = [
    "ProjectFeed",
    "RefreshState",
    "create_app",
    "run_service",
    "start_polling",
    "stop_polling",
]
