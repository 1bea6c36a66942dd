"""Pipeline orchestration for fetch/prerender/inject flows."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable, Dict, List, Mapping

from .config import PortfolioConfig, load_config, resolve_token
from .github.client import GitHubClient
from .github.manifests import ManifestLoader
from .github.thumbnails import ThumbnailResolver
from .logging import get_logger
from .models import EnrichedProject, RepositorySummary
from .pipeline import EnrichmentPipeline
from .render.cards import render_category_summary, render_project_grid, visible_projects
from .render.categories import summarize_categories
from .render.markers import MarkerManager
from .render.site import SKILL_GROUPS, load_site, render_featured, render_tags, render_work
from .stores import ProjectStore

ClientFactory = Callable[[PortfolioConfig, str], GitHubClient]

PROJECTS_MARKER = "PROJECTS_PRERENDER"
CATEGORIES_MARKER = "PROJECT_CATEGORIES"


def _default_client(config: PortfolioConfig, token: str) -> GitHubClient:
    return GitHubClient(
        token,
        api_base=config.github.api_base,
        api_version=config.github.api_version,
        timeout=config.github.request_timeout,
    )


class Orchestrator:
    """Coordinates the build steps that produce the site's data and fragments."""

    def __init__(
        self,
        *,
        client_factory: ClientFactory | None = None,
        environ: Mapping[str, str] | None = None,
        marker_manager: MarkerManager | None = None,
    ) -> None:
        self.client_factory = client_factory or _default_client
        self.environ = environ
        self.marker_manager = marker_manager or MarkerManager()
        self.logger = get_logger("orchestrator")

    def run_fetch(self, path: str) -> List[EnrichedProject]:
        """Fetch, enrich and persist the repositories of the configured account."""
        config = load_config(Path(path))
        token = resolve_token(config, self.environ)
        projects = asyncio.run(self._fetch(config, token))
        ProjectStore(config.artifact_path).persist(projects)
        self.logger.info("%s updated successfully", config.output.artifact_name)
        return projects

    async def _fetch(self, config: PortfolioConfig, token: str) -> List[EnrichedProject]:
        owner = config.github.owner
        async with self.client_factory(config, token) as client:
            self.logger.info("Fetching all repos for user %s", owner)
            payloads = await client.list_repositories(owner, per_page=config.github.per_page)
            repos = [RepositorySummary.from_payload(item) for item in payloads]
            self.logger.info("Retrieved %d repos", len(repos))

            pipeline = EnrichmentPipeline(
                ThumbnailResolver(
                    client,
                    owner,
                    images_dir=config.content.images_dir,
                    priority_names=config.content.thumbnail_names,
                    default=config.content.default_thumbnail,
                ),
                ManifestLoader(client, owner, path=config.content.manifest_path),
                batch_size=config.github.batch_size,
            )
            return await pipeline.enrich(repos)

    def run_prerender(self, path: str) -> Dict[str, Path]:
        """Render HTML fragments from the artifact and site.json."""
        config = load_config(Path(path))
        projects = ProjectStore(config.artifact_path).load()
        shown = visible_projects(projects)
        buckets, other_count = summarize_categories(shown, config.categories)

        fragments: Dict[str, str] = {
            config.output.projects_fragment: render_project_grid(shown, config.categories),
            config.output.categories_fragment: render_category_summary(
                buckets, other_count, other_label=config.categories.other_label
            ),
        }
        if config.site_json_path.exists():
            site = load_site(config.site_json_path)
            fragments[config.output.featured_fragment] = render_featured(site.get("featuredProject"))
            fragments[config.output.work_fragment] = render_work(site.get("workExperience"))
        else:
            self.logger.warning("%s not found, skipping featured and work fragments", config.site_json_path)

        written: Dict[str, Path] = {}
        config.data_dir.mkdir(parents=True, exist_ok=True)
        for name, html in fragments.items():
            target = config.data_dir / name
            target.write_text(html.strip() + "\n", encoding="utf-8")
            written[name] = target
            self.logger.info("Wrote %s", target)
        self.logger.info("Rendered %d project cards", len(shown))
        return written

    def run_inject(self, path: str) -> Path:
        """Inject prerendered fragments into index.html between marker comments."""
        config = load_config(Path(path))
        index_path = config.index_path
        if not index_path.exists():
            raise FileNotFoundError(f"Missing {index_path}")
        fragment_path = config.data_dir / config.output.projects_fragment
        if not fragment_path.exists():
            raise FileNotFoundError(f"Missing {fragment_path}. Run `portfolio prerender` first.")

        html = index_path.read_text(encoding="utf-8")
        html = self.marker_manager.inject(
            html, PROJECTS_MARKER, fragment_path.read_text(encoding="utf-8")
        )

        categories_path = config.data_dir / config.output.categories_fragment
        if categories_path.exists() and self.marker_manager.has_block(html, CATEGORIES_MARKER):
            html = self.marker_manager.inject(
                html, CATEGORIES_MARKER, categories_path.read_text(encoding="utf-8")
            )

        if config.site_json_path.exists():
            site = load_site(config.site_json_path)
            for key, group in SKILL_GROUPS.items():
                html = self.marker_manager.inject(html, key, render_tags(site.get(group)))

        index_path.write_text(html, encoding="utf-8")
        self.logger.info("Injected prerendered content into %s", index_path)
        return index_path


__all__ = ["CATEGORIES_MARKER", "Orchestrator", "PROJECTS_MARKER"]
