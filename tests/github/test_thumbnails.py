"""Tests for thumbnail selection and resolution."""

from __future__ import annotations

import asyncio

from portfolio.github.thumbnails import ThumbnailResolver, select_thumbnail
from portfolio.models import RepositorySummary
from tests._fixtures.github_api import FakeGitHub

PRIORITY = ["thumbnail.gif", "thumbnail.jpeg", "thumbnail.jpg", "thumbnail.png"]
DEFAULT = "images/blank-thumbnail.jpg"


def _entries(*names: str) -> list[dict[str, str]]:
    return [{"name": name, "download_url": f"https://raw/{name}"} for name in names]


def test_priority_name_matches_case_insensitively_before_gif() -> None:
    url = select_thumbnail(_entries("logo.gif", "thumbnail.PNG"), PRIORITY, DEFAULT)
    assert url == "https://raw/thumbnail.PNG"


def test_priority_names_follow_configured_order() -> None:
    url = select_thumbnail(_entries("thumbnail.png", "thumbnail.jpg", "Thumbnail.GIF"), PRIORITY, DEFAULT)
    assert url == "https://raw/Thumbnail.GIF"


def test_any_gif_beats_static_images() -> None:
    url = select_thumbnail(_entries("shot.png", "demo.gif"), PRIORITY, DEFAULT)
    assert url == "https://raw/demo.gif"


def test_static_image_fallback_and_default() -> None:
    assert select_thumbnail(_entries("notes.txt", "Shot.JPEG"), PRIORITY, DEFAULT) == "https://raw/Shot.JPEG"
    assert select_thumbnail(_entries("notes.txt"), PRIORITY, DEFAULT) == DEFAULT
    assert select_thumbnail([], PRIORITY, DEFAULT) == DEFAULT


def test_entries_without_download_url_are_ignored() -> None:
    entries = [{"name": "thumbnail.gif", "download_url": None}] + _entries("other.png")
    assert select_thumbnail(entries, PRIORITY, DEFAULT) == "https://raw/other.png"


def _repo(name: str) -> RepositorySummary:
    return RepositorySummary(name=name, url=f"https://github.com/octo/{name}")


def test_resolver_uses_directory_listing(github: FakeGitHub) -> None:
    github.add_repo("game", images=["thumbnail.PNG", "logo.gif"])

    async def scenario():
        async with github.client() as client:
            return await ThumbnailResolver(client, "octo").resolve(_repo("game"))

    assert asyncio.run(scenario()) == "https://raw.example/game/images/thumbnail.PNG"


def test_resolver_defaults_when_directory_missing(github: FakeGitHub) -> None:
    github.add_repo("bare")

    async def scenario():
        async with github.client() as client:
            return await ThumbnailResolver(client, "octo", default="img/none.png").resolve(_repo("bare"))

    assert asyncio.run(scenario()) == "img/none.png"


def test_resolver_defaults_on_remote_failure(github: FakeGitHub) -> None:
    github.add_repo("flaky", images=["thumbnail.gif"])
    github.errors["/repos/octo/flaky/contents/images"] = 500
    github.timeouts.add("/repos/octo/slow/contents/images")

    async def scenario():
        async with github.client() as client:
            resolver = ThumbnailResolver(client, "octo")
            return (
                await resolver.resolve(_repo("flaky")),
                await resolver.resolve(_repo("slow")),
            )

    assert asyncio.run(scenario()) == (DEFAULT, DEFAULT)


def test_resolver_defaults_when_images_is_a_file(github: FakeGitHub) -> None:
    github.add_repo("odd")
    github.contents[("odd", "images")] = {"type": "file", "name": "images"}

    async def scenario():
        async with github.client() as client:
            return await ThumbnailResolver(client, "octo").resolve(_repo("odd"))

    assert asyncio.run(scenario()) == DEFAULT
