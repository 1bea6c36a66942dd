"""Async GitHub REST client used by the enrichment pipeline."""

from __future__ import annotations

from typing import Any, List, Optional

import httpx

from ..logging import get_logger

_EXCERPT_LIMIT = 250


class RemoteError(RuntimeError):
    """Raised for non-404 GitHub API failures."""

    def __init__(self, url: str, status: Optional[int], excerpt: str = "") -> None:
        self.url = url
        self.status = status
        self.excerpt = excerpt
        detail = f"GitHub API error {status}" if status is not None else "GitHub API error"
        if excerpt:
            detail = f"{detail} | {excerpt}"
        super().__init__(f"{detail} ({url})")


class RemoteTimeout(RemoteError):
    """Raised when a request exceeds the configured timeout."""

    def __init__(self, url: str, timeout: float | None) -> None:
        super().__init__(url, None, f"timed out after {timeout}s" if timeout else "timed out")


class ListingError(RuntimeError):
    """Raised when the repository listing response has an unexpected shape."""


class GitHubClient:
    """Issues authenticated requests against the GitHub REST API.

    A 404 response is reported as ``None`` so callers can treat optional
    resources (manifests, image folders) as absent. Every other non-2xx status
    raises :class:`RemoteError`.
    """

    def __init__(
        self,
        token: str,
        *,
        api_base: str = "https://api.github.com",
        api_version: str = "2022-11-28",
        timeout: float | None = 20.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.logger = get_logger("github")
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": api_version,
            "User-Agent": "portfolio-repo-fetcher",
        }
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.api_base}/{path.lstrip('/')}"

    async def fetch_resource(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Return decoded JSON for ``path``, or ``None`` when GitHub answers 404."""
        url = self.url_for(path)
        self.logger.debug("Fetching %s", url)
        try:
            response = await self._client.get(
                url, headers=self._headers, params=params, timeout=self.timeout
            )
        except httpx.TimeoutException as exc:
            raise RemoteTimeout(url, self.timeout) from exc
        except httpx.HTTPError as exc:
            raise RemoteError(url, None, str(exc)) from exc

        if response.status_code == 404:
            self.logger.debug("404 Not Found: %s", url)
            return None
        if not response.is_success:
            raise RemoteError(url, response.status_code, response.text[:_EXCERPT_LIMIT])
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteError(url, response.status_code, "response body is not JSON") from exc

    async def list_repositories(self, owner: str, *, per_page: int = 100) -> List[dict[str, Any]]:
        """Return every repository for ``owner``, following pagination."""
        repos: List[dict[str, Any]] = []
        page = 1
        while True:
            payload = await self.fetch_resource(
                f"users/{owner}/repos",
                params={"per_page": per_page, "sort": "updated", "page": page},
            )
            if not isinstance(payload, list):
                raise ListingError(
                    f"Unexpected response for repos list of {owner} (page {page})"
                )
            repos.extend(item for item in payload if isinstance(item, dict))
            if len(payload) < per_page:
                break
            page += 1
        return repos

    async def list_directory(self, owner: str, repo: str, path: str) -> Any:
        return await self.fetch_resource(f"repos/{owner}/{repo}/contents/{path}")

    async def fetch_file(self, owner: str, repo: str, path: str) -> Any:
        return await self.fetch_resource(f"repos/{owner}/{repo}/contents/{path}")


__all__ = ["GitHubClient", "ListingError", "RemoteError", "RemoteTimeout"]
