"""Loading and validation of per-repository portfolio.json manifests."""

from __future__ import annotations

import base64
import binascii
import json
import math
from typing import Any, Mapping

from ..logging import get_logger
from ..models import Manifest, RepositorySummary, normalize_summary
from .client import GitHubClient


class ManifestRejected(Exception):
    """Base class for reasons a repository's manifest cannot be used."""

    reason = "rejected"

    def __init__(self, repo: str, detail: str = "") -> None:
        self.repo = repo
        self.detail = detail
        message = f"{repo}: {self.reason}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ManifestNotFound(ManifestRejected):
    reason = "manifest not found"


class MalformedEnvelope(ManifestRejected):
    reason = "malformed contents envelope"


class InvalidManifestJson(ManifestRejected):
    reason = "invalid JSON"


class SchemaViolation(ManifestRejected):
    reason = "missing or invalid fields"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def decode_envelope(repo: str, envelope: Any) -> Any:
    """Decode the base64 JSON body of a contents API file envelope."""
    if not isinstance(envelope, Mapping) or envelope.get("type") != "file":
        raise MalformedEnvelope(repo, "not a file")
    content = envelope.get("content")
    if not isinstance(content, str) or not content.strip():
        raise MalformedEnvelope(repo, "empty content")
    encoding = envelope.get("encoding", "base64")
    if encoding != "base64":
        raise MalformedEnvelope(repo, f"unsupported encoding {encoding!r}")

    try:
        raw = base64.b64decode(content)
        return json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise InvalidManifestJson(repo, str(exc)) from exc


def parse_manifest(repo: str, data: Any) -> Manifest:
    """Validate decoded manifest JSON and build a :class:`Manifest`."""
    if not isinstance(data, dict):
        raise InvalidManifestJson(repo, "root is not an object")

    summary = data.get("Summary")
    priority = data.get("Priority")
    if not isinstance(summary, list):
        raise SchemaViolation(repo, "Summary must be a list")
    if isinstance(priority, bool) or not isinstance(priority, (int, float)):
        raise SchemaViolation(repo, "Priority must be a number")
    if not math.isfinite(priority):
        raise SchemaViolation(repo, "Priority must be finite")

    link = data.get("Link")
    return Manifest(
        summary=normalize_summary(summary),
        priority=priority,
        link=link if isinstance(link, str) and link else None,
    )


class ManifestLoader:
    """Fetches and validates ``portfolio.json`` for a repository."""

    def __init__(
        self, client: GitHubClient, owner: str, *, path: str = "portfolio.json"
    ) -> None:
        self.client = client
        self.owner = owner
        self.path = path
        self.logger = get_logger("manifests")

    async def load(self, repo: RepositorySummary) -> Manifest:
        """Return the repository's manifest or raise a :class:`ManifestRejected`.

        :class:`~portfolio.github.client.RemoteError` propagates unchanged.
        """
        envelope = await self.client.fetch_file(self.owner, repo.name, self.path)
        if envelope is None:
            raise ManifestNotFound(repo.name, self.path)
        manifest = parse_manifest(repo.name, decode_envelope(repo.name, envelope))
        self.logger.info(
            "%s: loaded %s (Priority=%s, Summary items=%d%s)",
            repo.name,
            self.path,
            manifest.priority,
            len(manifest.summary),
            f", Link={manifest.link}" if manifest.link else "",
        )
        return manifest


__all__ = [
    "InvalidManifestJson",
    "MalformedEnvelope",
    "ManifestLoader",
    "ManifestNotFound",
    "ManifestRejected",
    "SchemaViolation",
    "decode_envelope",
    "parse_manifest",
]
