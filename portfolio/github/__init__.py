"""GitHub API access: client, thumbnail resolution, manifest loading."""

from .client import GitHubClient, ListingError, RemoteError, RemoteTimeout
from .manifests import (
    InvalidManifestJson,
    MalformedEnvelope,
    ManifestLoader,
    ManifestNotFound,
    ManifestRejected,
    SchemaViolation,
)
from .thumbnails import ThumbnailResolver, select_thumbnail

__all__ = [
    "GitHubClient",
    "InvalidManifestJson",
    "ListingError",
    "MalformedEnvelope",
    "ManifestLoader",
    "ManifestNotFound",
    "ManifestRejected",
    "RemoteError",
    "RemoteTimeout",
    "SchemaViolation",
    "ThumbnailResolver",
    "select_thumbnail",
]
