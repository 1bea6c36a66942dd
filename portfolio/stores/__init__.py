"""Persistent stores for generated artifacts."""

from .artifact import ArtifactError, PersistenceError, ProjectStore

__all__ = ["ArtifactError", "PersistenceError", "ProjectStore"]
