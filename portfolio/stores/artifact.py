"""Persistence of the enriched project list (data/repos.json)."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import List, Sequence

from ..logging import get_logger
from ..models import EnrichedProject


class PersistenceError(RuntimeError):
    """Raised when the artifact cannot be written."""


class ArtifactError(RuntimeError):
    """Raised when the artifact is missing or cannot be parsed."""


class ProjectStore:
    """Reads and replaces the JSON artifact consumed by the site."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.logger = get_logger("store")

    def persist(self, projects: Sequence[EnrichedProject]) -> Path:
        try:
            payload = json.dumps(
                [project.to_dict() for project in projects], indent=2, allow_nan=False
            )
        except ValueError as exc:
            raise PersistenceError(f"Refusing to write {self.path}: {exc}") from exc
        self.logger.info("Writing %d repos to %s", len(projects), self.path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Readers must never observe a partially written artifact.
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload + "\n")
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise PersistenceError(f"Unable to write {self.path}: {exc}") from exc
        return self.path

    def load(self) -> List[EnrichedProject]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ArtifactError(f"Missing {self.path}. Run `portfolio fetch` first.") from exc
        except OSError as exc:
            raise ArtifactError(f"Unable to read {self.path}: {exc}") from exc
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ArtifactError(f"Unable to parse {self.path}: {exc}") from exc
        if not isinstance(data, list):
            raise ArtifactError(f"{self.path} must contain a JSON list")
        return [EnrichedProject.from_dict(item) for item in data if isinstance(item, dict)]


__all__ = ["ArtifactError", "PersistenceError", "ProjectStore"]
