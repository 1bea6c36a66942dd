"""Marker-delimited fragment injection for index.html."""

from __future__ import annotations


class MarkerError(ValueError):
    """Raised when a marker pair is missing or out of order."""


class MarkerManager:
    """Replaces content between ``<!-- KEY_START -->`` and ``<!-- KEY_END -->``."""

    BEGIN_FMT = "<!-- {key}_START -->"
    END_FMT = "<!-- {key}_END -->"

    def has_block(self, html: str, key: str) -> bool:
        return self.BEGIN_FMT.format(key=key) in html and self.END_FMT.format(key=key) in html

    def inject(self, html: str, key: str, body: str) -> str:
        """Return ``html`` with the block for ``key`` replaced by ``body``."""
        begin = self.BEGIN_FMT.format(key=key)
        end = self.END_FMT.format(key=key)
        start_index = html.find(begin)
        end_index = html.find(end)
        if start_index == -1 or end_index == -1 or end_index <= start_index:
            raise MarkerError(f"Missing or invalid markers: {begin} ... {end}")
        before = html[: start_index + len(begin)]
        after = html[end_index:]
        return f"{before}\n{body.strip()}\n{after}"


__all__ = ["MarkerError", "MarkerManager"]
