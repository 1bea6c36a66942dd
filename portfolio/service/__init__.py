"""Service mode serving the project grid over HTTP."""

from .app import ProjectFeed, RefreshState, create_app, run_service, start_polling, stop_polling

__all__ = [
    "ProjectFeed",
    "RefreshState",
    "create_app",
    "run_service",
    "start_polling",
    "stop_polling",
]
