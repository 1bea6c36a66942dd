"""CLI entrypoints for portfolio build commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, CredentialError
from .github.client import ListingError, RemoteError
from .logging import configure_logging
from .orchestrator import Orchestrator
from .render.markers import MarkerError
from .render.site import SiteDataError
from .stores import ArtifactError, PersistenceError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_root_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        default=".",
        help="Path to the site root containing .portfolio.yml (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portfolio",
        description="Build the data and prerendered fragments for a GitHub portfolio site.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Fetch repositories with a portfolio.json and write data/repos.json.",
    )
    _add_verbose_option(fetch_parser, suppress_default=True)
    _add_root_argument(fetch_parser)

    prerender_parser = subparsers.add_parser(
        "prerender",
        help="Render HTML fragments from data/repos.json and data/site.json.",
    )
    _add_verbose_option(prerender_parser, suppress_default=True)
    _add_root_argument(prerender_parser)

    inject_parser = subparsers.add_parser(
        "inject",
        help="Inject prerendered fragments into index.html between marker comments.",
    )
    _add_verbose_option(inject_parser, suppress_default=True)
    _add_root_argument(inject_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve the project grid over HTTP, refreshing from data/repos.json.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_root_argument(serve_parser)
    serve_parser.add_argument("--host", default="0.0.0.0", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for portfolio commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    orchestrator = Orchestrator()

    if args.command == "fetch":
        try:
            projects = orchestrator.run_fetch(args.root)
        except CredentialError as exc:
            parser.exit(1, f"{exc}\n")
        except (ConfigError, ListingError, RemoteError, PersistenceError) as exc:
            parser.exit(1, f"portfolio fetch failed: {exc}\n")
        except Exception as exc:  # pragma: no cover - defensive guard
            parser.exit(1, f"portfolio fetch failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Wrote {len(projects)} projects")
    elif args.command == "prerender":
        try:
            written = orchestrator.run_prerender(args.root)
        except (ConfigError, ArtifactError, SiteDataError, OSError) as exc:
            parser.exit(1, f"portfolio prerender failed: {exc}\n")
        for path in written.values():
            print(f"Wrote {_relativize(path)}")
    elif args.command == "inject":
        try:
            index_path = orchestrator.run_inject(args.root)
        except (ConfigError, MarkerError, SiteDataError, OSError) as exc:
            parser.exit(1, f"portfolio inject failed: {exc}\n")
        print(f"Injected prerendered content into {_relativize(index_path)}")
    elif args.command == "serve":  # pragma: no cover - integration path
        from .service import run_service

        run_service(args.root, host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
