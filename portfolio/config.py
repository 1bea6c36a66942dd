"""Configuration loading for portfolio builds (.portfolio.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

CONFIG_FILENAME = ".portfolio.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


class CredentialError(RuntimeError):
    """Raised when no GitHub credential is available in the environment."""


@dataclass
class GitHubConfig:
    """GitHub account and request settings."""

    owner: str = "jerejoensuu"
    api_base: str = "https://api.github.com"
    api_version: str = "2022-11-28"
    per_page: int = 100
    request_timeout: float = 20.0
    batch_size: int = 5
    token_env: List[str] = field(
        default_factory=lambda: ["PORTFOLIO_GITHUB_TOKEN", "ACTIONS_TOKEN", "GITHUB_TOKEN"]
    )


@dataclass
class ContentConfig:
    """Where per-repository portfolio content lives."""

    manifest_path: str = "portfolio.json"
    images_dir: str = "images"
    default_thumbnail: str = "images/blank-thumbnail.jpg"
    thumbnail_names: List[str] = field(
        default_factory=lambda: [
            "thumbnail.gif",
            "thumbnail.jpeg",
            "thumbnail.jpg",
            "thumbnail.png",
        ]
    )


@dataclass
class OutputConfig:
    """Locations of generated artifacts relative to the site root."""

    data_dir: str = "data"
    artifact_name: str = "repos.json"
    projects_fragment: str = "repos.prerender.html"
    categories_fragment: str = "categories.prerender.html"
    featured_fragment: str = "featured.prerender.html"
    work_fragment: str = "work.prerender.html"
    index_html: str = "index.html"
    site_json: str = "data/site.json"


@dataclass(frozen=True)
class CategoryRule:
    """Maps topics containing any of ``patterns`` to a named category."""

    name: str
    label: str
    icon: str
    patterns: tuple[str, ...]
    weight: int = 0

    def matches(self, topics: Sequence[str]) -> bool:
        return any(pattern in str(topic) for topic in topics for pattern in self.patterns)


DEFAULT_CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule("unity", "Unity", "images/logos/unity-logo.svg", ("unity",), 4),
    CategoryRule("unreal", "Unreal Engine", "images/logos/unreal-logo.svg", ("unreal",), 3),
    CategoryRule("python", "Python", "images/logos/python-logo.svg", ("python",), 2),
    CategoryRule("minecraft", "Minecraft", "images/logos/minecraft-logo.svg", ("minecraft",), 1),
)


@dataclass
class CategoryConfig:
    """Category badge selection settings."""

    rules: List[CategoryRule] = field(default_factory=lambda: list(DEFAULT_CATEGORY_RULES))
    always_include: List[str] = field(default_factory=lambda: ["unity", "unreal", "python"])
    max_visible: int = 3
    other_label: str = "Other"


@dataclass
class PortfolioConfig:
    """Represents the settings defined in .portfolio.yml."""

    root: Path
    github: GitHubConfig = field(default_factory=GitHubConfig)
    content: ContentConfig = field(default_factory=ContentConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    categories: CategoryConfig = field(default_factory=CategoryConfig)

    @property
    def data_dir(self) -> Path:
        return self.root / self.output.data_dir

    @property
    def artifact_path(self) -> Path:
        return self.data_dir / self.output.artifact_name

    @property
    def index_path(self) -> Path:
        return self.root / self.output.index_html

    @property
    def site_json_path(self) -> Path:
        return self.root / self.output.site_json


def load_config(config_path: Path) -> PortfolioConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return PortfolioConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    github = GitHubConfig()
    github_data = _as_dict(data.get("github"))
    if github_data:
        github.owner = _as_str(github_data.get("owner")) or github.owner
        github.api_base = (_as_str(github_data.get("api_base")) or github.api_base).rstrip("/")
        github.api_version = _as_str(github_data.get("api_version")) or github.api_version
        per_page = _as_int(github_data.get("per_page"))
        if per_page is not None:
            github.per_page = min(max(per_page, 1), 100)
        timeout = _as_float(github_data.get("request_timeout"))
        if timeout is not None and timeout > 0:
            github.request_timeout = timeout
        batch_size = _as_int(github_data.get("batch_size"))
        if batch_size is not None:
            github.batch_size = max(batch_size, 1)
        token_env = _as_str_list(github_data.get("token_env"))
        if token_env:
            github.token_env = token_env

    content = ContentConfig()
    content_data = _as_dict(data.get("content"))
    if content_data:
        content.manifest_path = _as_str(content_data.get("manifest_path")) or content.manifest_path
        content.images_dir = (_as_str(content_data.get("images_dir")) or content.images_dir).strip("/")
        content.default_thumbnail = (
            _as_str(content_data.get("default_thumbnail")) or content.default_thumbnail
        )
        names = _as_str_list(content_data.get("thumbnail_names"))
        if names:
            content.thumbnail_names = [name.lower() for name in names]

    output = OutputConfig()
    output_data = _as_dict(data.get("output"))
    for key in (
        "data_dir",
        "artifact_name",
        "projects_fragment",
        "categories_fragment",
        "featured_fragment",
        "work_fragment",
        "index_html",
        "site_json",
    ):
        value = _as_str(output_data.get(key))
        if value:
            setattr(output, key, value)

    categories = CategoryConfig()
    category_data = _as_dict(data.get("categories"))
    if category_data:
        if "rules" in category_data:
            categories.rules = _parse_rules(category_data.get("rules"))
        if "always_include" in category_data:
            categories.always_include = _as_str_list(category_data.get("always_include"))
        max_visible = _as_int(category_data.get("max_visible"))
        if max_visible is not None:
            categories.max_visible = max(max_visible, 0)
        categories.other_label = _as_str(category_data.get("other_label")) or categories.other_label

    return PortfolioConfig(
        root=root,
        github=github,
        content=content,
        output=output,
        categories=categories,
    )


def resolve_token(config: PortfolioConfig, environ: Mapping[str, str] | None = None) -> str:
    """Return the first configured GitHub credential found in the environment."""
    env = os.environ if environ is None else environ
    for key in config.github.token_env:
        value = (env.get(key) or "").strip()
        if value:
            return value
    names = ", ".join(config.github.token_env) or "(none configured)"
    raise CredentialError(f"No GitHub token found. Set one of: {names}")


def _parse_rules(value: Any) -> List[CategoryRule]:
    if not isinstance(value, list):
        raise ConfigError("categories.rules must be a list")
    rules: List[CategoryRule] = []
    for index, raw in enumerate(value):
        if not isinstance(raw, dict):
            raise ConfigError(f"categories.rules[{index}] must be a mapping")
        name = _as_str(raw.get("name"))
        if not name:
            raise ConfigError(f"categories.rules[{index}] is missing a name")
        patterns = _as_str_list(raw.get("patterns")) or [name]
        rules.append(
            CategoryRule(
                name=name,
                label=_as_str(raw.get("label")) or name.title(),
                icon=_as_str(raw.get("icon")) or "",
                patterns=tuple(patterns),
                weight=_as_int(raw.get("weight")) or 0,
            )
        )
    return rules


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
