from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigError
from .utils import parse_bool, parse_float, parse_int

try:
    import tomllib as toml
except ImportError:
    import tomli as toml

import yaml

DEFAULT_SITE_NAME = "Ali in Drafts"
DEFAULT_DESCRIPTION = "Reading notes and highlights captured in markdown."
DEFAULT_TAGLINE = "A space for drafts, doubts, and ideas that aren't done yet"
DEFAULT_FEED_PATH = "rss.xml"
DEFAULT_PORT = 8080
DEFAULT_LOOKUP_TIMEOUT = 5.0
PACKAGE_LAYOUT = Path(__file__).parent / "templates" / "base.html"


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        try:
            data = toml.loads(text)
        except toml.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
        return data
    if suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"YAML config must be a mapping: {path}")
        return data
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"JSON config must be a mapping: {path}")
    return data


@dataclass(frozen=True)
class SiteSettings:
    posts_dir: Path = Path("posts")
    output_dir: Path = Path("dist")
    site_name: str = DEFAULT_SITE_NAME
    site_description: str = DEFAULT_DESCRIPTION
    site_tagline: str = DEFAULT_TAGLINE
    site_url: str = ""
    feed_path: str = DEFAULT_FEED_PATH
    layout_path: Path | None = None
    escape_html: bool = False
    enrich_covers: bool = False
    lookup_timeout: float = DEFAULT_LOOKUP_TIMEOUT
    port: int = DEFAULT_PORT

    @property
    def base_url(self) -> str:
        return self.site_url.strip().rstrip("/")


def resolve_layout(value: str, config_path: Path) -> Path | None:
    value = (value or "").strip()
    if not value:
        return None
    path = Path(value)
    if not path.is_absolute():
        path = config_path.resolve().parent / path
    return path


def settings_from_config(config: dict, config_path: Path) -> SiteSettings:
    def cfg_str(key: str, default: str) -> str:
        value = config.get(key)
        return default if value is None else str(value)

    site_url = config.get("site_url")
    if site_url is None:
        site_url = os.environ.get("SITE_URL", "")
    port = config.get("port")
    if port is None:
        port = os.environ.get("PORT")
    return SiteSettings(
        posts_dir=Path(cfg_str("posts", "posts")),
        output_dir=Path(cfg_str("output", "dist")),
        site_name=cfg_str("site_name", DEFAULT_SITE_NAME),
        site_description=cfg_str("site_description", DEFAULT_DESCRIPTION),
        site_tagline=cfg_str("site_tagline", DEFAULT_TAGLINE),
        site_url=str(site_url),
        feed_path=cfg_str("feed_path", DEFAULT_FEED_PATH).lstrip("/"),
        layout_path=resolve_layout(cfg_str("layout", ""), config_path),
        escape_html=parse_bool(config.get("escape_html")),
        enrich_covers=parse_bool(config.get("enrich_covers")),
        lookup_timeout=parse_float(config.get("lookup_timeout"), DEFAULT_LOOKUP_TIMEOUT),
        port=parse_int(port, DEFAULT_PORT),
    )
