from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from pathlib import Path

from .content import parse_date, parse_front_matter
from .markup import render_markdown

MAX_RATING = 5
FULL_STAR = "&#9733;"
# Same glyph as FULL_STAR; half ratings render as a filled star.
HALF_STAR = "&#9733;"
EMPTY_STAR = "&#9734;"
MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    text = NON_SLUG_RE.sub("-", text.lower())
    return text.strip("-") or "post"


def clamp_rating(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    if math.isinf(number):
        return float(MAX_RATING) if number > 0 else 0.0
    return min(float(MAX_RATING), max(0.0, math.floor(number * 2 + 0.5) / 2))


def render_stars(rating: object) -> str:
    safe = clamp_rating(rating)
    if safe is None:
        return ""
    full = math.floor(safe)
    half = 1 if safe % 1 else 0
    empty = MAX_RATING - full - half
    return f"{FULL_STAR * full}{HALF_STAR * half}{EMPTY_STAR * empty}"


def format_rating(rating: float) -> str:
    return f"{rating:g}"


def format_date_label(value: str | None) -> str:
    parsed = parse_date(value)
    if parsed is None:
        return ""
    return f"{MONTH_ABBR[parsed.month - 1]} {parsed.day}, {parsed.year}"


@dataclass
class Entry:
    title: str
    slug: str
    body_markdown: str
    body_html: str
    raw_date: str = ""
    date_label: str = ""
    summary: str = ""
    cover_url: str = ""
    rating: float | None = None
    tags_raw: str = ""
    metadata: dict[str, str] = field(default_factory=dict)
    source: Path | None = None

    @property
    def has_rating(self) -> bool:
        return self.rating is not None

    def set_cover(self, url: str) -> None:
        self.cover_url = url
        self.metadata["cover"] = url


def build_entry(
    meta: dict,
    body: str,
    identifier: str,
    source: Path | None = None,
    escape_html: bool = False,
) -> Entry:
    title = meta.get("title") or identifier
    return Entry(
        title=title,
        slug=slugify(meta.get("slug") or title),
        body_markdown=body,
        body_html=render_markdown(body, escape_html=escape_html),
        raw_date=meta.get("date", ""),
        date_label=format_date_label(meta.get("date")),
        summary=meta.get("summary", ""),
        cover_url=meta.get("cover", ""),
        rating=clamp_rating(meta.get("rating")),
        tags_raw=meta.get("tags", ""),
        metadata=meta,
        source=source,
    )


def load_entry(path: Path, escape_html: bool = False) -> Entry:
    meta, body = parse_front_matter(path.read_text(encoding="utf-8", errors="replace"))
    return build_entry(meta, body, path.stem, source=path, escape_html=escape_html)
