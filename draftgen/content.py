from __future__ import annotations

import datetime as dt
import email.utils
from pathlib import Path

from .render import write_text

DELIMITER = "---"
WRITTEN_DATE_FORMATS = (
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%Y/%m/%d",
    "%m/%d/%Y",
)


def parse_front_matter(text: str) -> tuple[dict, str]:
    clean_text = text.lstrip("\ufeff").replace("\r\n", "\n")
    lines = clean_text.split("\n")
    if not lines or lines[0].strip() != DELIMITER:
        return {}, clean_text.strip()

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == DELIMITER:
            end = i
            break
    if end is None:
        return {}, clean_text.strip()

    meta = {}
    for line in lines[1:end]:
        line = line.strip()
        if not line or ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip().lower()
        if not key:
            continue
        meta[key] = value.strip()
    body = "\n".join(lines[end + 1 :]).strip()
    return meta, body


def format_front_matter(meta: dict, body: str) -> str:
    header = "\n".join(f"{key}: {value}" for key, value in meta.items())
    return f"{DELIMITER}\n{header}\n{DELIMITER}\n\n{body}\n"


def write_front_matter(path: Path, meta: dict, body: str) -> None:
    write_text(path, format_front_matter(meta, body))


def parse_date(value: str | None) -> dt.datetime | None:
    """Parse a free-form date string, returning None when nothing fits.

    ISO-8601 is tried first, then RFC 2822 and a handful of written-out
    forms such as ``Jan 5, 2024``.
    """
    value = (value or "").strip()
    if not value:
        return None
    try:
        return dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        pass
    try:
        parsed = email.utils.parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        parsed = None
    if parsed is not None:
        return parsed
    for fmt in WRITTEN_DATE_FORMATS:
        try:
            return dt.datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None
