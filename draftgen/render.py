from __future__ import annotations

import html
import re
from pathlib import Path

PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


def escape_attr(value: str) -> str:
    return html.escape(value, quote=True)


def render_template(template: str, **context: str) -> str:
    """Fill ``{{key}}`` placeholders in one pass; unknown keys are left as written."""
    return PLACEHOLDER_RE.sub(lambda m: context.get(m.group(1), m.group(0)), template)


def read_template(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
