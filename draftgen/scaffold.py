from __future__ import annotations

import datetime as dt
from pathlib import Path

from .entry import slugify
from .errors import DraftgenError
from .render import write_text

REVIEW_TEMPLATE = """---
title: {title}
date: {date}
summary: One-line hook for the review.
cover: {cover}
rating: {rating}
tags: review, book
---

## Why I Read It

## Thoughts
"""


def create_review(
    posts_dir: Path,
    title: str,
    slug: str = "",
    cover: str = "",
    rating: str = "",
    today: dt.date | None = None,
) -> Path:
    path = posts_dir / f"{slug or slugify(title)}.md"
    if path.exists():
        raise DraftgenError(f"File already exists: {path}")
    contents = REVIEW_TEMPLATE.format(
        title=title,
        date=(today or dt.date.today()).isoformat(),
        cover=cover,
        rating=rating or "4",
    )
    write_text(path, contents)
    return path
