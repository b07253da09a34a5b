"""Opt-in cover enrichment for entries with an empty ``cover`` field."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from .content import parse_front_matter, write_front_matter
from .covers import CoverResult
from .entry import Entry
from .errors import DocumentNotFoundError, DraftgenError

logger = logging.getLogger(__name__)


class CoverLookup(Protocol):
    def search(self, title: str) -> CoverResult: ...


def needs_cover(entry: Entry) -> bool:
    return "cover" in entry.metadata and not entry.cover_url


def enrich_covers(entries: list[Entry], lookup: CoverLookup, persist: bool = True) -> int:
    """Fill missing covers one entry at a time.

    Lookup failures are logged and skipped. When ``persist`` is set the
    updated metadata header is written back to the entry's source file.

    Returns:
        Number of entries that received a cover
    """
    updated = 0
    for entry in entries:
        if not needs_cover(entry):
            continue
        title = entry.metadata.get("title") or entry.title
        try:
            result = lookup.search(title)
        except Exception as e:
            logger.warning(f'Cover lookup failed for "{title}": {e}')
            continue
        if not result.ok:
            logger.warning(f'Cover lookup failed for "{title}": {result.error}')
            continue
        entry.set_cover(result.cover_url)
        if persist and entry.source is not None:
            try:
                write_front_matter(entry.source, entry.metadata, entry.body_markdown)
            except OSError as e:
                logger.warning(f"Could not save cover to {entry.source}: {e}")
        logger.info(f"Auto-set cover for {entry.slug} -> {entry.cover_url}")
        updated += 1
    return updated


def update_document_cover(path: Path, title: str, lookup: CoverLookup, force: bool = False) -> str:
    """Look up a cover for a single document and write it into its header.

    Returns:
        The cover URL now stored in the document

    Raises:
        DocumentNotFoundError: If ``path`` does not exist
        DraftgenError: If the lookup finds no volume
    """
    if not path.is_file():
        raise DocumentNotFoundError(f"Post not found at {path}")
    meta, body = parse_front_matter(path.read_text(encoding="utf-8", errors="replace"))
    if meta.get("cover") and not force:
        logger.info(f"Cover already set for {path.stem}: {meta['cover']}")
        return meta["cover"]

    result = lookup.search(meta.get("title") or title)
    if not result.ok:
        raise DraftgenError(f"No volume found via Google Books ({result.error}). Query: {result.query_url}")
    meta["cover"] = result.cover_url
    write_front_matter(path, meta, body)
    logger.info(f"Set cover for {path.stem} -> {result.cover_url}")
    return result.cover_url
