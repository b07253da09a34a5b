"""Build orchestration: load, derive, sort, compose and write the site."""

from __future__ import annotations

import datetime as dt
import functools
import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from .config import SiteSettings
from .content import parse_date
from .enrich import CoverLookup, enrich_covers
from .entry import Entry, load_entry
from .errors import BuildError, SourceDirectoryError
from .feed import build_rss
from .pages import INDEX_DOCUMENT, build_entry_page, build_index, entry_path, load_layout
from .render import write_text
from .utils import make_public_dir, replace_output_dir

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Artifact:
    path: str
    text: str


@dataclass
class BuildResult:
    entries: list[Entry] = field(default_factory=list)
    artifacts: list[Artifact] = field(default_factory=list)
    covers_added: int = 0


def load_entries(posts_dir: Path, escape_html: bool = False) -> list[Entry]:
    if not posts_dir.is_dir():
        raise SourceDirectoryError(
            f"No posts directory found at {posts_dir}. Create it and add markdown files."
        )
    files = sorted(posts_dir.glob("*.md"), key=lambda p: p.name)
    entries = [load_entry(path, escape_html=escape_html) for path in files]
    logger.debug(f"Loaded {len(entries)} documents from {posts_dir}")
    return entries


def _timestamp(value: dt.datetime) -> float:
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return value.timestamp()


def compare_entries(a: Entry, b: Entry) -> int:
    """Newest first when both entries are dated, otherwise by title.

    The mixed rule is not transitive, so collections holding dated and
    undated entries have no single well-defined order.
    """
    a_date = parse_date(a.raw_date)
    b_date = parse_date(b.raw_date)
    if a_date is not None and b_date is not None:
        diff = _timestamp(b_date) - _timestamp(a_date)
        return (diff > 0) - (diff < 0)
    a_key = (a.title.casefold(), a.title)
    b_key = (b.title.casefold(), b.title)
    return (a_key > b_key) - (a_key < b_key)


def sort_entries(entries: list[Entry]) -> list[Entry]:
    return sorted(entries, key=functools.cmp_to_key(compare_entries))


def assign_unique_slugs(entries: list[Entry]) -> None:
    used: set[str] = set()
    for entry in entries:
        slug = entry.slug
        counter = 2
        while slug in used:
            slug = f"{entry.slug}-{counter}"
            counter += 1
        if slug != entry.slug:
            logger.warning(f'Slug "{entry.slug}" is already taken; "{entry.title}" will use "{slug}"')
            entry.slug = slug
        used.add(slug)


def compose_artifacts(settings: SiteSettings, entries: list[Entry], layout: str) -> list[Artifact]:
    artifacts = [
        Artifact(INDEX_DOCUMENT, build_index(layout, settings, entries)),
        Artifact(settings.feed_path, build_rss(settings, entries)),
    ]
    for entry in entries:
        artifacts.append(Artifact(entry_path(entry.slug), build_entry_page(layout, settings, entry)))
    return artifacts


def write_artifacts(artifacts: list[Artifact], output_dir: Path, protected: Path) -> None:
    """Write every artifact or none.

    Files go to a staging directory beside ``output_dir`` that replaces it
    only once all writes have succeeded.
    """
    parent = output_dir.resolve().parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=f".{output_dir.name}-", dir=parent))
    except OSError as e:
        raise BuildError(f"Cannot create staging directory in {parent}: {e}") from e
    try:
        make_public_dir(staging)
        for artifact in artifacts:
            write_text(staging / artifact.path, artifact.text)
        replace_output_dir(staging, output_dir, protected)
    except OSError as e:
        shutil.rmtree(staging, ignore_errors=True)
        raise BuildError(f"Failed to write output to {output_dir}: {e}") from e
    except BuildError:
        shutil.rmtree(staging, ignore_errors=True)
        raise


def build_site(settings: SiteSettings, lookup: CoverLookup | None = None) -> BuildResult:
    """Run a full build.

    Args:
        settings: Site settings
        lookup: Cover lookup used when ``settings.enrich_covers`` is set

    Returns:
        BuildResult describing what was written

    Raises:
        SourceDirectoryError: If the posts directory does not exist
        BuildError: If the output could not be written
    """
    entries = sort_entries(load_entries(settings.posts_dir, escape_html=settings.escape_html))

    covers_added = 0
    if settings.enrich_covers and lookup is not None:
        covers_added = enrich_covers(entries, lookup)

    assign_unique_slugs(entries)
    try:
        layout = load_layout(settings)
    except OSError as e:
        raise BuildError(f"Cannot read layout template: {e}") from e
    artifacts = compose_artifacts(settings, entries, layout)
    write_artifacts(artifacts, settings.output_dir, settings.posts_dir)

    count = len(entries)
    logger.info(f"Built {count} post{'' if count == 1 else 's'} to {settings.output_dir}")
    return BuildResult(entries=entries, artifacts=artifacts, covers_added=covers_added)
