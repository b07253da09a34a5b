"""Pytest fixtures for draftgen tests."""

import pytest

from draftgen.config import SiteSettings
from draftgen.covers import CoverResult


class FakeLookup:
    """Cover lookup that answers from a title -> volume id mapping."""

    def __init__(self, volumes=None, error=None):
        self.volumes = volumes or {}
        self.error = error
        self.queries = []

    def search(self, title):
        self.queries.append(title)
        if self.error is not None:
            raise self.error
        query_url = f"https://books.test/volumes?q={title}"
        volume_id = self.volumes.get(title)
        if volume_id is None:
            return CoverResult(query_url=query_url, error="No volume found")
        return CoverResult(query_url=query_url, volume_id=volume_id)


@pytest.fixture
def posts_dir(tmp_path):
    """Empty source directory for markdown posts."""
    path = tmp_path / "posts"
    path.mkdir()
    return path


@pytest.fixture
def write_post(posts_dir):
    """Write a markdown post into the posts directory and return its path."""

    def _write(name, text):
        path = posts_dir / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def settings(tmp_path, posts_dir):
    """Site settings pointing at temporary directories."""
    return SiteSettings(posts_dir=posts_dir, output_dir=tmp_path / "dist")


@pytest.fixture
def fake_lookup():
    return FakeLookup
