"""Tests for cover enrichment."""

import logging

import pytest

from draftgen.content import parse_front_matter
from draftgen.covers import google_cover_url
from draftgen.enrich import enrich_covers, needs_cover, update_document_cover
from draftgen.entry import load_entry
from draftgen.errors import DocumentNotFoundError, DraftgenError


class TestEnrichCovers:
    """Tests for enrich_covers."""

    def test_sets_and_persists_cover(self, write_post, fake_lookup):
        path = write_post("dune.md", "---\ntitle: Dune\ncover:\nrating: 5\n---\n\nSpice.")
        entry = load_entry(path)

        updated = enrich_covers([entry], fake_lookup({"Dune": "vol1"}))

        assert updated == 1
        assert entry.cover_url == google_cover_url("vol1")
        meta, body = parse_front_matter(path.read_text(encoding="utf-8"))
        assert list(meta) == ["title", "cover", "rating"]
        assert meta["cover"] == google_cover_url("vol1")
        assert body == "Spice."

    def test_without_persist_leaves_source_untouched(self, write_post, fake_lookup):
        raw = "---\ntitle: Dune\ncover:\n---\n\nSpice."
        path = write_post("dune.md", raw)
        entry = load_entry(path)

        enrich_covers([entry], fake_lookup({"Dune": "vol1"}), persist=False)

        assert entry.cover_url
        assert path.read_text(encoding="utf-8") == raw

    def test_only_empty_cover_fields_are_looked_up(self, write_post, fake_lookup):
        no_field = load_entry(write_post("a.md", "---\ntitle: A\n---\nx"))
        has_cover = load_entry(write_post("b.md", "---\ntitle: B\ncover: https://img.test/b.jpg\n---\nx"))
        lookup = fake_lookup({"A": "va", "B": "vb"})

        updated = enrich_covers([no_field, has_cover], lookup)

        assert updated == 0
        assert lookup.queries == []
        assert not needs_cover(no_field)
        assert not needs_cover(has_cover)

    def test_no_matching_volume_is_tolerated(self, write_post, fake_lookup, caplog):
        """A failed lookup is logged and the entry keeps no cover."""
        raw = "---\ntitle: Obscure\ncover:\n---\n\nx"
        path = write_post("obscure.md", raw)
        entry = load_entry(path)

        with caplog.at_level(logging.WARNING):
            updated = enrich_covers([entry], fake_lookup())

        assert updated == 0
        assert entry.cover_url == ""
        assert path.read_text(encoding="utf-8") == raw
        assert 'Cover lookup failed for "Obscure"' in caplog.text

    def test_lookup_exception_does_not_escape(self, write_post, fake_lookup, caplog):
        first = load_entry(write_post("a.md", "---\ntitle: A\ncover:\n---\nx"))
        second = load_entry(write_post("b.md", "---\ntitle: B\ncover:\n---\nx"))
        lookup = fake_lookup(error=RuntimeError("boom"))

        updated = enrich_covers([first, second], lookup)

        assert updated == 0
        assert lookup.queries == ["A", "B"]
        assert "boom" in caplog.text

    def test_sequential_in_entry_order(self, write_post, fake_lookup):
        entries = [
            load_entry(write_post(f"{name}.md", f"---\ntitle: {name}\ncover:\n---\nx"))
            for name in ("one", "two", "three")
        ]
        lookup = fake_lookup({"two": "v2"})

        updated = enrich_covers(entries, lookup)

        assert updated == 1
        assert lookup.queries == ["one", "two", "three"]
        assert [bool(e.cover_url) for e in entries] == [False, True, False]


class TestUpdateDocumentCover:
    """Tests for update_document_cover."""

    def test_writes_cover(self, write_post, fake_lookup):
        path = write_post("dune.md", "---\ntitle: Dune\n---\n\nSpice.")

        url = update_document_cover(path, "dune", fake_lookup({"Dune": "vol1"}))

        assert url == google_cover_url("vol1")
        meta, _ = parse_front_matter(path.read_text(encoding="utf-8"))
        assert meta["cover"] == url

    def test_missing_document(self, posts_dir, fake_lookup):
        with pytest.raises(DocumentNotFoundError, match="Post not found"):
            update_document_cover(posts_dir / "missing.md", "Missing", fake_lookup())

    def test_existing_cover_kept_without_force(self, write_post, fake_lookup):
        path = write_post("dune.md", "---\ntitle: Dune\ncover: https://img.test/old.jpg\n---\nx")
        lookup = fake_lookup({"Dune": "vol1"})

        url = update_document_cover(path, "Dune", lookup)

        assert url == "https://img.test/old.jpg"
        assert lookup.queries == []

    def test_force_replaces_cover(self, write_post, fake_lookup):
        path = write_post("dune.md", "---\ntitle: Dune\ncover: https://img.test/old.jpg\n---\nx")

        url = update_document_cover(path, "Dune", fake_lookup({"Dune": "vol1"}), force=True)

        assert url == google_cover_url("vol1")

    def test_lookup_failure_is_fatal(self, write_post, fake_lookup):
        path = write_post("dune.md", "---\ntitle: Dune\n---\nx")

        with pytest.raises(DraftgenError, match="No volume found"):
            update_document_cover(path, "Dune", fake_lookup())
