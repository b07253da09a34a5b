"""Tests for entry derivations."""

import pytest

from draftgen.entry import (
    EMPTY_STAR,
    FULL_STAR,
    HALF_STAR,
    build_entry,
    clamp_rating,
    format_date_label,
    format_rating,
    load_entry,
    render_stars,
    slugify,
)


class TestSlugify:
    """Tests for slugify."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Hello, World!", "hello-world"),
            ("  The Left Hand of Darkness  ", "the-left-hand-of-darkness"),
            ("Café au lait", "caf-au-lait"),
            ("2001: A Space Odyssey", "2001-a-space-odyssey"),
            ("already-a-slug", "already-a-slug"),
        ],
    )
    def test_slugify(self, text, expected):
        assert slugify(text) == expected

    @pytest.mark.parametrize("text", ["", "!!!", "---", "…"])
    def test_fallback(self, text):
        assert slugify(text) == "post"

    @pytest.mark.parametrize("text", ["Hello, World!", "__x__", "A--B", "", "Ünïcode Title 42"])
    def test_idempotent(self, text):
        assert slugify(slugify(text)) == slugify(text)


class TestClampRating:
    """Tests for clamp_rating."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("4.3", 4.5),
            ("4.2", 4.0),
            ("4.25", 4.5),
            ("4.75", 5.0),
            ("3", 3.0),
            ("0", 0.0),
            ("7", 5.0),
            ("-2", 0.0),
            ("inf", 5.0),
            ("-inf", 0.0),
            (2.6, 2.5),
        ],
    )
    def test_normalizes(self, value, expected):
        assert clamp_rating(value) == expected

    @pytest.mark.parametrize("value", [None, "", "  ", "great", "nan", True])
    def test_unparseable_is_none(self, value):
        """Unparseable ratings are absent, not zero."""
        assert clamp_rating(value) is None

    def test_always_in_range_on_half_grid(self):
        for step in range(-40, 120):
            result = clamp_rating(step / 7)
            assert 0 <= result <= 5
            assert (result * 2).is_integer()


class TestStars:
    """Tests for star glyph rendering."""

    def test_whole_rating(self):
        assert render_stars(3) == FULL_STAR * 3 + EMPTY_STAR * 2

    def test_half_rating(self):
        assert render_stars(2.5) == FULL_STAR * 2 + HALF_STAR + EMPTY_STAR * 2

    def test_half_glyph_matches_full_glyph(self):
        assert render_stars(4.5) == FULL_STAR * 5

    def test_zero(self):
        assert render_stars(0) == EMPTY_STAR * 5

    def test_absent(self):
        assert render_stars(None) == ""

    def test_format_rating(self):
        assert format_rating(4.5) == "4.5"
        assert format_rating(4.0) == "4"


class TestDateLabel:
    """Tests for format_date_label."""

    def test_formats_month_day_year(self):
        assert format_date_label("2024-01-01") == "Jan 1, 2024"

    def test_datetime_value(self):
        assert format_date_label("2023-11-20T18:45:00") == "Nov 20, 2023"

    @pytest.mark.parametrize("value", [None, "", "not a date"])
    def test_unparseable_is_empty(self, value):
        assert format_date_label(value) == ""


class TestBuildEntry:
    """Tests for build_entry and load_entry."""

    def test_example_document(self):
        """Rating is normalized and the body is rendered."""
        entry = build_entry(
            {"title": "Example", "rating": "4.3"},
            "# Hi\n\nSome **bold** text.",
            "example-file",
        )

        assert entry.title == "Example"
        assert entry.slug == "example"
        assert entry.rating == 4.5
        assert entry.date_label == ""
        assert "<h1>Hi</h1>" in entry.body_html
        assert "<p>Some <strong>bold</strong> text.</p>" in entry.body_html

    def test_defaults_from_identifier(self):
        entry = build_entry({}, "Body", "My Notes")

        assert entry.title == "My Notes"
        assert entry.slug == "my-notes"
        assert entry.rating is None
        assert entry.cover_url == ""
        assert entry.tags_raw == ""

    def test_slug_override(self):
        entry = build_entry({"title": "Long Title", "slug": "Short One"}, "", "file")

        assert entry.slug == "short-one"

    def test_recognized_fields(self):
        meta = {
            "title": "Dune",
            "date": "2024-02-03",
            "summary": "Spice.",
            "cover": "https://img.test/dune.jpg",
            "tags": "review, sci-fi",
            "extra": "kept",
        }

        entry = build_entry(meta, "", "dune")

        assert entry.raw_date == "2024-02-03"
        assert entry.date_label == "Feb 3, 2024"
        assert entry.summary == "Spice."
        assert entry.cover_url == "https://img.test/dune.jpg"
        assert entry.tags_raw == "review, sci-fi"
        assert entry.metadata["extra"] == "kept"

    def test_set_cover_updates_metadata(self):
        entry = build_entry({"cover": ""}, "", "x")

        entry.set_cover("https://img.test/c.jpg")

        assert entry.cover_url == "https://img.test/c.jpg"
        assert entry.metadata["cover"] == "https://img.test/c.jpg"

    def test_load_entry(self, write_post):
        path = write_post("first-post.md", "---\ntitle: First\n---\n\nHello")

        entry = load_entry(path)

        assert entry.title == "First"
        assert entry.source == path
        assert entry.body_markdown == "Hello"
        assert entry.body_html == "<p>Hello</p>"

    def test_load_entry_without_header_uses_file_stem(self, write_post):
        path = write_post("no-header.md", "Just text")

        entry = load_entry(path)

        assert entry.title == "no-header"
        assert entry.slug == "no-header"
