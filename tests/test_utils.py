"""Tests for config value parsing and URL helpers."""

import pytest

from draftgen.utils import join_url, parse_bool, parse_float, parse_int


class TestParseValues:
    """Tests for the config value parsers."""

    @pytest.mark.parametrize("value", [True, 1, 2.5, "yes", " On ", "TRUE", "y", "1"])
    def test_truthy(self, value):
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", [False, None, 0, "", "no", "off", "maybe", ["yes"]])
    def test_falsy(self, value):
        assert parse_bool(value) is False

    def test_parse_int(self):
        assert parse_int(" 9000 ", 8080) == 9000
        assert parse_int(4000, 8080) == 4000
        assert parse_int("port", 8080) == 8080
        assert parse_int(None, 8080) == 8080
        assert parse_int(True, 8080) == 8080

    def test_parse_float(self):
        assert parse_float("2.5", 5.0) == 2.5
        assert parse_float(3, 5.0) == 3.0
        assert parse_float("slow", 5.0) == 5.0


class TestJoinUrl:
    """Tests for join_url."""

    @pytest.mark.parametrize(
        "base,path,expected",
        [
            ("https://shelf.test/", "/rss.xml", "https://shelf.test/rss.xml"),
            ("https://shelf.test", "posts/a/index.html", "https://shelf.test/posts/a/index.html"),
            ("", "rss.xml", "rss.xml"),
            ("https://shelf.test/", "", "https://shelf.test"),
        ],
    )
    def test_join(self, base, path, expected):
        assert join_url(base, path) == expected
