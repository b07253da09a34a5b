from __future__ import annotations

import datetime as dt
import html

from .config import SiteSettings
from .content import parse_date
from .entry import Entry
from .pages import entry_path
from .utils import join_url, rfc822_date

CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"


def escape_xml(value: str) -> str:
    return html.escape(value, quote=True)


def cdata(value: str) -> str:
    return "<![CDATA[" + value.replace("]]>", "]]]]><![CDATA[>") + "]]>"


def feed_date(value: str | None) -> str:
    parsed = parse_date(value)
    if parsed is None:
        return ""
    return rfc822_date(parsed)


def entry_link(settings: SiteSettings, entry: Entry) -> str:
    return join_url(settings.base_url, entry_path(entry.slug))


def build_item(settings: SiteSettings, entry: Entry) -> str:
    link = escape_xml(entry_link(settings, entry))
    pub_date = feed_date(entry.raw_date)
    lines = [
        "<item>",
        f"<title>{escape_xml(entry.title)}</title>",
        f"<link>{link}</link>",
        f"<guid>{link}</guid>",
    ]
    if entry.summary:
        lines.append(f"<description>{escape_xml(entry.summary)}</description>")
    lines.append(f"<content:encoded>{cdata(entry.body_html)}</content:encoded>")
    if pub_date:
        lines.append(f"<pubDate>{pub_date}</pubDate>")
    lines.append("</item>")
    return "\n".join(lines)


def build_rss(settings: SiteSettings, entries: list[Entry], now: dt.datetime | None = None) -> str:
    last_build = rfc822_date(now or dt.datetime.now(dt.timezone.utc))
    items = "\n".join(build_item(settings, entry) for entry in entries)
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<rss version="2.0" xmlns:content="{CONTENT_NS}">',
            "<channel>",
            f"<title>{escape_xml(settings.site_name)}</title>",
            f"<link>{escape_xml(settings.base_url)}</link>",
            f"<description>{escape_xml(settings.site_description)}</description>",
            f"<lastBuildDate>{last_build}</lastBuildDate>",
            items,
            "</channel>",
            "</rss>",
        ]
    )
