from __future__ import annotations

import html

from .config import PACKAGE_LAYOUT, SiteSettings
from .entry import Entry, format_rating, render_stars
from .render import escape_attr, read_template, render_template
from .utils import join_url

POSTS_SUBDIR = "posts"
INDEX_DOCUMENT = "index.html"


def entry_path(slug: str) -> str:
    return f"{POSTS_SUBDIR}/{slug}/{INDEX_DOCUMENT}"


def load_layout(settings: SiteSettings) -> str:
    path = settings.layout_path or PACKAGE_LAYOUT
    return read_template(path)


def feed_href(settings: SiteSettings, root: str) -> str:
    if settings.base_url:
        return join_url(settings.base_url, settings.feed_path)
    return f"{root}/{settings.feed_path}"


def render_layout(
    layout: str,
    settings: SiteSettings,
    title: str,
    content: str,
    root: str,
    description: str = "",
    include_home_link: bool = False,
) -> str:
    nav = f'<a href="{root}/{INDEX_DOCUMENT}">Home</a>' if include_home_link else ""
    return render_template(
        layout,
        title=html.escape(title),
        description=escape_attr(description),
        site_name=html.escape(settings.site_name),
        feed_href=escape_attr(feed_href(settings, root)),
        feed_path=escape_attr(settings.feed_path),
        root=root,
        nav=nav,
        content=content,
    )


def build_rating(entry: Entry) -> str:
    if entry.rating is None:
        return ""
    return (
        '<div class="rating">'
        f'<span class="stars">{render_stars(entry.rating)}</span>'
        f'<span class="value">{format_rating(entry.rating)}/5</span>'
        "</div>"
    )


def build_post_cards(entries: list[Entry]) -> str:
    cards = []
    for entry in entries:
        url = entry_path(entry.slug)
        cards.append(
            '<article class="post-card">'
            "<div>"
            f'<h2><a href="{url}">{html.escape(entry.title)}</a></h2>'
            f"<p>{html.escape(entry.summary)}</p>"
            f"{build_rating(entry)}"
            "</div>"
            f"<time>{entry.date_label}</time>"
            "</article>"
        )
    return "\n".join(cards)


def build_index(layout: str, settings: SiteSettings, entries: list[Entry]) -> str:
    cards = build_post_cards(entries)
    if not cards:
        cards = f"<p>No posts yet. Add a markdown file in <code>{html.escape(settings.posts_dir.name)}/</code>.</p>"
    content = (
        "<article>"
        f'<p class="meta">{html.escape(settings.site_tagline)}</p>'
        f"{cards}"
        "</article>"
    )
    return render_layout(
        layout,
        settings,
        title=settings.site_name,
        content=content,
        root=".",
        description=settings.site_description,
    )


def build_entry_page(layout: str, settings: SiteSettings, entry: Entry) -> str:
    meta = []
    if entry.date_label:
        meta.append(f'<time datetime="{escape_attr(entry.raw_date)}">{entry.date_label}</time>')
    if entry.tags_raw:
        meta.append(f"<span>Tags: {html.escape(entry.tags_raw)}</span>")
    cover = ""
    if entry.cover_url:
        cover = (
            f'<div><img class="cover" src="{escape_attr(entry.cover_url)}" '
            f'alt="Cover of {escape_attr(entry.title)}" loading="lazy" /></div>'
        )
    content = (
        "<article>"
        '<div class="post-hero">'
        f"{cover}"
        "<div>"
        f"<h1>{html.escape(entry.title)}</h1>"
        f'<p class="meta">{" &middot; ".join(meta)}</p>'
        f"{build_rating(entry)}"
        "</div>"
        "</div>"
        f"{entry.body_html}"
        "</article>"
    )
    return render_layout(
        layout,
        settings,
        title=f"{entry.title} | {settings.site_name}",
        content=content,
        root="../..",
        description=entry.summary or entry.title,
        include_home_link=True,
    )
