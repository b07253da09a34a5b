"""Command-line interface for draftgen."""

from __future__ import annotations

import argparse
import dataclasses
import functools
import logging
import time
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

from .builder import build_site, load_entries
from .config import SiteSettings, load_config, settings_from_config
from .covers import CoverClient
from .enrich import enrich_covers, update_document_cover
from .entry import slugify
from .errors import DraftgenError
from .scaffold import create_review

DEFAULT_CONFIG = "site.toml"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def resolve_settings(args: argparse.Namespace) -> SiteSettings:
    config_path = Path(args.config)
    settings = settings_from_config(load_config(config_path), config_path)
    overrides = {}
    if getattr(args, "posts", None):
        overrides["posts_dir"] = Path(args.posts)
    if getattr(args, "output", None):
        overrides["output_dir"] = Path(args.output)
    if getattr(args, "site_url", None) is not None:
        overrides["site_url"] = args.site_url
    if getattr(args, "escape_html", None) is not None:
        overrides["escape_html"] = args.escape_html
    if getattr(args, "enrich_covers", None) is not None:
        overrides["enrich_covers"] = args.enrich_covers
    if getattr(args, "port", None) is not None:
        overrides["port"] = args.port
    return dataclasses.replace(settings, **overrides)


def build(args: argparse.Namespace) -> int:
    """Execute the build command.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)
    start = time.perf_counter()
    try:
        settings = resolve_settings(args)
        with CoverClient(timeout=settings.lookup_timeout) as client:
            build_site(settings, lookup=client)
    except DraftgenError as e:
        logger.error(e.message)
        return 1
    logger.info(f"Build completed in {time.perf_counter() - start:.2f}s.")
    return 0


def enrich(args: argparse.Namespace) -> int:
    """Execute the enrich command: fill empty covers without building."""
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)
    try:
        settings = resolve_settings(args)
        entries = load_entries(settings.posts_dir)
        with CoverClient(timeout=settings.lookup_timeout) as client:
            updated = enrich_covers(entries, client)
    except DraftgenError as e:
        logger.error(e.message)
        return 1
    logger.info(f"Updated {updated} cover{'' if updated == 1 else 's'}")
    return 0


def fetch_cover(args: argparse.Namespace) -> int:
    """Execute the fetch-cover command for a single document."""
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)
    try:
        settings = resolve_settings(args)
        path = settings.posts_dir / f"{args.slug or slugify(args.title)}.md"
        with CoverClient(timeout=settings.lookup_timeout) as client:
            update_document_cover(path, args.title, client, force=args.force)
    except DraftgenError as e:
        logger.error(e.message)
        return 1
    return 0


def new(args: argparse.Namespace) -> int:
    """Execute the new command: scaffold a review document."""
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)
    try:
        settings = resolve_settings(args)
        path = create_review(settings.posts_dir, args.title, args.slug, args.cover, args.rating)
    except DraftgenError as e:
        logger.error(e.message)
        return 1
    logger.info(f"Created {path}")
    return 0


def serve(args: argparse.Namespace) -> int:
    """Execute the serve command: preview the built site locally."""
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)
    try:
        settings = resolve_settings(args)
    except DraftgenError as e:
        logger.error(e.message)
        return 1
    if not settings.output_dir.is_dir():
        logger.error(f"Output directory not found: {settings.output_dir}. Run the build first.")
        return 1
    handler = functools.partial(SimpleHTTPRequestHandler, directory=str(settings.output_dir))
    with ThreadingHTTPServer(("", settings.port), handler) as server:
        logger.info(f"Serving {settings.output_dir}/ at http://localhost:{settings.port}")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            logger.info("Stopped.")
    return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="draftgen",
        description="Build a static reading-notes site from markdown files.",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=DEFAULT_CONFIG, help="Path to site config file (TOML/YAML/JSON).")
    common.add_argument("--posts", default=None, help="Directory containing markdown posts.")
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser("build", parents=[common], help="Build the site")
    build_parser.add_argument("--output", default=None, help="Output directory for the site.")
    build_parser.add_argument("--site-url", default=None, help="Public site URL used for the feed and permalinks.")
    build_parser.add_argument(
        "--escape-html",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Escape raw HTML in post prose.",
    )
    build_parser.add_argument(
        "--enrich-covers",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Look up missing covers and save them into the posts before building.",
    )
    build_parser.set_defaults(func=build)

    enrich_parser = subparsers.add_parser("enrich", parents=[common], help="Fill empty cover fields in posts")
    enrich_parser.set_defaults(func=enrich)

    cover_parser = subparsers.add_parser(
        "fetch-cover",
        parents=[common],
        help="Look up a book cover and write it into a post",
    )
    cover_parser.add_argument("title", help="Book title to search for.")
    cover_parser.add_argument("--slug", default="", help="Post slug (defaults to the slugified title).")
    cover_parser.add_argument("--force", action="store_true", help="Replace an existing cover.")
    cover_parser.set_defaults(func=fetch_cover)

    new_parser = subparsers.add_parser("new", parents=[common], help="Create a new review from the template")
    new_parser.add_argument("title", help="Book title.")
    new_parser.add_argument("--slug", default="", help="Custom slug for the file name.")
    new_parser.add_argument("--cover", default="", help="Cover image URL.")
    new_parser.add_argument("--rating", default="", help="Rating from 0 to 5.")
    new_parser.set_defaults(func=new)

    serve_parser = subparsers.add_parser("serve", parents=[common], help="Preview the built site")
    serve_parser.add_argument("--output", default=None, help="Directory to serve.")
    serve_parser.add_argument("--port", default=None, type=int, help="Port to listen on.")
    serve_parser.set_defaults(func=serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    return args.func(args)
