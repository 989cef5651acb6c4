"""Site build: parse and render posts, write pages, feed, and static assets"""

import logging
import shutil
from datetime import date, datetime, time, timezone
from email.utils import format_datetime
from functools import partial
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

from mdblog.config import BuildConfig
from mdblog.core.models import BuildResult, Post
from mdblog.core.parse import discover_posts, parse_post
from mdblog.core.render import RenderError, render_post
from mdblog.core.urls import absolute_url, post_path, url_for


TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


class BuildError(RuntimeError):
    """Raised when the site cannot be built."""


def _rfc822(value: date) -> str:
    return format_datetime(datetime.combine(value, time(), tzinfo=timezone.utc))


def make_environment(config: BuildConfig, templates_dir: Path = TEMPLATES_DIR) -> Environment:
    """Jinja environment with the URL helpers bound to config."""
    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.globals.update(
        config=config,
        url_for=partial(url_for, config),
        absolute_url=partial(absolute_url, config),
        post_path=post_path,
    )
    env.filters["rfc822"] = _rfc822
    return env


def load_posts(config: BuildConfig, log: logging.Logger) -> tuple[list[Post], int]:
    """Parse and render every post under src_dir. Returns (published newest first, draft count)."""
    src_dir = Path(config.src_dir)
    if not src_dir.exists():
        raise BuildError(f"Source directory not found: {src_dir}")

    posts: list[Post] = []
    drafts = 0
    seen: dict[str, Path] = {}
    for path in discover_posts(src_dir):
        try:
            post = parse_post(path, config.parser_config)
        except ValueError as e:
            raise BuildError(f"Failed to parse {path}: {e}") from e
        if post.draft:
            log.info("Skipping draft %s", path)
            drafts += 1
            continue
        if post.slug in seen:
            raise BuildError(f"Duplicate slug {post.slug!r} in {seen[post.slug]} and {path}")
        seen[post.slug] = path
        try:
            render_post(post, config)
        except RenderError as e:
            raise BuildError(f"Failed to render {path}: {e}") from e
        log.debug("Rendered %s -> %s", path, post.slug)
        posts.append(post)

    posts.sort(key=lambda p: (p.date or date.min, p.slug), reverse=True)
    return posts, drafts


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _copy_public(public_dir: Path, out_dir: Path, log: logging.Logger) -> set[Path]:
    """Copy public_dir into out_dir; returns the destination paths written."""
    if not public_dir.is_dir():
        return set()
    shutil.copytree(public_dir, out_dir, dirs_exist_ok=True)
    log.debug("Copied static assets from %s", public_dir)
    return {out_dir / p.relative_to(public_dir) for p in public_dir.rglob("*") if p.is_file()}


def build_site(config: BuildConfig, log: logging.Logger = None) -> BuildResult:
    """Build the whole site into config.out_dir."""
    log = log or logging.getLogger(__name__)
    posts, drafts = load_posts(config, log)

    out_dir = Path(config.out_dir)
    env = make_environment(config)
    try:
        index_template = env.get_template("index.html")
        post_template = env.get_template("post.html")
        rss_template = env.get_template("rss.xml")
    except TemplateNotFound as e:
        raise BuildError(f"Template '{e.name}' not found in {TEMPLATES_DIR}") from e

    # static assets go first so generated pages win on a name clash
    static = _copy_public(Path(config.public_dir), out_dir, log)

    outputs = [
        (out_dir / post_path(post.slug) / "index.html",
         post_template.render(post=post, canonical=absolute_url(config, post_path(post.slug))))
        for post in posts
    ]
    outputs.append((out_dir / "index.html", index_template.render(posts=posts, canonical=absolute_url(config))))
    outputs.append((out_dir / "rss.xml", rss_template.render(posts=posts)))

    pages = []
    for path, content in outputs:
        if path in static:
            log.warning("Generated page %s replaces static asset of the same name", path)
        pages.append(_write(path, content))

    log.info("Built %d post(s) into %s", len(posts), out_dir)
    return BuildResult(out_dir=out_dir, posts=posts, pages=pages, drafts=drafts)
