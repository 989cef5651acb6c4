"""Post discovery, frontmatter extraction, and post metadata"""

import re
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt

from mdblog.core.models import Post
from mdblog.core.utils.slug import slugify


FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*(?:\n|$)', re.DOTALL)
MD_EXTENSIONS = {'.md', '.mdx'}


def _strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with YAML header and any BOM removed."""
    text = text.lstrip('\ufeff')
    m = FRONTMATTER_RE.match(text)
    if m:
        try:
            fm = yaml.safe_load(m.group(1)) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML frontmatter: {e}") from e
        if not isinstance(fm, dict):
            raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
        return fm, text[m.end():]
    return {}, text


def _coerce_date(value: Any) -> date | None:
    """Accept YAML dates, datetimes, or ISO strings; None when absent."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value).strip()).date()
    except ValueError as e:
        raise ValueError(f"Invalid post date {value!r}") from e


def _check_slug(slug: Any) -> str:
    """A frontmatter slug becomes a directory name under out_dir; it must stay a single segment."""
    slug = str(slug).strip()
    if not slug or slug in ('.', '..') or '/' in slug or '\\' in slug or '..' in slug:
        raise ValueError(f"Invalid slug {slug!r}: must be a single path segment")
    return slug


def _first_h1(body: str, parser_config: str) -> str | None:
    """Inline text of the first level-1 heading, ignoring '#' lines inside code."""
    tokens = MarkdownIt(parser_config, options_update={"linkify": False}).parse(body)
    for i, token in enumerate(tokens[:-1]):
        if token.type == 'heading_open' and token.tag == 'h1':
            return tokens[i + 1].content.strip() or None
    return None


def _title(frontmatter: dict[str, Any], body: str, path: Path, parser_config: str) -> str:
    if title := frontmatter.get('title'):
        return str(title)
    return _first_h1(body, parser_config) or path.stem


def discover_posts(path: Path) -> list[Path]:
    """Return sorted .md/.mdx files under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.is_file() and p.suffix in MD_EXTENSIONS)


def parse_post(path: Path, parser_config: str = 'gfm-like') -> Post:
    """Read a markdown file into a Post (html left empty for the render step)."""
    raw = path.read_text(encoding='utf-8')
    frontmatter, body = _strip_frontmatter(raw)
    if 'slug' in frontmatter:
        slug = _check_slug(frontmatter['slug'])
    else:
        slug = slugify(path.stem)
    return Post(
        path=path,
        slug=slug,
        title=_title(frontmatter, body, path, parser_config),
        markdown=body,
        frontmatter=frontmatter,
        date=_coerce_date(frontmatter.get('date', frontmatter.get('pubDate'))),
        description=str(frontmatter.get('description') or ''),
        draft=bool(frontmatter.get('draft', False)),
    )
