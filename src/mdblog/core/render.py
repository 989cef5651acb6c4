"""Markdown rendering and the HTML tree plugin pipeline"""

import logging
from typing import Iterable

from bs4 import BeautifulSoup
from markdown_it import MarkdownIt

from mdblog.config import BuildConfig, MarkdownConfig, RehypePlugin, plugin_name
from mdblog.core.highlight import pygments_highlight
from mdblog.core.models import Post


log = logging.getLogger(__name__)


class RenderError(RuntimeError):
    """Raised when an HTML tree plugin fails."""


def make_parser(markdown: MarkdownConfig, preset: str = "gfm-like") -> MarkdownIt:
    """Build a MarkdownIt instance; fences are highlighted only when syntax_highlight is on."""
    options = {"linkify": False}
    if markdown.syntax_highlight:
        options["highlight"] = pygments_highlight
    return MarkdownIt(preset, options_update=options)


def apply_rehype_plugins(html: str, plugins: Iterable[RehypePlugin], post: Post = None) -> str:
    """Run each plugin over the parsed HTML tree in order and serialise the result.

    A plugin mutates the tree in place and returns None, or returns a replacement tree.
    """
    plugins = tuple(plugins)
    if not plugins:
        return html
    tree = BeautifulSoup(html, "html.parser")
    for plugin in plugins:
        log.debug("Applying %s", plugin_name(plugin))
        try:
            result = plugin(tree, post)
        except Exception as e:
            where = f" on {post.path}" if post is not None else ""
            raise RenderError(f"Plugin {plugin_name(plugin)} failed{where}: {e}") from e
        if result is not None:
            tree = result
    return str(tree)


def render_markdown(text: str, config: BuildConfig, post: Post = None) -> str:
    """Render markdown to HTML and run the configured plugins over it."""
    html = make_parser(config.markdown, config.parser_config).render(text)
    return apply_rehype_plugins(html, config.markdown.rehype_plugins, post)


def render_post(post: Post, config: BuildConfig) -> Post:
    """Fill post.html from post.markdown."""
    post.html = render_markdown(post.markdown, config, post)
    return post
