"""HTML tree plugin: highlight fenced code blocks with tree-sitter parsers"""

import logging
import re
from html import escape
from typing import Any, Callable, Iterator

from bs4 import BeautifulSoup
from tree_sitter_language_pack import get_parser


log = logging.getLogger(__name__)

LANGUAGE_PREFIX = "language-"
HIGHLIGHT_CLASS = "ts-highlight"

LANGUAGE_ALIASES = {
    "py": "python",
    "js": "javascript",
    "mjs": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "sh": "bash",
    "shell": "bash",
    "zsh": "bash",
    "rs": "rust",
    "rb": "ruby",
    "yml": "yaml",
    "md": "markdown",
    "c++": "cpp",
    "golang": "go",
}

_KIND_RE = re.compile(r"[^a-z0-9]+")


def _language_of(classes: list[str]) -> str | None:
    """Return the language named by a 'language-X' class, resolving aliases."""
    for cls in classes:
        if cls.startswith(LANGUAGE_PREFIX):
            name = cls[len(LANGUAGE_PREFIX):].lower()
            return LANGUAGE_ALIASES.get(name, name) or None
    return None


def _iter_leaves(root) -> Iterator[Any]:
    """Yield leaf nodes in source order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.child_count == 0:
            yield node
        else:
            stack.extend(reversed(node.children))


def _leaf_kind(node) -> str:
    """CSS suffix for a leaf: named node type, 'keyword' for word tokens, else 'punctuation'."""
    if node.is_named:
        return _KIND_RE.sub("-", node.type.lower()).strip("-") or "node"
    if node.type.isidentifier():
        return "keyword"
    return "punctuation"


def highlight_code(code: str, parser) -> str:
    """Parse code and return HTML with every leaf wrapped in a ts-<kind> span."""
    source = code.encode("utf-8")
    tree = parser.parse(source)
    parts = []
    cursor = 0
    for node in _iter_leaves(tree.root_node):
        start, end = node.start_byte, node.end_byte
        # zero-width (missing) nodes and overlaps carry no text
        if end <= start or start < cursor:
            continue
        parts.append(escape(source[cursor:start].decode("utf-8"), quote=False))
        text = source[start:end].decode("utf-8")
        parts.append(f'<span class="ts-{_leaf_kind(node)}">{escape(text, quote=False)}</span>')
        cursor = end
    parts.append(escape(source[cursor:].decode("utf-8"), quote=False))
    return "".join(parts)


def make_rehype_tree_sitter(parser_for: Callable[[str], Any] = get_parser):
    """Build a tree-sitter highlighting plugin around a language -> parser lookup.

    The lookup raises LookupError for languages it has no grammar for; those
    blocks are left as plain escaped code.
    """
    parsers: dict[str, Any] = {}
    missing: set[str] = set()

    def _parser(language: str):
        if language in missing:
            return None
        if language not in parsers:
            try:
                parsers[language] = parser_for(language)
            except LookupError:
                log.debug("No tree-sitter grammar for %r, leaving block unhighlighted", language)
                missing.add(language)
                return None
        return parsers[language]

    def rehype_tree_sitter(tree: BeautifulSoup, post=None) -> None:
        for code in tree.select("pre > code"):
            language = _language_of(code.get("class") or [])
            if language is None:
                continue
            parser = _parser(language)
            if parser is None:
                continue

            markup = highlight_code(code.get_text(), parser)
            fragment = BeautifulSoup(markup, "html.parser")
            code.clear()
            for child in list(fragment.contents):
                code.append(child)

            pre = code.parent
            pre["class"] = [*(pre.get("class") or []), HIGHLIGHT_CLASS]
            pre["data-language"] = language

    rehype_tree_sitter.__qualname__ = "rehype_tree_sitter"
    return rehype_tree_sitter


rehype_tree_sitter = make_rehype_tree_sitter()
