"""Unit tests for plugins/tree_sitter.py, driven by a fake parser"""

from dataclasses import dataclass, field

import pytest
from bs4 import BeautifulSoup

from mdblog.plugins.tree_sitter import _language_of, highlight_code, make_rehype_tree_sitter


@dataclass
class FakeNode:
    type: str
    start_byte: int
    end_byte: int
    is_named: bool = True
    children: list = field(default_factory=list)

    @property
    def child_count(self):
        return len(self.children)


@dataclass
class FakeTree:
    root_node: FakeNode


class FakeParser:
    """Returns a fixed tree for `def f(): x = 1  # hi`-style inputs."""

    def __init__(self, root: FakeNode):
        self.root = root
        self.sources = []

    def parse(self, source: bytes):
        self.sources.append(source)
        return FakeTree(self.root)


def _assignment_tree():
    # "x = 1"
    return FakeNode("module", 0, 5, children=[
        FakeNode("expression_statement", 0, 5, children=[
            FakeNode("assignment", 0, 5, children=[
                FakeNode("identifier", 0, 1),
                FakeNode("=", 2, 3, is_named=False),
                FakeNode("integer", 4, 5),
            ]),
        ]),
    ])


@pytest.fixture(name="parser")
def parser_fixture():
    return FakeParser(_assignment_tree())


def test_highlight_code_wraps_leaves(parser):
    html = highlight_code("x = 1\n", parser)
    assert html == (
        '<span class="ts-identifier">x</span> '
        '<span class="ts-punctuation">=</span> '
        '<span class="ts-integer">1</span>\n'
    )
    assert parser.sources == [b"x = 1\n"]


def test_highlight_code_keywords_and_escaping():
    # 'if a<b'
    root = FakeNode("module", 0, 6, children=[
        FakeNode("if", 0, 2, is_named=False),
        FakeNode("comparison_operator", 3, 6, children=[
            FakeNode("identifier", 3, 4),
            FakeNode("<", 4, 5, is_named=False),
            FakeNode("identifier", 5, 6),
        ]),
    ])
    html = highlight_code("if a<b", FakeParser(root))
    assert '<span class="ts-keyword">if</span>' in html
    assert '<span class="ts-punctuation">&lt;</span>' in html


def test_highlight_code_skips_zero_width_nodes():
    root = FakeNode("module", 0, 1, children=[
        FakeNode("identifier", 0, 1),
        FakeNode("MISSING", 1, 1),
    ])
    assert highlight_code("y", FakeParser(root)) == '<span class="ts-identifier">y</span>'


def test_named_node_types_become_css_safe():
    root = FakeNode("module", 0, 3, children=[FakeNode("string_content", 0, 3)])
    assert highlight_code("abc", FakeParser(root)) == '<span class="ts-string-content">abc</span>'


@pytest.mark.parametrize("classes,expected", [
    (["language-python"], "python"),
    (["language-py"], "python"),
    (["language-JS"], "javascript"),
    (["hljs", "language-rust"], "rust"),
    (["plain"], None),
    ([], None),
])
def test_language_of(classes, expected):
    assert _language_of(classes) == expected


def test_plugin_highlights_code_blocks(parser):
    requested = []

    def parser_for(language):
        requested.append(language)
        return parser

    plugin = make_rehype_tree_sitter(parser_for)
    tree = BeautifulSoup('<pre><code class="language-py">x = 1\n</code></pre>', "html.parser")
    assert plugin(tree) is None

    pre = tree.find("pre")
    code = tree.find("code")
    assert requested == ["python"]
    assert pre["class"] == ["ts-highlight"]
    assert pre["data-language"] == "python"
    assert [s["class"] for s in code.find_all("span")] == [["ts-identifier"], ["ts-punctuation"], ["ts-integer"]]
    assert code.get_text() == "x = 1\n"


def test_plugin_leaves_unknown_languages_alone():
    requested = []

    def parser_for(language):
        requested.append(language)
        raise LookupError(language)

    plugin = make_rehype_tree_sitter(parser_for)
    markup = (
        '<pre><code class="language-cobol">MOVE A TO B</code></pre>'
        '<pre><code class="language-cobol">STOP RUN</code></pre>'
    )
    tree = BeautifulSoup(markup, "html.parser")
    plugin(tree)
    assert str(tree) == markup
    assert requested == ["cobol"]


def test_plugin_ignores_code_without_language(parser):
    plugin = make_rehype_tree_sitter(lambda language: parser)
    markup = "<pre><code>x = 1</code></pre><p><code class=\"language-python\">inline</code></p>"
    tree = BeautifulSoup(markup, "html.parser")
    plugin(tree)
    assert str(tree) == markup
    assert parser.sources == []


def test_plugin_is_named_for_config_output():
    plugin = make_rehype_tree_sitter(lambda language: None)
    assert plugin.__qualname__ == "rehype_tree_sitter"
