"""Site configuration for the minimal arborium blog template."""

from mdblog.config import define_config
from mdblog.plugins.tree_sitter import rehype_tree_sitter


config = define_config(
    site="https://cmdcolin.github.io",
    base="/minimal-astro-arborium-blog-template",
    markdown={
        "syntax_highlight": False,
        "rehype_plugins": [rehype_tree_sitter],
    },
)
