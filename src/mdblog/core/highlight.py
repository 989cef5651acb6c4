"""Built-in fence highlighter used when markdown.syntax_highlight is enabled"""

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound


# nowrap: markdown-it supplies the surrounding <pre><code class="language-X">
_FORMATTER = HtmlFormatter(nowrap=True)


def pygments_highlight(code: str, lang: str, attrs: str) -> str:
    """markdown-it highlight hook; an empty return makes markdown-it escape the code itself."""
    if not lang:
        return ""
    try:
        lexer = get_lexer_by_name(lang)
    except ClassNotFound:
        return ""
    return highlight(code, lexer, _FORMATTER)
