"""Intermediate data models for the parse and render pipeline"""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Optional


@dataclass
class Post:
    """A parsed blog post; html is filled in by the render step."""
    path:        Path
    slug:        str
    title:       str
    markdown:    str                    # body only (frontmatter stripped)
    frontmatter: dict[str, Any] = field(default_factory=dict)
    date:        Optional[date] = None
    description: str = ""
    draft:       bool = False
    html:        str = ""


@dataclass
class BuildResult:
    """Summary of a finished build."""
    out_dir: Path
    posts:   list[Post]
    pages:   list[Path]
    drafts:  int = 0
