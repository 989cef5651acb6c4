"""CLI command implementations"""

import json
from typing import Annotated, Optional

import typer

from mdblog.config import BuildConfig, ConfigError, describe_config, load_config
from mdblog.core.build import BuildError, build_site
from mdblog.logging import get_logger


ConfigOption = Annotated[Optional[str], typer.Option("--config", "-c", help="Path to a site_config.py file")]


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(path: Optional[str], overrides: dict = None) -> BuildConfig:
    """Load config with standard CLI error handling."""
    try:
        return load_config(path, overrides=overrides)
    except ConfigError as e:
        _fail(str(e))


def build_cmd(
    config: ConfigOption = None,
    src: Annotated[Optional[str], typer.Option("--src-dir", help="Directory of markdown posts")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    site: Annotated[Optional[str], typer.Option("--site", help="Absolute deployment URL")] = None,
    base: Annotated[Optional[str], typer.Option("--base", help="Path prefix for links")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log every rendered post")] = False,
    ):
    """Render posts to HTML and write the static site."""
    settings = _settings(config, overrides={"src_dir": src, "out_dir": out, "site": site, "base": base})
    log = get_logger(verbose=verbose)

    try:
        result = build_site(settings, log)
    except BuildError as e:
        _fail(str(e))
    except OSError as e:
        _fail("Build failed", e)

    for post in result.posts:
        typer.echo(f"  {post.path} -> {post.slug}")
    if result.drafts:
        typer.echo(f"Skipped {result.drafts} draft(s)")
    typer.echo(f"Built {len(result.posts)} post(s), {len(result.pages)} page(s) to {result.out_dir}/")


def config_cmd(config: ConfigOption = None):
    """Print the resolved build configuration as JSON."""
    settings = _settings(config)
    typer.echo(json.dumps(describe_config(settings), indent=2))
