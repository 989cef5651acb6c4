"""Site build configuration: schema, define_config, and site_config.py loader"""

import importlib
import importlib.util
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


CONFIG_FILE = "site_config.py"
ENV_PREFIX = "MDBLOG_"

# plugin(tree, post) -> replacement tree or None (tree mutated in place)
RehypePlugin = Callable[..., Any]
PluginRef = Union[str, RehypePlugin]


class ConfigError(ValueError):
    """Raised when the build configuration is missing or malformed."""


def resolve_plugin(ref: PluginRef) -> RehypePlugin:
    """Return a plugin callable from a callable or a 'package.module:attribute' string."""
    if callable(ref):
        return ref
    if not isinstance(ref, str):
        raise ConfigError(f"Plugin must be a callable or import string, got {type(ref).__name__}")

    module_name, sep, attr = ref.strip().partition(":")
    if not sep or not module_name or not attr:
        raise ConfigError(f"Plugin reference must look like 'package.module:attribute', got {ref!r}")
    try:
        target = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import plugin module {module_name!r}: {e}") from e
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise ConfigError(f"Plugin {ref!r} not found: {e}") from e
    if not callable(target):
        raise ConfigError(f"Plugin {ref!r} is not callable")
    return target


def plugin_name(plugin: RehypePlugin) -> str:
    """Human-readable 'module:qualname' for a plugin callable."""
    module = getattr(plugin, "__module__", None) or "?"
    name = getattr(plugin, "__qualname__", None) or type(plugin).__qualname__
    return f"{module}:{name}"


class MarkdownConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    syntax_highlight: bool = Field(default=False, description="Use the built-in Pygments highlighter for fences")
    rehype_plugins: tuple[RehypePlugin, ...] = Field(default=(), description="HTML tree plugins, applied in order")

    @field_validator("rehype_plugins", mode="before")
    @classmethod
    def _resolve_plugins(cls, value: Any) -> tuple:
        if value is None:
            return ()
        if callable(value) or isinstance(value, str):
            value = [value]
        return tuple(resolve_plugin(v) for v in value)


class BuildConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    site:          str = Field(description="Absolute URL the site is deployed under")
    base:          str = Field(default="/", description="Path prefix for every page link")
    markdown:      MarkdownConfig = Field(default_factory=MarkdownConfig)
    title:         str = Field(default="Blog", description="Site title used by templates and the feed")
    description:   str = Field(default="",     description="Site description for the index and feed")
    src_dir:       str = Field(default="posts",  description="Directory of .md/.mdx posts")
    out_dir:       str = Field(default="dist",   description="Directory the static site is written to")
    public_dir:    str = Field(default="public", description="Static assets copied verbatim into out_dir")
    parser_config: str = Field(default="gfm-like", description="MarkdownIt parser preset name")

    @field_validator("site")
    @classmethod
    def _check_site(cls, value: str) -> str:
        value = value.strip()
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"'site' must be an absolute http(s) URL, got {value!r}")
        return value.rstrip("/")

    @field_validator("base")
    @classmethod
    def _check_base(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith("/"):
            raise ValueError(f"'base' must start with '/', got {value!r}")
        if "//" in value or any(c.isspace() for c in value):
            raise ValueError(f"'base' is not a valid path prefix: {value!r}")
        return value.rstrip("/") or "/"


def define_config(**fields: Any) -> BuildConfig:
    """Validate fields into a frozen BuildConfig; the entry point for site_config.py files."""
    try:
        return BuildConfig(**fields)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def describe_config(config: BuildConfig) -> dict[str, Any]:
    """JSON-safe view of a config, with plugins shown by import name."""
    data = config.model_dump(exclude={"markdown"})
    data["markdown"] = {
        "syntax_highlight": config.markdown.syntax_highlight,
        "rehype_plugins": [plugin_name(p) for p in config.markdown.rehype_plugins],
    }
    return data


def _as_data(config: BuildConfig) -> dict[str, Any]:
    return {name: getattr(config, name) for name in BuildConfig.model_fields}


def _read_config_module(path: Path) -> dict[str, Any]:
    """Execute a Python config file and return the fields of its `config` object."""
    spec = importlib.util.spec_from_file_location(f"_mdblog_site_config_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise ConfigError(f"Cannot load config file {path}")
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except ConfigError:
        raise
    except Exception as e:
        raise ConfigError(f"Failed to load {path}: {e}") from e

    raw = getattr(module, "config", None)
    if isinstance(raw, BuildConfig):
        return _as_data(raw)
    if isinstance(raw, Mapping):
        return dict(raw)
    raise ConfigError(f"{path} must define 'config' as define_config(...) or a mapping")


def load_config(path: Path | str | None = None, overrides: dict[str, Any] = None) -> BuildConfig:
    """Load BuildConfig from site_config.py, then MDBLOG_<FIELD> env vars, then non-None CLI overrides.

    Without an explicit path, ./site_config.py is used when present, otherwise the
    bundled mdblog.site_config. An explicit path that does not exist is an error.
    """
    if path is not None:
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")
        data = _read_config_module(config_path)
    elif Path(CONFIG_FILE).is_file():
        data = _read_config_module(Path(CONFIG_FILE))
    else:
        from mdblog.site_config import config as bundled
        data = _as_data(bundled)

    for name in BuildConfig.model_fields:
        if name == "markdown":
            continue
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return define_config(**data)
