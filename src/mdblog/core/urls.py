"""URL helpers: base-prefixed links and site-absolute URLs"""

from mdblog.config import BuildConfig


def url_for(config: BuildConfig, path: str = "") -> str:
    """Site-relative link under config.base, e.g. 'posts/a/' -> '/base/posts/a/'."""
    return f"{config.base.rstrip('/')}/{path.lstrip('/')}"


def absolute_url(config: BuildConfig, path: str = "") -> str:
    """Fully qualified URL on config.site, for feeds and canonical links."""
    return config.site + url_for(config, path)


def post_path(slug: str) -> str:
    return f"posts/{slug}/"
