"""Unit tests for core/urls.py"""

from mdblog.config import define_config
from mdblog.core.urls import absolute_url, post_path, url_for


def test_url_for_prefixes_base(config):
    assert url_for(config) == "/blog/"
    assert url_for(config, "posts/a/") == "/blog/posts/a/"
    assert url_for(config, "/rss.xml") == "/blog/rss.xml"


def test_url_for_root_base():
    config = define_config(site="https://example.com", base="/")
    assert url_for(config, "rss.xml") == "/rss.xml"


def test_absolute_url(config):
    assert absolute_url(config, post_path("hello")) == "https://example.com/blog/posts/hello/"
