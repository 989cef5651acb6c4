"""Shared fixtures: a plugin-free build config and a posts directory writer"""

import pytest

from mdblog.config import define_config


@pytest.fixture(name="config")
def config_fixture(tmp_path):
    return define_config(
        site="https://example.com",
        base="/blog",
        title="Test Blog",
        description="Notes & experiments",
        src_dir=str(tmp_path / "posts"),
        out_dir=str(tmp_path / "dist"),
        public_dir=str(tmp_path / "public"),
    )


@pytest.fixture(name="write_post")
def write_post_fixture(tmp_path):
    """Write tmp_path/posts/<name> and return its path."""
    def _write(name: str, text: str):
        path = tmp_path / "posts" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
    return _write
