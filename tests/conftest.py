"""
Shared test fixtures.
"""

from pathlib import Path

import pytest

from mdblog.config import default_config


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch):
    """Run every test from an empty directory so no stray config.yml is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def cfg() -> dict:
    return default_config()


@pytest.fixture
def posts_dir(tmp_path: Path) -> Path:
    d = tmp_path / "posts"
    d.mkdir()
    return d


@pytest.fixture
def make_post():
    """Return a helper that writes a post with front matter into a directory."""

    def _make(directory: Path, name: str, title: str, date: str, body: str = "Some body text.", **extra) -> Path:
        lines = ["---", f'title: "{title}"', f"date: {date}"]
        lines += [f"{key}: {value}" for key, value in extra.items()]
        lines += ["---", "", body, ""]
        path = directory / name
        path.write_text("\n".join(lines), encoding="utf-8")
        return path

    return _make
