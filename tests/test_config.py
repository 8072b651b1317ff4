"""
Tests for config loading.
"""

import textwrap
from pathlib import Path

import pytest

from mdblog.config import ConfigError, default_config, load_config


class TestLoadConfig:

    def test_defaults_without_file(self):
        assert load_config() == default_config()

    def test_reads_config_yml_from_cwd(self, isolated_cwd: Path):
        (isolated_cwd / "config.yml").write_text("site_title: My Blog\n")
        cfg = load_config()
        assert cfg["site_title"] == "My Blog"
        assert cfg["author"] == "Anonymous"

    def test_sections_merge(self, tmp_path: Path):
        path = tmp_path / "blog.yml"
        path.write_text(textwrap.dedent("""\
            categories:
              travel: Travel
            markdown:
              breaks: true
            excerpt_words: "12"
        """))
        cfg = load_config(path)
        assert cfg["categories"]["travel"] == "Travel"
        assert cfg["categories"]["cryptography"] == "Cryptography"
        assert cfg["markdown"] == {"engine": "regex", "github_flavored": True, "breaks": True}
        assert cfg["excerpt_words"] == 12

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_config(path) == default_config()

    def test_missing_explicit_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yml")

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "bad.yml"
        path.write_text("key: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)
