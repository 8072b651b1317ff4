"""
Tests for the mdblog command line: convert, build-all, update-metadata, help.
"""

import json
from pathlib import Path

from mdblog.cli import main


class TestUsage:

    def test_no_arguments(self, capsys):
        assert main([]) == 1
        assert "Usage: mdblog" in capsys.readouterr().out

    def test_help(self, capsys):
        assert main(["help"]) == 1
        assert "build-all" in capsys.readouterr().out

    def test_unknown_command(self, capsys):
        assert main(["publish"]) == 1
        captured = capsys.readouterr()
        assert "Unknown command: publish" in captured.err
        assert "Usage: mdblog" in captured.out

    def test_missing_config_file(self, tmp_path: Path, capsys):
        assert main(["--config", str(tmp_path / "nope.yml"), "help"]) == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_bad_engine_in_config(self, tmp_path: Path, capsys):
        path = tmp_path / "c.yml"
        path.write_text("markdown:\n  engine: pandoc\n")
        assert main([f"--config={path}", "help"]) == 1
        assert "Unknown markdown engine" in capsys.readouterr().err


class TestConvert:

    def test_default_output_path(self, posts_dir: Path, make_post, capsys):
        src = make_post(posts_dir, "hello.md", "Hello", "2025-01-05", body="# Intro\n\n***wow***")
        assert main(["convert", str(src)]) == 0

        out = posts_dir / "hello.html"
        page = out.read_text(encoding="utf-8")
        assert '<h1 class="post-title">Hello</h1>' in page
        assert "<h1>Intro</h1>" in page
        assert "<p><strong><em>wow</em></strong></p>" in page
        assert "January 5, 2025" in page
        assert "Converted" in capsys.readouterr().out

    def test_explicit_output_path(self, posts_dir: Path, tmp_path: Path, make_post):
        src = make_post(posts_dir, "hello.md", "Hello", "2025-01-05")
        dest = tmp_path / "out.html"
        assert main(["convert", str(src), str(dest)]) == 0
        assert dest.exists()

    def test_missing_input(self, tmp_path: Path, capsys):
        assert main(["convert", str(tmp_path / "missing.md")]) == 1
        assert "Input file not found" in capsys.readouterr().err

    def test_conversion_failure(self, posts_dir: Path, capsys):
        src = posts_dir / "broken.md"
        src.write_bytes(b"---\ntitle: x\n---\n\xff\xfe\xfa")
        assert main(["convert", str(src)]) == 2
        assert "failed to convert" in capsys.readouterr().err
        assert not (posts_dir / "broken.html").exists()

    def test_convert_with_markdown_engine(self, posts_dir: Path, tmp_path: Path, make_post):
        config = tmp_path / "c.yml"
        config.write_text("markdown:\n  engine: markdown\n")
        src = make_post(posts_dir, "t.md", "T", "2025-01-05", body="| a | b |\n|---|---|\n| 1 | 2 |")
        assert main(["--config", str(config), "convert", str(src)]) == 0
        assert "<table>" in (posts_dir / "t.html").read_text(encoding="utf-8")


class TestBuildAll:

    def test_partial_failure_is_tolerated(self, posts_dir: Path, tmp_path: Path, make_post, capsys):
        make_post(posts_dir, "good.md", "Good", "2025-01-05")
        (posts_dir / "corrupt.md").write_bytes(b"---\ntitle: x\n---\n\xff\xfe\xfa")
        out_dir = tmp_path / "site" / "posts"

        assert main(["build-all", str(posts_dir), str(out_dir)]) == 0

        assert (out_dir / "good.html").exists()
        assert not (out_dir / "corrupt.html").exists()
        captured = capsys.readouterr()
        assert "Done: 1 succeeded, 1 failed" in captured.out
        assert "corrupt.md" in captured.err

    def test_hidden_files_skipped(self, posts_dir: Path, make_post, capsys):
        make_post(posts_dir, "a.md", "A", "2025-01-05")
        make_post(posts_dir, ".hidden.md", "H", "2025-01-05")
        assert main(["build-all", str(posts_dir)]) == 0
        assert not (posts_dir / ".hidden.html").exists()
        assert "Done: 1 succeeded, 0 failed" in capsys.readouterr().out

    def test_defaults_come_from_config(self, isolated_cwd: Path, make_post):
        drafts = isolated_cwd / "drafts"
        drafts.mkdir()
        make_post(drafts, "a.md", "A", "2025-01-05")
        (isolated_cwd / "config.yml").write_text("input_dir: drafts\noutput_dir: public\n")
        assert main(["build-all"]) == 0
        assert (isolated_cwd / "public" / "a.html").exists()

    def test_missing_input_dir(self, tmp_path: Path, capsys):
        assert main(["build-all", str(tmp_path / "nope")]) == 1
        assert "Input directory not found" in capsys.readouterr().err


class TestUpdateMetadata:

    def read_index(self, posts_dir: Path) -> list:
        return json.loads((posts_dir / "metadata.json").read_text(encoding="utf-8"))["posts"]

    def test_index_sorted_and_regenerated(self, posts_dir: Path, make_post):
        make_post(posts_dir, "a.md", "A", "2024-01-01", category="mathematics", tags='["x", "y"]')
        make_post(posts_dir, "b.md", "B", "2025-06-30")
        make_post(posts_dir, "c.md", "C", "2024-12-31")

        assert main(["update-metadata", str(posts_dir)]) == 0
        posts = self.read_index(posts_dir)
        assert [p["title"] for p in posts] == ["B", "C", "A"]
        assert posts[2]["tags"] == ["x", "y"]
        assert posts[2]["url"] == "./posts/a.html"
        assert set(posts[0]) == {"title", "date", "category", "excerpt", "tags", "url", "readTime", "author"}

        (posts_dir / "c.md").unlink()
        assert main(["update-metadata", str(posts_dir)]) == 0
        assert [p["title"] for p in self.read_index(posts_dir)] == ["B", "A"]

    def test_missing_dir(self, tmp_path: Path, capsys):
        assert main(["update-metadata", str(tmp_path / "nope")]) == 1
        assert "Posts directory not found" in capsys.readouterr().err
