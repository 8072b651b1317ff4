import json
import math
import sys
from datetime import datetime
from pathlib import Path

import markdown  # pip install markdown
from bs4 import BeautifulSoup  # pip install beautifulsoup4

from .frontmatter import parse_front_matter
from .render import as_list, as_text, parse_date

MARKDOWN_SUFFIXES = (".md", ".markdown")
WORDS_PER_MINUTE = 200


def collect_posts(directory: Path) -> list:
    """Non-hidden markdown files directly inside directory, sorted by name."""
    return sorted(
        p for p in directory.iterdir()
        if p.is_file() and not p.name.startswith(".") and p.suffix.lower() in MARKDOWN_SUFFIXES
    )


def plain_text(body_md: str) -> str:
    html_body = markdown.markdown(body_md, extensions=["fenced_code"])
    return BeautifulSoup(html_body, "html.parser").get_text(" ", strip=True)


def estimate_read_time(text: str) -> str:
    minutes = max(1, math.ceil(len(text.split()) / WORDS_PER_MINUTE))
    return f"{minutes} min read"


def make_excerpt(text: str, words: int) -> str:
    parts = text.split()
    if len(parts) <= words:
        return " ".join(parts)
    return " ".join(parts[:words]) + "…"


def metadata_entry(meta: dict, body: str, source: Path, cfg: dict) -> dict:
    """
    Flatten one post's front matter into an index record:

      { title, date, category, excerpt, tags, url, readTime, author }

    excerpt and readTime fall back to values derived from the body text.
    """
    text = None
    excerpt = as_text(meta.get("excerpt"))
    read_time = as_text(meta.get("readTime"))
    if not excerpt or not read_time:
        text = plain_text(body)

    return {
        "title": as_text(meta.get("title")) or source.stem.replace("-", " ").title(),
        "date": as_text(meta.get("date")),
        "category": as_text(meta.get("category")),
        "excerpt": excerpt or make_excerpt(text, cfg["excerpt_words"]),
        "tags": as_list(meta.get("tags")),
        "url": f"{cfg['posts_url_prefix']}{source.stem}.html",
        "readTime": read_time or estimate_read_time(text),
        "author": as_text(meta.get("author")) or cfg["author"],
    }


def sort_key(entry: dict):
    # undated or unparseable entries sink to the bottom
    return parse_date(entry["date"]) or datetime.min


def build_metadata_index(directory: Path, cfg: dict) -> list:
    """
    Read every post in directory and return index entries, newest first.
    Unreadable files are reported and skipped.
    """
    entries = []
    for md_file in collect_posts(directory):
        try:
            content = md_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            print(f"WARNING: skipping {md_file}: {exc}", file=sys.stderr)
            continue

        doc = parse_front_matter(content)
        entries.append(metadata_entry(doc.meta, doc.body, md_file, cfg))

    entries.sort(key=sort_key, reverse=True)
    return entries


def write_metadata_index(entries: list, path: Path):
    path.write_text(json.dumps({"posts": entries}, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    print(f"Wrote {path} ({len(entries)} post(s))")
