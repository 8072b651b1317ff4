import sys
from pathlib import Path

from .config import ConfigError, load_config
from .converter import MarkdownConverter
from .frontmatter import parse_front_matter
from .metadata import build_metadata_index, collect_posts, write_metadata_index
from .render import render_post_page

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_MISSING_INPUT = 1
EXIT_CONVERSION_FAILED = 2

USAGE = """\
Usage: mdblog [--config FILE] <command> [args]

Commands:
  convert <input> [output]             Convert one markdown post to HTML
  build-all [inputDir] [outputDir]     Convert every post in a directory
  update-metadata [dir]                Regenerate the posts metadata index
  help                                 Show this message

Examples:
  mdblog convert posts/crypto-hash-functions.md
  mdblog build-all posts posts
  mdblog update-metadata posts
"""


# -----------------------
# Conversion
# -----------------------

def convert_file(input_path: Path, output_path: Path, cfg: dict, converter: MarkdownConverter):
    """Read one post, convert it and write the full page. Errors propagate."""
    content = input_path.read_text(encoding="utf-8")
    doc = parse_front_matter(content)
    body_html = converter.convert(doc.body)
    page = render_post_page(doc.meta, body_html, cfg)
    output_path.write_text(page, encoding="utf-8")
    print(f"Converted {input_path} -> {output_path}")


def build_all(input_dir: Path, output_dir: Path, cfg: dict, converter: MarkdownConverter):
    """
    Convert every post in input_dir into output_dir.
    A failing post is reported and counted; the rest still build.
    Returns (succeeded, failed).
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    succeeded = failed = 0
    for md_file in collect_posts(input_dir):
        out_path = output_dir / md_file.with_suffix(".html").name
        try:
            convert_file(md_file, out_path, cfg, converter)
        except (OSError, UnicodeDecodeError) as exc:
            print(f"ERROR: failed to convert {md_file}: {exc}", file=sys.stderr)
            failed += 1
        else:
            succeeded += 1

    return succeeded, failed


# -----------------------
# Commands
# -----------------------

def cmd_convert(args: list, cfg: dict) -> int:
    if not args:
        print(USAGE, file=sys.stderr)
        return EXIT_USAGE

    input_path = Path(args[0])
    output_path = Path(args[1]) if len(args) > 1 else input_path.with_suffix(".html")

    if not input_path.is_file():
        print(f"Input file not found: {input_path}", file=sys.stderr)
        return EXIT_MISSING_INPUT

    try:
        convert_file(input_path, output_path, cfg, MarkdownConverter.from_config(cfg))
    except (OSError, UnicodeDecodeError) as exc:
        print(f"ERROR: failed to convert {input_path}: {exc}", file=sys.stderr)
        return EXIT_CONVERSION_FAILED
    return EXIT_OK


def cmd_build_all(args: list, cfg: dict) -> int:
    input_dir = Path(args[0]) if args else Path(cfg["input_dir"])
    output_dir = Path(args[1]) if len(args) > 1 else Path(cfg["output_dir"])

    if not input_dir.is_dir():
        print(f"Input directory not found: {input_dir}", file=sys.stderr)
        return EXIT_MISSING_INPUT

    succeeded, failed = build_all(input_dir, output_dir, cfg, MarkdownConverter.from_config(cfg))
    print(f"\nDone: {succeeded} succeeded, {failed} failed")
    return EXIT_OK


def cmd_update_metadata(args: list, cfg: dict) -> int:
    posts_dir = Path(args[0]) if args else Path(cfg["input_dir"])

    if not posts_dir.is_dir():
        print(f"Posts directory not found: {posts_dir}", file=sys.stderr)
        return EXIT_MISSING_INPUT

    entries = build_metadata_index(posts_dir, cfg)
    write_metadata_index(entries, posts_dir / cfg["metadata_file"])
    return EXIT_OK


COMMANDS = {
    "convert": cmd_convert,
    "build-all": cmd_build_all,
    "update-metadata": cmd_update_metadata,
}


# -----------------------
# main()
# -----------------------

def split_config_option(argv: list):
    """Pull a leading '--config FILE' off argv; returns (config_path, rest)."""
    if argv and argv[0] == "--config":
        if len(argv) < 2:
            raise ConfigError("--config needs a file argument")
        return Path(argv[1]), argv[2:]
    if argv and argv[0].startswith("--config="):
        return Path(argv[0].split("=", 1)[1]), argv[1:]
    return None, argv


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)

    try:
        config_path, argv = split_config_option(argv)
        cfg = load_config(config_path)
        MarkdownConverter.from_config(cfg)
    except (ConfigError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_USAGE

    if not argv or argv[0] not in COMMANDS:
        if argv and argv[0] not in ("help", "-h", "--help"):
            print(f"Unknown command: {argv[0]}\n", file=sys.stderr)
        print(USAGE)
        return EXIT_USAGE

    return COMMANDS[argv[0]](argv[1:], cfg)
