from pathlib import Path

import yaml  # pip install pyyaml

DEFAULT_CONFIG_FILE = "config.yml"

DEFAULT_CATEGORIES = {
    "blockchain": "Blockchain",
    "cryptography": "Cryptography",
    "economics": "Economics",
    "fragments": "Fragments",
    "mathematics": "Mathematics",
}


class ConfigError(Exception):
    pass


def default_config() -> dict:
    return {
        "site_title": "Blog",
        "author": "Anonymous",
        "stylesheet": "../src/style.css",
        "script": "../src/index.js",
        "input_dir": "posts",
        "output_dir": "posts",
        "metadata_file": "metadata.json",
        "posts_url_prefix": "./posts/",
        "categories": dict(DEFAULT_CATEGORIES),
        "excerpt_words": 40,
        "figure_captions": False,
        "markdown": {
            "engine": "regex",
            "github_flavored": True,
            "breaks": False,
        },
    }


def load_config(path=None) -> dict:
    """
    Load YAML config and apply defaults.

    An explicit path must exist; without one, ./config.yml is used when present
    and the built-in defaults otherwise.
    """
    cfg = default_config()

    if path is None:
        path = Path(DEFAULT_CONFIG_FILE)
        if not path.exists():
            return cfg
    else:
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    # categories and markdown merge key by key; everything else replaces
    for key in ("categories", "markdown"):
        section = data.pop(key, None)
        if isinstance(section, dict):
            cfg[key].update(section)

    cfg.update(data)
    cfg["excerpt_words"] = int(cfg["excerpt_words"])
    cfg["figure_captions"] = bool(cfg["figure_captions"])
    return cfg
