"""Markdown blog post builder: front matter, regex markdown converter, metadata index."""

__version__ = "1.0.0"
