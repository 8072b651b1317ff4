import html
import re
from typing import Callable, NamedTuple, Union

import markdown  # pip install markdown

# Private-use markers around a stashed code block index.
STASH_OPEN = "\ue000"
STASH_CLOSE = "\ue001"
STASH_RE = re.compile(f"{STASH_OPEN}(\\d+){STASH_CLOSE}")
STASH_MARKERS_RE = re.compile(f"[{STASH_OPEN}{STASH_CLOSE}]")

BLOCK_PREFIXES = ("<h", "<pre", "<ul", "<ol", "<blockquote", "<hr", STASH_OPEN)
PARAGRAPH_SPLIT_RE = re.compile(r"\r?\n\r?\n")
ADJACENT_LISTS_RE = re.compile(r"</ul>\s*<ul>")


class Rule(NamedTuple):
    """A pattern and either a back-reference template or a match -> str callable."""
    pattern: re.Pattern
    replacement: Union[str, Callable]


def escape_code(code: str) -> str:
    return html.escape(code, quote=True).replace("&#x27;", "&#39;")


def render_code_block(m) -> str:
    lang = m.group(1)
    cls = f' class="language-{lang}"' if lang else ""
    return f"<pre><code{cls}>{escape_code(m.group(2).strip())}</code></pre>"


# -----------------------
# Rule table
# -----------------------

CODE_BLOCK_RULE = Rule(re.compile(r"```(\w+)?\r?\n(.*?)\r?\n```", re.DOTALL), render_code_block)

# Order matters: h4 before h1, *** before ** before *, block constructs before inline.
INLINE_RULES = [
    Rule(re.compile(r"^#### (.*)$", re.M), r"<h4>\1</h4>"),
    Rule(re.compile(r"^### (.*)$", re.M), r"<h3>\1</h3>"),
    Rule(re.compile(r"^## (.*)$", re.M), r"<h2>\1</h2>"),
    Rule(re.compile(r"^# (.*)$", re.M), r"<h1>\1</h1>"),

    Rule(re.compile(r"\*\*\*(.*?)\*\*\*"), r"<strong><em>\1</em></strong>"),
    Rule(re.compile(r"\*\*(.*?)\*\*"), r"<strong>\1</strong>"),
    Rule(re.compile(r"\*(.*?)\*"), r"<em>\1</em>"),

    Rule(re.compile(r"`([^`]+)`"), r"<code>\1</code>"),

    # Links skip the "[alt](src)" tail of an image.
    Rule(re.compile(r"(?<!!)\[([^\]]+)\]\(([^)]+)\)"), r'<a href="\2">\1</a>'),
    Rule(re.compile(r"!\[([^\]]*)\]\(([^)]+)\)"), r'<img src="\2" alt="\1">'),

    Rule(re.compile(r"^---$", re.M), "<hr>"),
    Rule(re.compile(r"^- (.*)$", re.M), r"<li>\1</li>"),
    Rule(re.compile(r"^> (.*)$", re.M), r"<blockquote>\1</blockquote>"),
]

RULES = [CODE_BLOCK_RULE] + INLINE_RULES


def apply_rule(text: str, rule: Rule) -> str:
    return rule.pattern.sub(rule.replacement, text)


def apply_rules(text: str, rules) -> str:
    """Fold the rules over text, each producing a new string."""
    for rule in rules:
        text = apply_rule(text, rule)
    return text


# -----------------------
# Code block stash
# -----------------------

def stash_code_blocks(text: str):
    """
    Replace fenced code blocks by placeholders so later rules can't touch them.
    Stray marker characters already in the text are dropped first.
    Returns (text, blocks); restore_code_blocks() puts them back.
    """
    blocks = []

    def _stash(m):
        blocks.append(render_code_block(m))
        return f"{STASH_OPEN}{len(blocks) - 1}{STASH_CLOSE}"

    text = STASH_MARKERS_RE.sub("", text)
    return CODE_BLOCK_RULE.pattern.sub(_stash, text), blocks


def restore_code_blocks(text: str, blocks: list) -> str:
    def _restore(m):
        index = int(m.group(1))
        return blocks[index] if index < len(blocks) else m.group(0)

    return STASH_RE.sub(_restore, text)


# -----------------------
# Paragraphs
# -----------------------

def wrap_paragraphs(text: str, *, breaks: bool = False) -> str:
    """
    Split on blank lines and wrap each chunk:

      <li>...       -> <ul>...</ul>
      block tag     -> left as is
      ...<li>...    -> <ul>...</ul>
      anything else -> <p>...</p>

    Consecutive <ul> blocks are merged afterwards.
    """
    out = []
    for chunk in PARAGRAPH_SPLIT_RE.split(text):
        chunk = chunk.strip()
        if not chunk:
            continue
        if chunk.startswith("<li>"):
            out.append(f"<ul>\n{chunk}\n</ul>")
        elif chunk.startswith(BLOCK_PREFIXES):
            out.append(chunk)
        elif "<li>" in chunk:
            out.append(f"<ul>\n{chunk}\n</ul>")
        else:
            if breaks:
                chunk = chunk.replace("\n", "<br>\n")
            out.append(f"<p>{chunk}</p>")

    return ADJACENT_LISTS_RE.sub("", "\n\n".join(out))


# -----------------------
# Converter
# -----------------------

ENGINES = ("regex", "markdown")


class MarkdownConverter:
    """
    Markdown body -> HTML fragment.

    engine="regex" runs the ordered rule table; engine="markdown" hands the
    text to Python-Markdown instead. Options are fixed at construction:

      github_flavored -> tables in the markdown engine (no effect on regex)
      breaks          -> single newlines inside paragraphs become <br>
    """

    def __init__(self, *, github_flavored: bool = True, breaks: bool = False, engine: str = "regex"):
        if engine not in ENGINES:
            raise ValueError(f"Unknown markdown engine: {engine!r} (expected one of {', '.join(ENGINES)})")
        self.github_flavored = github_flavored
        self.breaks = breaks
        self.engine = engine

    @classmethod
    def from_config(cls, cfg: dict) -> "MarkdownConverter":
        opts = cfg.get("markdown") or {}
        return cls(
            github_flavored=bool(opts.get("github_flavored", True)),
            breaks=bool(opts.get("breaks", False)),
            engine=opts.get("engine", "regex"),
        )

    def library_extensions(self) -> list:
        extensions = ["fenced_code"]
        if self.github_flavored:
            extensions += ["tables", "sane_lists"]
        if self.breaks:
            extensions.append("nl2br")
        return extensions

    def convert(self, text: str) -> str:
        if not text:
            return ""

        if self.engine == "markdown":
            return markdown.markdown(text, extensions=self.library_extensions())

        # rules anchor on $ and \n, which CRLF would defeat
        text = text.replace("\r\n", "\n")
        text, blocks = stash_code_blocks(text)
        text = apply_rules(text, INLINE_RULES)
        text = wrap_paragraphs(text, breaks=self.breaks)
        return restore_code_blocks(text, blocks)
