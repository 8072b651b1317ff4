import re
from typing import NamedTuple

# Opening "---" line, lazy block, closing "---" line followed by newline or EOF.
FRONT_MATTER_RE = re.compile(
    r"\A---\r?\n(?:(.*?)\r?\n)?---(?:\r?\n(.*))?\Z",
    re.DOTALL,
)
LIST_ITEM_JUNK_RE = re.compile(r'["\[\]]')


class Document(NamedTuple):
    """
    A parsed post.

      meta  -> { key: str | list[str] }
      body  -> markdown text after the front matter block
      found -> False when the text had no front matter (meta is empty and
               body is the untouched input)
    """
    meta: dict
    body: str
    found: bool


def parse_value(raw: str):
    """Normalise one front matter value: quoted string, [list] or plain string."""
    if len(raw) >= 2 and raw.startswith('"') and raw.endswith('"'):
        return raw[1:-1]
    if raw.startswith("[") and raw.endswith("]"):
        return [LIST_ITEM_JUNK_RE.sub("", item.strip()) for item in raw[1:-1].split(",")]
    return raw


def parse_front_matter(text: str) -> Document:
    """
    Split a document into its front matter record and body.

      ---
      title: "Hash functions"
      tags: ["crypto", "math"]
      ---

      Body...

    Lines without a colon are ignored; a repeated key keeps its last value.
    Text that does not start with a front matter block comes back unchanged.
    """
    m = FRONT_MATTER_RE.match(text)
    if not m:
        return Document({}, text, False)

    meta = {}
    for line in (m.group(1) or "").splitlines():
        if ":" not in line:
            continue
        key, raw = line.split(":", 1)
        meta[key.strip()] = parse_value(raw.strip())

    return Document(meta, (m.group(2) or "").strip(), True)


def format_value(value) -> str:
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(f'"{item}"' for item in value) + "]"

    value = str(value)
    # Quote anything parse_value would otherwise reinterpret.
    if value.startswith('"') or value.endswith('"') or (value.startswith("[") and value.endswith("]")):
        return f'"{value}"'
    return value


def format_front_matter(meta: dict, body: str) -> str:
    """Inverse of parse_front_matter()."""
    lines = ["---"]
    lines.extend(f"{key}: {format_value(value)}" for key, value in meta.items())
    lines.append("---")
    return "\n".join(lines) + "\n\n" + body.strip() + "\n"
