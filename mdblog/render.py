import html
from datetime import date, datetime

from bs4 import BeautifulSoup  # pip install beautifulsoup4

DATE_FORMATS = ("%Y-%m-%d", "%B %d, %Y", "%b %d, %Y", "%d %B %Y")


def parse_date(date_str: str):
    """Try the supported date formats; None when none match."""
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(date_str.strip(), fmt)
        except ValueError:
            continue
    return None


def long_date(date_str: str) -> str:
    """'2025-01-05' -> 'January 5, 2025'. Unparseable dates are returned as-is."""
    dt = parse_date(date_str)
    if dt is None:
        return date_str
    return f"{dt:%B} {dt.day}, {dt.year}"


def category_label(category: str, cfg: dict) -> str:
    if not category:
        return "General"
    names = cfg.get("categories") or {}
    return names.get(category) or category.replace("-", " ").title()


def as_text(value) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(value)
    return str(value or "")


def as_list(value) -> list:
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if str(v).strip()]
    if not value:
        return []
    return [t.strip() for t in str(value).split(",") if t.strip()]


def add_figure_captions(body_html: str) -> str:
    """Put each bare <img> in a <figure class="post-figure">, captioned by its alt text."""
    soup = BeautifulSoup(body_html, "html.parser")

    for img in soup.select("img"):
        if img.find_parent("figure"):
            continue
        figure = img.wrap(soup.new_tag("figure", attrs={"class": "post-figure"}))
        if img.get("alt", "").strip():
            figure.append(soup.new_tag("figcaption", string=img["alt"].strip()))

    return str(soup)


def tags_html(tags: list) -> str:
    return "".join(f'<span class="tag">{html.escape(t)}</span>' for t in tags)


THEME_TOGGLE_HTML = """<div id="theme-toggle" class="theme-toggle" aria-label="Toggle theme">
            <button type="button" class="theme-toggle-btn" aria-label="Toggle dark/light mode">
                <span class="theme-toggle-icon theme-toggle-light" aria-hidden="true">☀️</span>
                <span class="theme-toggle-icon theme-toggle-dark" aria-hidden="true">🌙</span>
            </button>
        </div>"""

THEME_SCRIPT = """<script>
        (function () {
            var toggle = document.getElementById('theme-toggle');
            if (!toggle) return;
            toggle.addEventListener('click', function () {
                var current = document.documentElement.getAttribute('data-theme');
                var next = current === 'dark' ? 'light' : 'dark';
                document.documentElement.setAttribute('data-theme', next);
                localStorage.setItem('theme', next);
            });
        })();
    </script>"""


def render_post_page(meta: dict, body_html: str, cfg: dict, *, year: int = None) -> str:
    """
    Render a complete post page around an already converted body fragment.
    """
    title = as_text(meta.get("title")) or "Blog Post"
    description = as_text(meta.get("excerpt") or meta.get("description"))
    date_str = as_text(meta.get("date")) or date.today().isoformat()
    category = as_text(meta.get("category"))
    author = as_text(meta.get("author")) or cfg["author"]
    read_time = as_text(meta.get("readTime"))
    tags = as_list(meta.get("tags"))
    year = year or date.today().year

    if cfg.get("figure_captions"):
        body_html = add_figure_captions(body_html)

    site_title = html.escape(cfg["site_title"])
    read_time_html = f'<span class="read-time">{html.escape(read_time)}</span>' if read_time else ""

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(title)} | {site_title}</title>
    <meta name="description" content="{html.escape(description)}">
    <link rel="stylesheet" href="{cfg['stylesheet']}">
    <script>
        (function () {{
            var saved = localStorage.getItem('theme') || 'dark';
            document.documentElement.setAttribute('data-theme', saved);
        }})();
    </script>
</head>
<body>
    <div class="container">
        {THEME_TOGGLE_HTML}

        <header class="header">
            <div class="header-content">
                <h1 class="site-title">
                    <a href="../index.html" class="site-title-link">{site_title}</a>
                </h1>
            </div>
        </header>

        <main class="main">
            <article class="post-article">
                <div class="post-header">
                    <div class="post-meta">
                        <time class="post-date" datetime="{html.escape(date_str)}">{html.escape(long_date(date_str))}</time>
                        <span class="post-category-tag" data-category="{html.escape(category)}">{html.escape(category_label(category, cfg))}</span>
                    </div>
                    <h1 class="post-title">{html.escape(title)}</h1>
                    <div class="post-info">
                        {read_time_html}
                        <span class="author">by {html.escape(author)}</span>
                    </div>
                </div>

                <div class="post-content">
                    {body_html}
                </div>

                <div class="post-footer">
                    <div class="post-tags">
                        {tags_html(tags)}
                    </div>
                    <div class="post-navigation">
                        <a href="../index.html" class="nav-link">← Back to Posts</a>
                    </div>
                </div>
            </article>
        </main>

        <footer class="footer">
            <p>&copy; {year} {html.escape(cfg['author'])}. All rights reserved.</p>
        </footer>
    </div>

    {THEME_SCRIPT}
    <script src="{cfg['script']}"></script>
</body>
</html>
"""
