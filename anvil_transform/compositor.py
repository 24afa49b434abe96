"""Compose the article heading, body, panel and aside into one fragment."""

from __future__ import annotations

from html import escape
from typing import Callable, Optional

try:
    from bs4 import BeautifulSoup  # type: ignore[import-not-found]
except ImportError as exc:
    raise SystemExit(
        "Missing dependency 'beautifulsoup4'. Install with pip install"
        " beautifulsoup4"
    ) from exc

from .models import Article, AssembledSections, ComposedDocument

SOURCE_LINK_LABEL_KEY = "WA.OnWA"
DEFERRED_SOURCE_ATTR = "data-src"


def secure_url(url: str) -> str:
    """Force a plain ``http://`` URL onto ``https://``."""

    if url.startswith("http://"):
        return "https://" + url[len("http://"):]
    return url


def resolve_featured_image(article: Article) -> Optional[str]:
    """Return the portrait URL, else the cover URL, upgraded to https."""

    if article.portrait_url:
        return secure_url(article.portrait_url)
    if article.cover_url:
        return secure_url(article.cover_url)
    return None


def defer_image_sources(markup: str) -> str:
    """Rename every ``src`` attribute to ``data-src`` so nothing loads."""

    soup = BeautifulSoup(markup, "lxml")
    root = soup.body or soup
    for element in root.find_all(src=True):
        element[DEFERRED_SOURCE_ATTR] = element["src"]
        del element["src"]
    return root.decode_contents()


def compose_document(
    article: Article,
    assembled: AssembledSections,
    *,
    localize: Callable[[str], str],
) -> ComposedDocument:
    """Stitch the assembled pieces into a single pre-sanitization fragment."""

    title = escape(article.title)
    url = escape(article.url)
    link_title = escape(
        f"{article.title} {localize(SOURCE_LINK_LABEL_KEY)}"
    )

    parts: list[str] = [
        f"<h1>{title}</h1>\n",
        (
            f'<p><a href="{url}" title="{link_title}" target="_blank">'
            f"{url}</a></p>\n"
        ),
        '<div class="article-container page">',
        f'<div class="article-content">{article.content}{assembled.body}',
        "</div><hr/>",
    ]

    panel = assembled.side_panel
    if not panel.is_empty():
        parts.append('<div class="panel panel-default">')
        parts.extend((panel.top, panel.main, panel.bottom))
        parts.append("</div>")

    if assembled.aside:
        parts.append(f"<aside><dl>{assembled.aside}</dl></aside>")

    parts.append("</div>")

    return ComposedDocument(
        content=defer_image_sources("".join(parts)),
        image=resolve_featured_image(article),
    )


__all__ = [
    "DEFERRED_SOURCE_ATTR",
    "SOURCE_LINK_LABEL_KEY",
    "compose_document",
    "defer_image_sources",
    "resolve_featured_image",
    "secure_url",
]
