"""Rewrite a composed article fragment into its final sanitized HTML.

All work happens on a detached BeautifulSoup tree, so nothing here touches the
network: deferred images are only rewritten into absolute ``src`` URLs for the
caller to load later.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urljoin

try:
    from bs4 import BeautifulSoup  # type: ignore[import-not-found]
except ImportError as exc:
    raise SystemExit(
        "Missing dependency 'beautifulsoup4'. Install with pip install"
        " beautifulsoup4"
    ) from exc

from .compositor import DEFERRED_SOURCE_ATTR
from .models import ComposedDocument, TransformResult

DEFAULT_IMAGE_ORIGIN = "https://worldanvil.com"
PARAGRAPH_PLACEHOLDER = "%p%"
PARAGRAPH_BREAK = "</p><p>"
LINE_SPACER_SELECTOR = "span.line-spacer"
REFERENCE_ID_ATTR = "data-article-id"
REFERENCE_LINK_CLASSES = ("entity-link", "wa-link")


def _replace_line_spacers(root: Any) -> None:
    for spacer in root.select(LINE_SPACER_SELECTOR):
        spacer.replace_with(PARAGRAPH_PLACEHOLDER)


def _restore_images(
    soup: Any, root: Any, image: str | None, image_origin: str
) -> str | None:
    """Swap deferred images for live ones; return the featured image."""

    for deferred in root.find_all("img", attrs={DEFERRED_SOURCE_ATTR: True}):
        source = urljoin(image_origin, deferred[DEFERRED_SOURCE_ATTR])
        live = soup.new_tag("img", attrs={"src": source})
        for name in ("alt", "title"):
            if deferred.has_attr(name):
                live[name] = deferred[name]
        deferred.replace_with(live)
        image = image or source
    return image


def _add_link_classes(element: Any) -> list[str]:
    classes = list(element.get("class") or [])
    for token in REFERENCE_LINK_CLASSES:
        if token not in classes:
            classes.append(token)
    element["class"] = classes
    return classes


def _promote_references(soup: Any, root: Any) -> None:
    """Mark reference spans and demote reference anchors into spans."""

    for marker in root.find_all("span", attrs={REFERENCE_ID_ATTR: True}):
        _add_link_classes(marker)

    for anchor in root.find_all("a", attrs={REFERENCE_ID_ATTR: True}):
        classes = _add_link_classes(anchor)
        span = soup.new_tag("span")
        span["class"] = classes
        for name, value in anchor.attrs.items():
            if name.startswith("data-"):
                span[name] = value
        span.string = anchor.get_text()
        anchor.replace_with(span)


def sanitize_document(
    composed: ComposedDocument,
    stylesheet_link: str,
    *,
    image_origin: str = DEFAULT_IMAGE_ORIGIN,
) -> TransformResult:
    """Produce the final HTML and featured image for ``composed``."""

    soup = BeautifulSoup(composed.content, "lxml")
    root = soup.body or soup

    # Spacers first: the break is finalized on the serialized string.
    _replace_line_spacers(root)
    image = _restore_images(soup, root, composed.image, image_origin)
    _promote_references(soup, root)

    html = stylesheet_link + root.decode_contents()
    html = html.replace(PARAGRAPH_PLACEHOLDER, PARAGRAPH_BREAK)
    return TransformResult(html=html, img=image)


__all__ = [
    "DEFAULT_IMAGE_ORIGIN",
    "PARAGRAPH_BREAK",
    "PARAGRAPH_PLACEHOLDER",
    "REFERENCE_LINK_CLASSES",
    "sanitize_document",
]
