"""High-level orchestration for article transformation."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Union

from .compositor import compose_document
from .models import Article, TransformResult
from .sanitizer import DEFAULT_IMAGE_ORIGIN, sanitize_document
from .sections import assemble_sections
from .stylesheet import StylesheetPublisher

ArticleInput = Union[Article, Mapping[str, Any]]


def _identity(key: str) -> str:
    return key


class ArticleTransformer:
    """Turn upstream articles into journal-ready HTML.

    Collaborators are injected: ``localize`` supplies the link label suffix
    and ``publisher`` re-hosts ``display_css`` once per transformation.
    """

    def __init__(
        self,
        *,
        publisher: StylesheetPublisher,
        localize: Callable[[str], str] = _identity,
        display_css: str = "",
        image_origin: str = DEFAULT_IMAGE_ORIGIN,
    ) -> None:
        self.publisher = publisher
        self.localize = localize
        self.display_css = display_css
        self.image_origin = image_origin

    async def transform_article(
        self, article: ArticleInput
    ) -> TransformResult:
        """Run the section, composition and sanitizer stages on ``article``."""

        if not isinstance(article, Article):
            article = Article.from_dict(article)

        assembled = assemble_sections(article.sections, article.relations)
        composed = compose_document(
            article, assembled, localize=self.localize
        )
        stylesheet_link = await self.publisher.publish(self.display_css)
        return sanitize_document(
            composed, stylesheet_link, image_origin=self.image_origin
        )


async def transform_article(
    article: ArticleInput,
    *,
    publisher: StylesheetPublisher,
    localize: Callable[[str], str] = _identity,
    display_css: str = "",
    image_origin: str = DEFAULT_IMAGE_ORIGIN,
) -> TransformResult:
    """Transform a single article without keeping a transformer around."""

    transformer = ArticleTransformer(
        publisher=publisher,
        localize=localize,
        display_css=display_css,
        image_origin=image_origin,
    )
    return await transformer.transform_article(article)


__all__ = ["ArticleInput", "ArticleTransformer", "transform_article"]
