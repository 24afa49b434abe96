"""Transformation pipeline for World Anvil articles."""

from .models import Article, TransformResult
from .pipeline import ArticleTransformer, transform_article
from .sanitizer import DEFAULT_IMAGE_ORIGIN
from .stylesheet import (
    AssetUploader,
    StylesheetPublisher,
    UploadResult,
    rewrite_stylesheet,
)

__all__ = [
    "Article",
    "ArticleTransformer",
    "AssetUploader",
    "DEFAULT_IMAGE_ORIGIN",
    "StylesheetPublisher",
    "TransformResult",
    "UploadResult",
    "rewrite_stylesheet",
    "transform_article",
]
