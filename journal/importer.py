"""Fetch, transform and persist World Anvil articles as journal entries."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Protocol

from anvil_transform.models import Article
from anvil_transform.pipeline import ArticleTransformer

from .models import JournalEntry
from .store import JournalStore


class ArticleSource(Protocol):
    async def get_article(self, article_id: str) -> Article:
        ...


async def import_article(
    article_id: str,
    *,
    source: ArticleSource,
    transformer: ArticleTransformer,
    store: JournalStore,
    refresh: bool = True,
) -> Optional[JournalEntry]:
    """Import one article, refreshing the existing entry when present.

    Returns ``None`` when the entry exists and ``refresh`` is disabled.
    """

    existing = store.find(article_id)
    if existing is not None and not refresh:
        print(f"Skipping {article_id}; journal entry already present")
        return None

    article = await source.get_article(article_id)
    result = await transformer.transform_article(article)

    if existing is not None:
        entry = replace(
            existing,
            name=article.title,
            content=result.html,
            img=result.img,
            source_url=article.url or existing.source_url,
        )
        store.save(entry)
        print(f"Refreshed World Anvil article {article.title}")
        return entry

    entry = JournalEntry(
        name=article.title,
        content=result.html,
        article_id=article.id or article_id,
        img=result.img,
        folder=store.folder_for(article),
        source_url=article.url or None,
    )
    store.save(entry)
    print(f"Imported World Anvil article {article.title}")
    return entry


__all__ = ["ArticleSource", "import_article"]
