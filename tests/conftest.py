"""Shared fixtures for the article import tests."""
from __future__ import annotations

import asyncio
from typing import Any

import pytest

from anvil_transform import ArticleTransformer, StylesheetPublisher
from anvil_transform.stylesheet import UploadResult
from localization import Localizer


class RecordingUploader:
    """In-memory uploader that remembers every submission."""

    def __init__(self, *, ok: bool = True, delay: float = 0.0) -> None:
        self.ok = ok
        self.delay = delay
        self.calls: list[tuple[str, str, bytes]] = []

    async def upload(
        self, file_name: str, target_path: str, data: bytes
    ) -> UploadResult:
        if self.delay:
            await asyncio.sleep(self.delay)
        self.calls.append((file_name, target_path, data))
        return UploadResult(
            ok=self.ok,
            path=f"{target_path}/{file_name}",
            message=None if self.ok else "upload rejected",
        )


@pytest.fixture
def uploader() -> RecordingUploader:
    return RecordingUploader()


@pytest.fixture
def make_uploader():
    return RecordingUploader


@pytest.fixture
def localize() -> Localizer:
    return Localizer({"WA.OnWA": "on World Anvil"})


@pytest.fixture
def transformer(uploader: RecordingUploader, localize: Localizer):
    publisher = StylesheetPublisher(uploader)
    return ArticleTransformer(
        publisher=publisher,
        localize=localize,
        display_css=".user-css h1 { color: red; }",
    )


@pytest.fixture
def run_transform(transformer: ArticleTransformer):
    """Run ``transform_article`` to completion, uploads included."""

    def _run(article: Any):
        async def _go():
            result = await transformer.transform_article(article)
            await transformer.publisher.drain()
            return result

        return asyncio.run(_go())

    return _run


@pytest.fixture
def town_article() -> dict[str, Any]:
    return {
        "id": "town-1",
        "title": "Town",
        "url": "http://x/town",
        "sections": {"s1": {"title": "History", "content_parsed": "Old."}},
        "relations": {},
        "portrait": {"url": "http://img/p.png"},
    }
