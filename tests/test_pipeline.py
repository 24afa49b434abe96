"""End-to-end tests for ArticleTransformer."""
from __future__ import annotations

import asyncio

from bs4 import BeautifulSoup

from anvil_transform import (
    Article,
    StylesheetPublisher,
    TransformResult,
    transform_article,
)


class TestTransformArticle:
    def test_town_example(self, run_transform, town_article) -> None:
        result = run_transform(town_article)
        assert isinstance(result, TransformResult)
        assert "<h1>Town</h1>" in result.html
        assert "<h2>History</h2>" in result.html
        assert "<p>Old.</p>" in result.html
        assert result.img == "https://img/p.png"

    def test_accepts_normalized_article(
        self, run_transform, town_article
    ) -> None:
        result = run_transform(Article.from_dict(town_article))
        assert "<h2>History</h2>" in result.html

    def test_stylesheet_link_first(self, run_transform, town_article):
        result = run_transform(town_article)
        assert result.html.startswith(
            '<link href="/modules/world-anvil/assets/world-anvil.css"'
            ' rel="stylesheet">'
        )

    def test_stylesheet_uploaded_once(
        self, run_transform, uploader, town_article
    ) -> None:
        run_transform(town_article)
        assert len(uploader.calls) == 1
        assert uploader.calls[0][2] == b".world-anvil h1 { color: red; }"

    def test_cover_used_without_portrait(self, run_transform) -> None:
        result = run_transform(
            {
                "title": "Keep",
                "url": "http://x/keep",
                "cover": {"url": "http://img/c.png"},
                "content_parsed": '<p><img src="/uploads/in.png"/></p>',
            }
        )
        assert result.img == "https://img/c.png"

    def test_embedded_image_as_last_resort(self, run_transform) -> None:
        result = run_transform(
            {
                "title": "Keep",
                "url": "http://x/keep",
                "content_parsed": '<p><img src="/uploads/in.png"/></p>',
            }
        )
        assert result.img == "https://worldanvil.com/uploads/in.png"

    def test_no_image_sources(self, run_transform) -> None:
        result = run_transform({"title": "Bare", "url": "http://x/bare"})
        assert result.img is None

    def test_section_images_deferred_then_restored(
        self, run_transform
    ) -> None:
        result = run_transform(
            {
                "title": "Keep",
                "url": "http://x/keep",
                "sections": {
                    "history": {
                        "content_parsed": '<img src="/uploads/h.png" alt="H"/>'
                    }
                },
            }
        )
        img = BeautifulSoup(result.html, "lxml").find("img")
        assert img["src"] == "https://worldanvil.com/uploads/h.png"
        assert "data-src" not in result.html

    def test_relations_become_reference_markers(self, run_transform) -> None:
        result = run_transform(
            {
                "title": "Keep",
                "url": "http://x/keep",
                "relations": {
                    "rulers": {
                        "items": [
                            {"id": "p1", "type": "person", "title": "Ann"},
                            {"id": "i1", "type": "image", "title": "Pic"},
                        ]
                    }
                },
            }
        )
        soup = BeautifulSoup(result.html, "lxml")
        aside = soup.find("aside")
        assert aside.find("dt").get_text() == "Rulers:"
        span = aside.find("span", attrs={"data-article-id": "p1"})
        assert span["class"] == ["entity-link", "wa-link"]
        assert span["data-title"] == "Ann"
        assert span["data-template"] == "person"
        assert "Pic" not in result.html

    def test_side_panel_rendered_after_body(self, run_transform) -> None:
        result = run_transform(
            {
                "title": "Keep",
                "url": "http://x/keep",
                "sections": {
                    "sidepanelcontent": {"content_parsed": "Panel text"},
                    "history": {"content_parsed": "Body text"},
                },
            }
        )
        html = result.html
        assert html.index("Body text") < html.index("Panel text")
        assert '<div class="sidebar-content">Panel text</div>' in html

    def test_line_spacer_round_trip(self, run_transform) -> None:
        result = run_transform(
            {
                "title": "Keep",
                "url": "http://x/keep",
                "content_parsed": (
                    '<p>One<span class="line-spacer"></span>Two</p>'
                ),
            }
        )
        assert result.html.count("</p><p>") == 1
        assert "%p%" not in result.html


class TestModuleLevelTransform:
    def test_one_shot_transform(self, uploader, localize, town_article):
        publisher = StylesheetPublisher(uploader)

        async def _go():
            result = await transform_article(
                town_article, publisher=publisher, localize=localize
            )
            await publisher.drain()
            return result

        result = asyncio.run(_go())
        assert 'title="Town on World Anvil"' in result.html
        assert len(uploader.calls) == 1
