"""Import World Anvil articles into the local journal store."""

from __future__ import annotations

import argparse
import asyncio
from contextlib import AsyncExitStack
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from anvil_client import (
    AnvilClient,
    ArticleFetchError,
    DirectoryAssetUploader,
    JsonArticleSource,
)
from anvil_transform import (
    ArticleTransformer,
    AssetUploader,
    StylesheetPublisher,
)
from config_loader import ConfigError, ImportSettings, resolve_runtime_settings
from journal import ArticleSource, JournalEntry, JournalStore, import_article
from localization import Localizer


def _empty_entry_list() -> list[JournalEntry]:
    return []


def _empty_id_list() -> list[str]:
    return []


@dataclass(slots=True)
class ImportSummary:
    """Outcome of an import run across several article ids."""

    entries: list[JournalEntry] = field(default_factory=_empty_entry_list)
    skipped: list[str] = field(default_factory=_empty_id_list)
    failures: list[str] = field(default_factory=_empty_id_list)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments controlling the import run."""

    parser = argparse.ArgumentParser(
        description="Import World Anvil articles as journal entries.",
    )
    parser.add_argument(
        "article_ids",
        nargs="+",
        help="World Anvil article ids to import.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config JSON file (fallbacks to config.json).",
    )
    parser.add_argument(
        "--journal-dir",
        help="Override the journal output directory.",
    )
    parser.add_argument(
        "--article-json",
        help=(
            "Read articles from a JSON file or a directory of <id>.json "
            "files instead of the World Anvil API."
        ),
    )
    parser.add_argument(
        "--assets-dir",
        help="Write the rewritten stylesheet here instead of uploading it.",
    )
    parser.add_argument(
        "--no-refresh",
        action="store_true",
        help="Skip articles that already have a journal entry.",
    )
    return parser.parse_args(argv)


async def run_import(
    article_ids: Sequence[str],
    *,
    settings: ImportSettings,
    article_json: Optional[Path] = None,
    assets_dir: Optional[Path] = None,
    refresh: bool = True,
) -> ImportSummary:
    """Import ``article_ids`` and return a summary of what happened."""

    if assets_dir is None and not settings.upload_url:
        raise ConfigError(
            "Missing upload_url configuration (or pass --assets-dir)."
        )

    summary = ImportSummary()
    store = JournalStore(settings.journal_dir, settings.category_folders)

    async with AsyncExitStack() as stack:
        client: Optional[AnvilClient] = None
        if article_json is None or assets_dir is None:
            client = await stack.enter_async_context(
                AnvilClient.connect(
                    application_key=settings.application_key,
                    auth_token=settings.auth_token,
                    api_base_url=settings.api_base_url,
                )
            )

        source: ArticleSource
        display_css = ""
        if article_json is not None:
            json_source = JsonArticleSource(article_json)
            display_css = await json_source.get_display_css(
                settings.world_id or ""
            )
            source = json_source
        else:
            assert client is not None
            if settings.world_id:
                display_css = await client.get_display_css(settings.world_id)
            source = client

        uploader: AssetUploader
        if assets_dir is not None:
            uploader = DirectoryAssetUploader(assets_dir)
        else:
            assert client is not None and settings.upload_url
            uploader = client.uploader(settings.upload_url)

        publisher = StylesheetPublisher(
            uploader,
            file_name=settings.stylesheet_name,
            target_path=settings.asset_target,
            reserved_class=settings.reserved_class,
            upload_timeout=settings.upload_timeout,
        )
        transformer = ArticleTransformer(
            publisher=publisher,
            localize=Localizer.from_file(settings.lang_path),
            display_css=display_css,
            image_origin=settings.image_origin,
        )

        try:
            for article_id in article_ids:
                try:
                    entry = await import_article(
                        article_id,
                        source=source,
                        transformer=transformer,
                        store=store,
                        refresh=refresh,
                    )
                except ArticleFetchError as exc:
                    print(
                        f"⚠️ Failed to import article {article_id}: {exc}"
                    )
                    summary.failures.append(article_id)
                    continue
                if entry is None:
                    summary.skipped.append(article_id)
                else:
                    summary.entries.append(entry)
        finally:
            await publisher.drain()

    return summary


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point for importing articles into the journal."""

    args = parse_args(argv)
    try:
        settings = resolve_runtime_settings(
            config_path=args.config,
            journal_dir=args.journal_dir,
            require_config=args.journal_dir is None,
        )
    except ConfigError as exc:
        raise SystemExit(f"Config error: {exc}") from exc

    article_json = Path(args.article_json) if args.article_json else None
    if article_json is not None and not article_json.exists():
        raise SystemExit(f"Article JSON not found: {article_json}")

    try:
        summary = asyncio.run(
            run_import(
                args.article_ids,
                settings=settings,
                article_json=article_json,
                assets_dir=Path(args.assets_dir) if args.assets_dir else None,
                refresh=not args.no_refresh,
            )
        )
    except ConfigError as exc:
        raise SystemExit(f"Config error: {exc}") from exc

    print(
        f"Imported {len(summary.entries)} articles"
        f" ({len(summary.skipped)} skipped)."
    )
    if summary.failures:
        print(f"⚠️ {len(summary.failures)} articles failed to import.")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
