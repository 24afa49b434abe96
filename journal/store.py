"""File-based journal store organised into category folders."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Mapping, Optional

from anvil_transform.models import Article

from .checksum import write_text_if_changed
from .formats import html as html_format
from .formats import markdown as markdown_format
from .models import JournalEntry, JournalPaths

RE_NON_SLUG = re.compile(r"[^A-Za-z0-9._-]+")
UNCATEGORIZED_ID = "0"


def _sanitize_component(value: str, fallback: str) -> str:
    """Convert an arbitrary string into a slug-like component."""

    return RE_NON_SLUG.sub("-", value).strip("-") or fallback


class JournalStore:
    """Persist journal entries as JSON records with HTML/Markdown siblings.

    Entries live at ``<root>/<folder>/<article_id>.json``; entries without a
    folder sit directly under ``root``.
    """

    def __init__(
        self,
        root: Path | str,
        category_folders: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.root = Path(root)
        self.category_folders = dict(category_folders or {})

    def folder_for(self, article: Article) -> Optional[str]:
        """Return the folder mapped to the article's category, if any."""

        category_id = article.category_id or UNCATEGORIZED_ID
        return self.category_folders.get(category_id)

    def entry_paths(self, entry: JournalEntry) -> JournalPaths:
        base = self.root
        if entry.folder:
            base = base / _sanitize_component(entry.folder, "folder")
        stem = _sanitize_component(entry.article_id, "entry")
        return JournalPaths(
            record=base / f"{stem}.json",
            html=base / f"{stem}.html",
            markdown=base / f"{stem}.md",
        )

    def find(self, article_id: str) -> Optional[JournalEntry]:
        """Locate the entry previously imported for ``article_id``."""

        if not self.root.exists():
            return None
        stem = _sanitize_component(article_id, "entry")
        for candidate in sorted(self.root.rglob(f"{stem}.json")):
            try:
                record = json.loads(candidate.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                print(f"⚠️ Unable to read {candidate}: {exc}")
                continue
            entry = JournalEntry.from_record(record)
            if entry.article_id == article_id:
                return entry
        return None

    def save(self, entry: JournalEntry) -> JournalPaths:
        """Write the record, HTML and Markdown files for ``entry``."""

        paths = self.entry_paths(entry)
        write_text_if_changed(
            paths.record,
            json.dumps(entry.to_record(), ensure_ascii=False, indent=2)
            + "\n",
            label="Journal record",
        )
        html_format.generate(
            dest_path=paths.html,
            name=entry.name,
            content=entry.content,
            img=entry.img,
            source_url=entry.source_url,
        )
        markdown_format.generate(
            dest_path=paths.markdown,
            content=entry.content,
            img=entry.img,
            source_url=entry.source_url,
        )
        return paths


__all__ = ["JournalStore", "UNCATEGORIZED_ID"]
