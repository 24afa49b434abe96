"""Shared dataclasses for journal persistence."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

FLAG_SCOPE = "world-anvil"


@dataclass(slots=True)
class JournalEntry:
    """A persisted journal record for one imported article."""

    name: str
    content: str
    article_id: str
    img: Optional[str] = None
    folder: Optional[str] = None
    source_url: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "content": self.content,
            "img": self.img,
            "folder": self.folder,
            "flags": {
                FLAG_SCOPE: {
                    "articleId": self.article_id,
                    "url": self.source_url,
                }
            },
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "JournalEntry":
        flags = record.get("flags") or {}
        scoped = flags.get(FLAG_SCOPE) or {}
        return cls(
            name=str(record.get("name", "")),
            content=str(record.get("content", "")),
            article_id=str(scoped.get("articleId", "")),
            img=record.get("img"),
            folder=record.get("folder"),
            source_url=scoped.get("url"),
        )


@dataclass(slots=True)
class JournalPaths:
    """Files written for a single journal entry."""

    record: Path
    html: Path
    markdown: Path
