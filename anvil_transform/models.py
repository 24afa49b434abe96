"""Shared dataclasses for the article transformation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


def _empty_sections() -> Dict[str, "Section"]:
    return {}


def _empty_relations() -> Dict[str, "RelationGroup"]:
    return {}


@dataclass(slots=True)
class Section:
    """A named rich-text section of an article."""

    content_parsed: str = ""
    title: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Section":
        content = payload.get("content_parsed")
        if content is None:
            content = payload.get("contentParsed", "")
        return cls(
            content_parsed=content or "",
            title=payload.get("title") or None,
        )


@dataclass(slots=True)
class RelationItem:
    """A single typed cross-reference to another article."""

    id: str
    type: Optional[str]
    title: str = ""

    @classmethod
    def from_raw(cls, payload: Any) -> "RelationItem":
        """Build an item, treating non-mapping payloads as untyped."""

        if not isinstance(payload, Mapping):
            return cls(id="", type=None, title=str(payload or ""))
        return cls(
            id=str(payload.get("id", "")),
            type=payload.get("type") or None,
            title=str(payload.get("title", "")),
        )


@dataclass(slots=True)
class RelationGroup:
    """A titled collection of relation items.

    The upstream API returns either a single item or a list of items under
    ``items``; both shapes are normalized to a list here.
    """

    items: List[RelationItem]
    title: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "RelationGroup":
        raw_items = payload.get("items")
        if raw_items is None:
            raw_items = []
        elif not isinstance(raw_items, (list, tuple)):
            raw_items = [raw_items]
        return cls(
            items=[RelationItem.from_raw(item) for item in raw_items],
            title=payload.get("title") or None,
        )


@dataclass(slots=True)
class Article:
    """Read-only view of an upstream article payload."""

    title: str
    url: str
    id: str = ""
    content: str = ""
    sections: Dict[str, Section] = field(default_factory=_empty_sections)
    relations: Dict[str, RelationGroup] = field(
        default_factory=_empty_relations
    )
    portrait_url: Optional[str] = None
    cover_url: Optional[str] = None
    category_id: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Article":
        """Normalize a raw API payload into an ``Article``."""

        content = payload.get("content_parsed")
        if content is None:
            content = payload.get("contentParsed")
        if content is None:
            content = payload.get("content", "")

        sections = {
            str(key): Section.from_dict(value)
            for key, value in (payload.get("sections") or {}).items()
        }
        relations = {
            str(key): RelationGroup.from_dict(value)
            for key, value in (payload.get("relations") or {}).items()
        }

        category = payload.get("category")
        category_id = None
        if isinstance(category, Mapping) and category.get("id") is not None:
            category_id = str(category["id"])

        return cls(
            title=str(payload.get("title", "")),
            url=str(payload.get("url", "")),
            id=str(payload.get("id", "")),
            content=content or "",
            sections=sections,
            relations=relations,
            portrait_url=_image_url(payload.get("portrait")),
            cover_url=_image_url(payload.get("cover")),
            category_id=category_id,
        )


def _image_url(value: Any) -> Optional[str]:
    if isinstance(value, Mapping):
        url = value.get("url")
        return str(url) if url else None
    return None


@dataclass(slots=True)
class SidePanel:
    """Append-only accumulators for the three side-panel zones."""

    top: str = ""
    main: str = ""
    bottom: str = ""

    def is_empty(self) -> bool:
        return not (self.top or self.main or self.bottom)


@dataclass(slots=True)
class AssembledSections:
    """Output of the section assembler."""

    body: str = ""
    side_panel: SidePanel = field(default_factory=SidePanel)
    aside: str = ""


@dataclass(slots=True)
class ComposedDocument:
    """Pre-sanitization fragment plus the featured image chosen so far."""

    content: str
    image: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TransformResult:
    """Final sanitized HTML and the resolved featured image URL."""

    html: str
    img: Optional[str] = None


__all__ = [
    "Article",
    "AssembledSections",
    "ComposedDocument",
    "RelationGroup",
    "RelationItem",
    "Section",
    "SidePanel",
    "TransformResult",
]
