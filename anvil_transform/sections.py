"""Partition article sections and relations into body, side panel and aside."""

from __future__ import annotations

from html import escape
from typing import Iterable, List, Mapping, Optional

from .models import (
    AssembledSections,
    RelationGroup,
    RelationItem,
    Section,
    SidePanel,
)

EXCLUDED_RELATION_TYPES = frozenset({"customarticletemplate", "image"})

# Lower-cased section title -> (side panel zone, wrapper class)
SIDE_PANEL_ZONES: dict[str, tuple[str, str]] = {
    "sidepanelcontent": ("main", "sidebar-content"),
    "side-panel-content": ("main", "sidebar-content"),
    "sidebarcontentbottom": ("bottom", "sidebar-bottom"),
    "side-bar-content-bottom": ("bottom", "sidebar-bottom"),
    "sidebarcontenttop": ("top", "sidebar-top"),
    "side-bar-content-top": ("top", "sidebar-top"),
}


def title_case(value: str) -> str:
    """Capitalize each space separated word and lower-case the rest."""

    return " ".join(
        word[:1].upper() + word[1:].lower() for word in value.split(" ")
    )


def display_title(key: str, title: Optional[str]) -> str:
    return title or title_case(key)


def qualifying_items(items: Iterable[RelationItem]) -> List[RelationItem]:
    """Drop untyped items and decorative/structural relation types."""

    return [
        item
        for item in items
        if item.type and item.type not in EXCLUDED_RELATION_TYPES
    ]


def reference_marker(item: RelationItem) -> str:
    """Render an inline marker for an internal cross-reference."""

    return (
        f'<span data-article-id="{escape(item.id)}"'
        f' data-template="{escape(item.type or "")}"'
        f' data-title="{escape(item.title)}">'
        f"{escape(item.title)}</span>"
    )


def assemble_sections(
    sections: Optional[Mapping[str, Section]],
    relations: Optional[Mapping[str, RelationGroup]],
) -> AssembledSections:
    """Split sections into body and side panel, relations into the aside."""

    body_parts: list[str] = []
    side_panel = SidePanel()

    for key, section in (sections or {}).items():
        title = display_title(key, section.title)
        zone = SIDE_PANEL_ZONES.get(title.lower())
        if zone is None:
            body_parts.append(
                f"<h2>{escape(title)}</h2>\n"
                f"<p>{section.content_parsed}</p><hr/>"
            )
            continue
        name, css_class = zone
        entry = f'<div class="{css_class}">{section.content_parsed}</div><hr/>'
        setattr(side_panel, name, getattr(side_panel, name) + entry)

    aside_parts: list[str] = []
    for key, group in (relations or {}).items():
        items = qualifying_items(group.items)
        if not items:
            continue
        title = display_title(key, group.title)
        markers = ", ".join(reference_marker(item) for item in items)
        aside_parts.append(f"<dt>{escape(title)}:</dt><dd>{markers}</dd>")

    return AssembledSections(
        body="".join(body_parts),
        side_panel=side_panel,
        aside="".join(aside_parts),
    )


__all__ = [
    "EXCLUDED_RELATION_TYPES",
    "SIDE_PANEL_ZONES",
    "assemble_sections",
    "display_title",
    "qualifying_items",
    "reference_marker",
    "title_case",
]
