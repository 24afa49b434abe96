"""Write the standalone HTML rendering of a journal entry."""

from __future__ import annotations

from html import escape
from pathlib import Path
from typing import Optional

from ..checksum import write_text_if_changed


def render(
    *, name: str, content: str, img: Optional[str], source_url: Optional[str]
) -> str:
    lines: list[str] = []
    if source_url:
        lines.append(f"<!-- Source URL: {source_url} -->")
    lines.extend(
        [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            '<meta charset="utf-8" />',
            f"<title>{escape(name)}</title>",
        ]
    )
    if img:
        lines.append(f'<meta property="og:image" content="{escape(img)}" />')
    lines.extend(["</head>", "<body>", content.strip(), "</body>", "</html>"])
    return "\n".join(lines) + "\n"


def generate(
    *,
    dest_path: Path,
    name: str,
    content: str,
    img: Optional[str],
    source_url: Optional[str],
) -> Path:
    payload = render(
        name=name, content=content, img=img, source_url=source_url
    )
    write_text_if_changed(dest_path, payload, label="Journal HTML")
    return dest_path
