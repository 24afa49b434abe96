"""Write the Markdown rendering of a journal entry."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

try:
    from markdownify import markdownify as md  # type: ignore[import-not-found]
except ImportError as exc:
    raise SystemExit(
        "Missing dependency 'markdownify'. Install with pip install"
        " markdownify"
    ) from exc

from ..checksum import write_text_if_changed


def render(
    *, content: str, img: Optional[str], source_url: Optional[str]
) -> str:
    lines: list[str] = []
    if source_url:
        lines.append(f"<!-- Source URL: {source_url} -->")
    if img:
        lines.append(f"![featured image]({img})")
    lines.append(md(content, heading_style="ATX").strip())
    return "\n\n".join(lines).strip() + "\n"


def generate(
    *,
    dest_path: Path,
    content: str,
    img: Optional[str],
    source_url: Optional[str],
) -> Path:
    payload = render(content=content, img=img, source_url=source_url)
    write_text_if_changed(dest_path, payload, label="Journal Markdown")
    return dest_path
