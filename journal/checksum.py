"""Skip journal writes whose rendered text is already on disk."""

from __future__ import annotations

import hashlib
from pathlib import Path


def _text_digest(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def write_text_if_changed(path: Path, text: str, *, label: str) -> bool:
    """Write ``text`` to ``path`` unless the file already holds it.

    Returns ``True`` when the file was (re)written.
    """

    if path.exists():
        current = path.read_text(encoding="utf-8")
        if _text_digest(current) == _text_digest(text):
            print(f"⏭️ {label} unchanged: {path}")
            return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    print(f"✅ {label} written: {path}")
    return True


__all__ = ["write_text_if_changed"]
