"""Load UI strings and resolve localization keys."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Mapping, Optional


class Localizer:
    """Callable lookup that falls back to the key for unknown strings."""

    def __init__(self, translations: Optional[Mapping[str, str]] = None):
        self.translations: Dict[str, str] = dict(translations or {})

    def __call__(self, key: str) -> str:
        return self.translations.get(key, key)

    @classmethod
    def from_file(cls, path: Path | str) -> "Localizer":
        """Read a flat ``{key: text}`` JSON language file."""

        lang_path = Path(path)
        if not lang_path.exists():
            print(
                f"⚠️ Language file not found: {lang_path}; using raw keys."
            )
            return cls()
        with lang_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        return cls({str(key): str(value) for key, value in data.items()})


__all__ = ["Localizer"]
