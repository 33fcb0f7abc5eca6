"""Reply texts loaded from per-locale JSON files."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

LOCALES_DIR = Path(__file__).with_name("locales")


@lru_cache(maxsize=16)
def _load_locale(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    return json.loads(path.read_text(encoding="utf-8"))


class I18nService:
    def __init__(self, *, locales_path: str | Path | None = None, default_locale: str = "en") -> None:
        self.locales_path = Path(locales_path) if locales_path else LOCALES_DIR
        self.default_locale = default_locale.lower()

    def gettext(self, key: str, *, locale: str | None = None, **kwargs: Any) -> str:
        """Translate ``key``, falling back to the default locale and then the key itself."""

        candidates = [(locale or self.default_locale).lower(), self.default_locale]
        for candidate in candidates:
            text = _load_locale(self.locales_path / f"{candidate}.json").get(key)
            if text is not None:
                return text.format(**kwargs) if kwargs else text
        return key


__all__ = ["I18nService"]
