import json
import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

LOCALES_DIR = Path(__file__).resolve().parents[2] / "locales"


class _Placeholders(dict):
    # Leave unknown placeholders in the output instead of raising
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def _flatten(messages: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    flat = {}

    for key, value in messages.items():
        path = f"{prefix}.{key}" if prefix else key

        if isinstance(value, Mapping):
            flat.update(_flatten(value, path))
        else:
            flat[path] = str(value)

    return flat


class I18n:
    """Message catalogue loaded from ``<locale>.json`` files"""

    def __init__(self, locales_dir: Path = LOCALES_DIR, default_locale: str = "en-GB") -> None:
        self.default_locale = default_locale
        self.locales: dict[str, dict[str, str]] = {}
        self.logger: logging.Logger = logging.getLogger("i18n")

        for file in sorted(Path(locales_dir).glob("*.json")):
            with file.open(encoding="utf-8") as f:
                self.locales[file.stem] = _flatten(json.load(f))

            self.logger.debug(f"Loaded locale {file.stem} ({len(self.locales[file.stem])} keys)")

        if default_locale not in self.locales:
            self.logger.warning(f"Default locale {default_locale} has no catalogue")

    def get_message(self, locale: str | None, key: str, **values: Any) -> str:
        template = self.locales.get(locale or self.default_locale, {}).get(key)

        if template is None:
            template = self.locales.get(self.default_locale, {}).get(key)

        if template is None:
            self.logger.debug(f"Missing message {key} for locale {locale}")
            return key

        return template.format_map(_Placeholders(values))

    def get_locale(self, locale: str | None) -> Callable[..., str]:
        def get_message(key: str, **values: Any) -> str:
            return self.get_message(locale, key, **values)

        return get_message
