# src/amlguard/interfaces/telegram/translations.py
"""
Localized message templates.

Templates live in ``<lang>.yml`` files (flat ``key: template`` mappings) and
are loaded explicitly at startup via ``TranslationStore.load``. Lookups fall
back to the fallback language when the requested language or key is missing;
a key absent from the fallback too raises TranslationError.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

import yaml

from amlguard.domain.errors import TranslationError

log = logging.getLogger(__name__)

ENGLISH = "en"
RUSSIAN = "ru"
DEFAULT_LOCALES_DIR = Path(__file__).parent / "locales"


def normalize_language(code: Optional[str]) -> str:
    """'ru-RU' -> 'ru', 'EN_us' -> 'en', None -> ''."""
    if not code:
        return ""
    return code.replace("_", "-").split("-", 1)[0].strip().lower()


class TranslationStore:
    def __init__(self, tables: Dict[str, Dict[str, str]], fallback: str = ENGLISH):
        if fallback not in tables:
            raise TranslationError(f"fallback language '{fallback}' has no translation table")
        self._tables = tables
        self.fallback = fallback

    @classmethod
    def load(cls, directory: Union[str, Path] = DEFAULT_LOCALES_DIR, fallback: str = ENGLISH) -> "TranslationStore":
        directory = Path(directory)
        if not directory.is_dir():
            raise TranslationError(f"translations directory not found: {directory}")

        tables: Dict[str, Dict[str, str]] = {}
        for path in sorted(directory.glob("*.yml")):
            tables[path.stem.lower()] = _load_table(path)

        log.info(f"Loaded translations for: {', '.join(sorted(tables)) or 'none'}.")
        return cls(tables, fallback=fallback)

    @property
    def languages(self):
        return sorted(self._tables)

    def get(self, lang: Optional[str], key: str, **params) -> str:
        template = self._tables.get(normalize_language(lang), {}).get(key)
        if template is None:
            template = self._tables[self.fallback].get(key)
        if template is None:
            raise TranslationError(f"missing translation for key '{key}'")
        if not params:
            return template
        try:
            return template.format(**params)
        except (KeyError, IndexError, ValueError) as e:
            raise TranslationError(f"cannot format translation '{key}': {e}") from e


def _load_table(path: Path) -> Dict[str, str]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise TranslationError(f"failed to load translations from {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TranslationError(f"translations file {path} must be a key/value mapping")
    return {str(k): str(v) for k, v in data.items()}
