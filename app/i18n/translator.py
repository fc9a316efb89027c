# app/i18n/translator.py
import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from app.utils.settings import DEFAULT_LANGUAGE as _CONFIGURED_DEFAULT
from app.utils.logging import get_logger

logger = get_logger(__name__)

LANGUAGES = ("en", "hi", "mr", "gu")
DEFAULT_LANGUAGE = _CONFIGURED_DEFAULT if _CONFIGURED_DEFAULT in LANGUAGES else "en"

_LOCALES_DIR = Path(__file__).resolve().parent / "locales"


@lru_cache(maxsize=None)
def load_table(language: str) -> Dict[str, Any]:
    path = _LOCALES_DIR / f"{language}.json"
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def lookup(table: Dict[str, Any], key: str) -> str | None:
    """
    Przechodzi zagniezdzona sciezke "a.b.c" w tabeli tlumaczen.
    Zwraca None gdy klucza nie ma albo wartosc nie jest niepustym stringiem.
    """
    node: Any = table
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]

    if isinstance(node, str) and node:
        return node
    return None


class Translator:
    """
    Dwupoziomowe wyszukiwanie tlumaczen:
    1. tabela wybranego jezyka
    2. tabela jezyka domyslnego
    3. sam klucz - swiadomy ostatni fallback, bez wyjatku
    """

    def __init__(self, language: str | None = None):
        if language not in LANGUAGES:
            if language is not None:
                logger.warning(f"Nieznany jezyk {language!r}, uzywam {DEFAULT_LANGUAGE}")
            language = DEFAULT_LANGUAGE
        self.language = language

    def resolve(self, key: str) -> str | None:
        text = lookup(load_table(self.language), key)
        if text is None and self.language != DEFAULT_LANGUAGE:
            text = lookup(load_table(DEFAULT_LANGUAGE), key)
        return text

    def translate(self, key: str, **values: Any) -> str:
        text = self.resolve(key)
        if text is None:
            return key

        for name, value in values.items():
            text = text.replace("{" + name + "}", str(value))
        return text

    __call__ = translate


def get_translator(language: str | None = None) -> Translator:
    return Translator(language)
