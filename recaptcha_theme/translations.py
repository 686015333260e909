"""Translation tables for the custom widget markup and ``custom_translations`` option.

The widget ships strings for a handful of languages itself. For any other
language the strings are read from ``translations.<language>.json`` files,
layered over the English defaults so a partial file still yields a complete
table.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
import re
from types import MappingProxyType
from typing import Final, Mapping, Protocol, overload

from recaptcha_theme.settings import DEFAULT_TRANSLATIONS_DIR

logger = logging.getLogger(__name__)

TranslationTable = Mapping[str, str]

TRANSLATION_KEYS: Final[tuple[str, ...]] = (
    "instructions_visual",
    "instructions_audio",
    "play_again",
    "cant_hear_this",
    "visual_challenge",
    "audio_challenge",
    "refresh_btn",
    "help_btn",
    "incorrect_try_again",
)

ENGLISH_TRANSLATIONS: Final[TranslationTable] = MappingProxyType(
    {
        "instructions_visual": "Enter the words above:",
        "instructions_audio": "Type what you hear:",
        "play_again": "Play sound again",
        "cant_hear_this": "Download sound as MP3",
        "visual_challenge": "Get an image CAPTCHA",
        "audio_challenge": "Get an audio CAPTCHA",
        "refresh_btn": "Get another CAPTCHA",
        "help_btn": "Help",
        "incorrect_try_again": "Incorrect, please try again.",
    }
)

BUILT_IN_LANGUAGES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "English": "en",
        "Dutch": "nl",
        "French": "fr",
        "German": "de",
        "Portuguese": "pt",
        "Russian": "ru",
        "Spanish": "es",
        "Turkish": "tr",
    }
)
BUILT_IN_LANGUAGE_CODES: Final[frozenset[str]] = frozenset(BUILT_IN_LANGUAGES.values())
DEFAULT_LANGUAGE: Final[str] = "en"

TRANSLATION_FILE_PREFIX: Final[str] = "translations"
TRANSLATION_FILE_SUFFIX: Final[str] = ".json"

_LANGUAGE_CODE_RE = re.compile(r"^[a-z]{2,3}(?:[-_][a-z0-9]{2,8})?$")


class MissingTranslationKeyError(KeyError):
    """Raised when a lookup names a key that no translation table defines."""

    def __init__(self, key: str, language: str) -> None:
        super().__init__(key)
        self.key = key
        self.language = language

    def __str__(self) -> str:
        return f"No translation for {self.key!r} in language {self.language!r}."


def normalize_language(language: str | None) -> str | None:
    """Return a lower-cased language code, or None when it is not usable as one."""
    if not language:
        return None
    normalized = language.strip().lower()
    if not _LANGUAGE_CODE_RE.fullmatch(normalized):
        return None
    return normalized


def is_built_in_language(language: str | None) -> bool:
    return normalize_language(language) in BUILT_IN_LANGUAGE_CODES


class TranslationLoader(Protocol):
    def load(self, language: str) -> TranslationTable | None:
        """Return the entries for ``language``, or None when none exist."""


class NullTranslationLoader:
    """Loader that never finds a file; every language resolves to English."""

    def load(self, language: str) -> TranslationTable | None:
        return None


class FileTranslationLoader:
    def __init__(
        self,
        directory: str | Path,
        *,
        prefix: str = TRANSLATION_FILE_PREFIX,
        suffix: str = TRANSLATION_FILE_SUFFIX,
    ) -> None:
        self._directory = Path(directory)
        self._prefix = prefix
        self._suffix = suffix

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, language: str) -> Path:
        return self._directory / f"{self._prefix}.{language}{self._suffix}"

    def load(self, language: str) -> TranslationTable | None:
        normalized = normalize_language(language)
        if normalized is None:
            logger.warning(
                "translations.language_rejected",
                extra={"event": "translations.language_rejected", "language": language},
            )
            return None

        path = self.path_for(normalized)
        if not path.is_file():
            logger.debug(
                "translations.file_missing",
                extra={"event": "translations.file_missing", "path": str(path)},
            )
            return None

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning(
                "translations.file_invalid",
                extra={
                    "event": "translations.file_invalid",
                    "path": str(path),
                    "error": str(exc),
                },
            )
            return None

        if not isinstance(raw, dict) or not all(
            isinstance(key, str) and isinstance(value, str) for key, value in raw.items()
        ):
            logger.warning(
                "translations.file_invalid",
                extra={
                    "event": "translations.file_invalid",
                    "path": str(path),
                    "error": "expected a JSON object of strings",
                },
            )
            return None

        logger.info(
            "translations.loaded",
            extra={
                "event": "translations.loaded",
                "language": normalized,
                "path": str(path),
                "key_count": len(raw),
            },
        )
        return MappingProxyType(dict(raw))


class TranslationCache:
    """Per-language memo of resolved tables."""

    def __init__(self) -> None:
        self._tables: dict[str, TranslationTable] = {}

    def __contains__(self, language: object) -> bool:
        return language in self._tables

    def __len__(self) -> int:
        return len(self._tables)

    def get(self, language: str) -> TranslationTable | None:
        return self._tables.get(language)

    def store(self, language: str, table: TranslationTable) -> None:
        self._tables[language] = table

    def invalidate(self, language: str) -> None:
        self._tables.pop(language, None)

    def reset(self) -> None:
        self._tables.clear()


class TranslationLookup:
    def __init__(
        self,
        loader: TranslationLoader | None = None,
        *,
        cache: TranslationCache | None = None,
    ) -> None:
        self._loader: TranslationLoader = (
            loader if loader is not None else FileTranslationLoader(DEFAULT_TRANSLATIONS_DIR)
        )
        self._cache = cache if cache is not None else TranslationCache()

    @property
    def cache(self) -> TranslationCache:
        return self._cache

    @overload
    def lookup(
        self,
        key: None = None,
        language: str | None = DEFAULT_LANGUAGE,
        search_path: str | Path | None = None,
    ) -> TranslationTable: ...

    @overload
    def lookup(
        self,
        key: str,
        language: str | None = DEFAULT_LANGUAGE,
        search_path: str | Path | None = None,
    ) -> str: ...

    def lookup(
        self,
        key: str | None = None,
        language: str | None = DEFAULT_LANGUAGE,
        search_path: str | Path | None = None,
    ) -> str | TranslationTable:
        normalized = normalize_language(language) or DEFAULT_LANGUAGE
        table = self.table(normalized, search_path=search_path)
        if key is None:
            return table
        try:
            return table[key]
        except KeyError:
            raise MissingTranslationKeyError(key, normalized) from None

    def table(
        self,
        language: str,
        *,
        search_path: str | Path | None = None,
    ) -> TranslationTable:
        if search_path is not None:
            return self._build(language, FileTranslationLoader(search_path))

        cached = self._cache.get(language)
        if cached is not None:
            return cached

        table = self._build(language, self._loader)
        self._cache.store(language, table)
        return table

    def _build(
        self,
        language: str,
        loader: TranslationLoader,
    ) -> TranslationTable:
        if language in BUILT_IN_LANGUAGE_CODES:
            return ENGLISH_TRANSLATIONS

        overrides = loader.load(language)
        if overrides is None:
            return ENGLISH_TRANSLATIONS
        return MappingProxyType({**ENGLISH_TRANSLATIONS, **overrides})
