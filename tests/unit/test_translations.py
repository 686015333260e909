from __future__ import annotations

import logging
from types import MappingProxyType

import pytest

from recaptcha_theme.settings import DEFAULT_TRANSLATIONS_DIR
from recaptcha_theme.translations import (
    BUILT_IN_LANGUAGE_CODES,
    ENGLISH_TRANSLATIONS,
    TRANSLATION_KEYS,
    FileTranslationLoader,
    MissingTranslationKeyError,
    NullTranslationLoader,
    TranslationCache,
    TranslationLookup,
    is_built_in_language,
    normalize_language,
)


class SpyLoader:
    def __init__(self, tables: dict[str, dict[str, str]] | None = None) -> None:
        self._tables = tables or {}
        self.calls: list[str] = []

    def load(self, language: str):
        self.calls.append(language)
        table = self._tables.get(language)
        return MappingProxyType(table) if table is not None else None


def test_english_table_defines_every_translation_key() -> None:
    assert tuple(ENGLISH_TRANSLATIONS) == TRANSLATION_KEYS


def test_built_in_language_never_touches_loader() -> None:
    loader = SpyLoader({"en": {"help_btn": "Overridden"}})
    lookup = TranslationLookup(loader)

    for language in sorted(BUILT_IN_LANGUAGE_CODES):
        assert lookup.lookup("help_btn", language) == "Help"

    assert loader.calls == []


def test_missing_translation_file_falls_back_to_english(tmp_path) -> None:
    lookup = TranslationLookup(FileTranslationLoader(tmp_path))

    table = lookup.lookup(language="it")

    assert dict(table) == dict(ENGLISH_TRANSLATIONS)


def test_translation_file_overlays_english_table(tmp_path) -> None:
    (tmp_path / "translations.it.json").write_text(
        '{"help_btn": "Aiuto", "extra_key": "Extra"}',
        encoding="utf-8",
    )
    lookup = TranslationLookup(FileTranslationLoader(tmp_path))

    assert lookup.lookup("help_btn", "it") == "Aiuto"
    assert lookup.lookup("extra_key", "it") == "Extra"
    assert lookup.lookup("refresh_btn", "it") == "Get another CAPTCHA"


def test_lookup_memoizes_per_language() -> None:
    loader = SpyLoader({"it": {"help_btn": "Aiuto"}, "pl": {"help_btn": "Pomoc"}})
    lookup = TranslationLookup(loader)

    assert lookup.lookup("help_btn", "it") == "Aiuto"
    assert lookup.lookup("help_btn", "it") == "Aiuto"
    assert lookup.lookup("help_btn", "pl") == "Pomoc"

    assert loader.calls == ["it", "pl"]
    assert "it" in lookup.cache
    assert len(lookup.cache) == 2


def test_cache_invalidate_and_reset_force_reload() -> None:
    loader = SpyLoader({"it": {"help_btn": "Aiuto"}})
    cache = TranslationCache()
    lookup = TranslationLookup(loader, cache=cache)

    lookup.lookup(language="it")
    cache.invalidate("it")
    lookup.lookup(language="it")
    cache.reset()
    lookup.lookup(language="it")

    assert loader.calls == ["it", "it", "it"]
    assert len(cache) == 1


def test_lookup_with_search_path_bypasses_cache(tmp_path) -> None:
    (tmp_path / "translations.it.json").write_text('{"help_btn": "Aiuto"}', encoding="utf-8")
    loader = SpyLoader()
    lookup = TranslationLookup(loader)

    assert lookup.lookup("help_btn", "it", search_path=tmp_path) == "Aiuto"
    assert loader.calls == []
    assert len(lookup.cache) == 0


def test_missing_key_raises_missing_translation_key_error() -> None:
    lookup = TranslationLookup()

    with pytest.raises(MissingTranslationKeyError) as exc_info:
        lookup.lookup("no_such_key", "en")

    assert isinstance(exc_info.value, KeyError)
    assert exc_info.value.key == "no_such_key"
    assert exc_info.value.language == "en"
    assert "no_such_key" in str(exc_info.value)


def test_lookup_normalizes_language_codes() -> None:
    loader = SpyLoader({"it": {"help_btn": "Aiuto"}})
    lookup = TranslationLookup(loader)

    assert lookup.lookup("help_btn", " IT ") == "Aiuto"
    assert lookup.lookup("help_btn", None) == "Help"
    assert loader.calls == ["it"]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("it", "it"),
        (" PT-BR ", "pt-br"),
        ("zh_hant", "zh_hant"),
        ("../etc/passwd", None),
        ("e", None),
        ("", None),
        (None, None),
    ],
)
def test_normalize_language(raw, expected) -> None:
    assert normalize_language(raw) == expected


def test_is_built_in_language() -> None:
    assert is_built_in_language("EN")
    assert is_built_in_language("tr")
    assert not is_built_in_language("it")
    assert not is_built_in_language(None)


def test_file_loader_rejects_unsafe_language(tmp_path, caplog) -> None:
    loader = FileTranslationLoader(tmp_path)

    with caplog.at_level(logging.WARNING, logger="recaptcha_theme.translations"):
        assert loader.load("../secrets") is None

    assert any(
        getattr(record, "event", None) == "translations.language_rejected"
        for record in caplog.records
    )


@pytest.mark.parametrize("content", ["not json", "[1, 2]", '{"help_btn": 3}'])
def test_file_loader_treats_invalid_file_as_missing(tmp_path, content: str) -> None:
    (tmp_path / "translations.it.json").write_text(content, encoding="utf-8")

    assert FileTranslationLoader(tmp_path).load("it") is None


def test_file_loader_path_follows_naming_convention(tmp_path) -> None:
    loader = FileTranslationLoader(tmp_path)

    assert loader.path_for("it") == tmp_path / "translations.it.json"
    assert loader.directory == tmp_path


@pytest.mark.parametrize(("language", "help_label"), [("it", "Guida"), ("pl", "Pomoc")])
def test_bundled_translation_files_are_complete(language: str, help_label: str) -> None:
    table = FileTranslationLoader(DEFAULT_TRANSLATIONS_DIR).load(language)

    assert table is not None
    assert set(table) == set(TRANSLATION_KEYS)
    assert table["help_btn"] == help_label


def test_default_lookup_reads_bundled_i18n_directory() -> None:
    lookup = TranslationLookup()

    assert lookup.lookup("help_btn", "it") == "Guida"
    assert lookup.lookup("help_btn", "pl") == "Pomoc"
    assert lookup.lookup("help_btn", "ja") == "Help"


def test_null_loader_resolves_every_language_to_english() -> None:
    lookup = TranslationLookup(NullTranslationLoader())

    assert dict(lookup.lookup(language="it")) == dict(ENGLISH_TRANSLATIONS)
