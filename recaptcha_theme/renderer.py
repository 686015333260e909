"""Build the ``RecaptchaOptions`` snippet for standard and custom widget themes.

An empty string means "leave the widget alone": the default red theme is
rendered by the widget loader itself and needs nothing injected.
"""

from __future__ import annotations

from collections.abc import Mapping
import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Final

from jinja2 import Environment, FileSystemLoader, select_autoescape

from recaptcha_theme.theme import (
    CUSTOM_THEME,
    DEFAULT_CUSTOM_WIDGET_ID,
    DEFAULT_THEME,
    is_standard_theme,
)
from recaptcha_theme.translations import (
    DEFAULT_LANGUAGE,
    TranslationLookup,
    TranslationTable,
    is_built_in_language,
)

logger = logging.getLogger(__name__)

OptionsRecord = dict[str, Any]

OPTIONS_SCRIPT_TEMPLATE: Final[str] = (
    '<script type="text/javascript">var RecaptchaOptions = {options};</script>'
)
TEMPLATES_DIR: Final[Path] = Path(__file__).resolve().parent / "templates"
CUSTOM_WIDGET_TEMPLATE: Final[str] = "custom_widget.html"

DEFAULT_OPTIONS: Final[Mapping[str, Any]] = MappingProxyType(
    {
        "theme": DEFAULT_THEME,
        "lang": DEFAULT_LANGUAGE,
        "custom_translations": None,
        "custom_theme_widget": None,
        "tabindex": 0,
    }
)

CUSTOM_WIDGET_LABEL_KEYS: Final[tuple[str, ...]] = (
    "incorrect_try_again",
    "instructions_visual",
    "instructions_audio",
    "refresh_btn",
    "audio_challenge",
    "visual_challenge",
    "help_btn",
)

templates = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(["html"]),
)


def default_options() -> OptionsRecord:
    return dict(DEFAULT_OPTIONS)


def serialize_options(options: Mapping[str, Any]) -> str:
    """Encode options as a compact JS object literal safe to embed in a script tag."""
    payload = {key: value for key, value in options.items() if value is not None}
    encoded = json.dumps(payload, separators=(",", ":"), default=_json_default)
    return encoded.replace("</", "<\\/")


def _json_default(value: Any) -> Any:
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return str(value)


class CaptchaTheme:
    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        *,
        translations: TranslationLookup | None = None,
    ) -> None:
        self._options: OptionsRecord = default_options()
        if options:
            self._options.update(options)
        self._translations = translations if translations is not None else TranslationLookup()

    @property
    def options(self) -> OptionsRecord:
        return dict(self._options)

    def render(
        self,
        theme_name: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> str:
        if options:
            self._options.update(options)

        if theme_name is not None:
            self._options["theme"] = theme_name

        language = self._options.get("lang")
        if (
            isinstance(language, str)
            and language
            and not is_built_in_language(language)
            and self._options.get("custom_translations") is None
        ):
            self.set_translation(language)

        theme = self._options.get("theme")
        has_customizations = self._has_customizations()
        if theme is None and not has_customizations:
            return ""
        if theme == DEFAULT_THEME and not has_customizations:
            return ""

        if is_standard_theme(theme):
            self._options.pop("custom_theme_widget", None)
            logger.debug(
                "captcha_theme.rendered",
                extra={"event": "captcha_theme.rendered", "theme": theme},
            )
            return self._options_script()

        if theme == CUSTOM_THEME:
            if self._options.get("custom_theme_widget") is None:
                self._options["custom_theme_widget"] = DEFAULT_CUSTOM_WIDGET_ID
            logger.debug(
                "captcha_theme.rendered",
                extra={
                    "event": "captcha_theme.rendered",
                    "theme": theme,
                    "widget_id": self._options["custom_theme_widget"],
                },
            )
            return self._options_script() + self._custom_widget_markup()

        logger.debug(
            "captcha_theme.unknown_theme",
            extra={"event": "captcha_theme.unknown_theme", "theme": str(theme)},
        )
        return ""

    def set_translation(
        self,
        language: str = DEFAULT_LANGUAGE,
        search_path: str | Path | None = None,
    ) -> None:
        """Switch the widget language and pin its strings as ``custom_translations``."""
        self._options["lang"] = language
        table = self._translations.lookup(language=language, search_path=search_path)
        self._options["custom_translations"] = dict(table)

    def i18n(self, key: str | None = None) -> str | TranslationTable:
        language = self._options.get("lang")
        if not isinstance(language, str):
            language = DEFAULT_LANGUAGE
        return self._translations.lookup(key, language)

    def _has_customizations(self) -> bool:
        for key, value in self._options.items():
            if key == "theme" or value is None:
                continue
            if key not in DEFAULT_OPTIONS or value != DEFAULT_OPTIONS[key]:
                return True
        return False

    def _options_script(self) -> str:
        return OPTIONS_SCRIPT_TEMPLATE.format(options=serialize_options(self._options))

    def _custom_widget_markup(self) -> str:
        table = dict(self.i18n())
        # Strings the caller pinned for the widget also label the custom markup.
        custom_translations = self._options.get("custom_translations")
        if isinstance(custom_translations, Mapping):
            table.update(
                (key, value)
                for key, value in custom_translations.items()
                if isinstance(key, str) and isinstance(value, str)
            )
        labels = {key: table[key] for key in CUSTOM_WIDGET_LABEL_KEYS}
        template = templates.get_template(CUSTOM_WIDGET_TEMPLATE)
        return template.render(
            widget_id=self._options["custom_theme_widget"],
            t=labels,
        )
