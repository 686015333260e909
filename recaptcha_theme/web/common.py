from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from fastapi import Request
from fastapi.templating import Jinja2Templates

from recaptcha_theme.client_language import client_language, primary_subtag
from recaptcha_theme.renderer import TEMPLATES_DIR, CaptchaTheme
from recaptcha_theme.settings import settings
from recaptcha_theme.translations import (
    FileTranslationLoader,
    TranslationLookup,
    normalize_language,
)

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

_translation_lookup: TranslationLookup | None = None


def get_translation_lookup() -> TranslationLookup:
    global _translation_lookup
    if _translation_lookup is None:
        _translation_lookup = TranslationLookup(
            FileTranslationLoader(settings.captcha_translations_dir)
        )
        logger.info(
            "translations.lookup_initialized",
            extra={
                "event": "translations.lookup_initialized",
                "directory": settings.captcha_translations_dir,
            },
        )
    return _translation_lookup


def build_captcha_theme(translations: TranslationLookup) -> CaptchaTheme:
    return CaptchaTheme(
        {
            "theme": settings.captcha_default_theme,
            "lang": settings.captcha_default_lang,
            "tabindex": settings.captcha_default_tabindex,
        },
        translations=translations,
    )


def resolve_request_language(request: Request, explicit: str | None) -> str | None:
    """Reduce a query or ``Accept-Language`` language to the widget's primary subtag."""
    raw = explicit or client_language(request.headers.get("accept-language"))
    return primary_subtag(normalize_language(raw))


def build_render_options(
    *,
    lang: str | None,
    widget: str | None = None,
    tabindex: int | None = None,
) -> dict[str, Any]:
    options: dict[str, Any] = {}
    if lang:
        options["lang"] = lang
    if widget:
        options["custom_theme_widget"] = widget
    if tabindex is not None:
        options["tabindex"] = tabindex
    return options


def render_snippet(
    request: Request,
    translations: TranslationLookup,
    *,
    theme: str | None,
    options: Mapping[str, Any],
) -> tuple[str, dict[str, Any]]:
    captcha_theme = build_captcha_theme(translations)
    html = captcha_theme.render(theme, options)
    resolved = captcha_theme.options
    # Read back by RequestLoggingMiddleware for the request.completed record.
    request.state.captcha = {
        "theme": resolved.get("theme"),
        "lang": resolved.get("lang"),
        "snippet_empty": not html,
    }
    return html, resolved
