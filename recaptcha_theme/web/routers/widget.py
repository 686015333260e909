from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse

from recaptcha_theme.theme import CUSTOM_THEME, STANDARD_THEMES
from recaptcha_theme.translations import TranslationLookup
from recaptcha_theme.web import common

router = APIRouter(prefix="/widget")


@router.get("/snippet", response_class=HTMLResponse)
async def widget_snippet(
    request: Request,
    theme: str | None = None,
    lang: str | None = None,
    widget: str | None = None,
    tabindex: int | None = Query(default=None, ge=0),
    translations: TranslationLookup = Depends(common.get_translation_lookup),
) -> HTMLResponse:
    options = common.build_render_options(
        lang=common.resolve_request_language(request, lang),
        widget=widget,
        tabindex=tabindex,
    )
    html, _ = common.render_snippet(request, translations, theme=theme, options=options)
    return HTMLResponse(html)


@router.get("/preview", response_class=HTMLResponse)
async def widget_preview(
    request: Request,
    theme: str | None = None,
    lang: str | None = None,
    translations: TranslationLookup = Depends(common.get_translation_lookup),
) -> HTMLResponse:
    options = common.build_render_options(
        lang=common.resolve_request_language(request, lang),
    )
    html, resolved = common.render_snippet(
        request, translations, theme=theme, options=options
    )
    return common.templates.TemplateResponse(
        request=request,
        name="preview.html",
        context={
            "page_title": "reCAPTCHA theme preview",
            "theme_name": resolved.get("theme"),
            "lang": resolved.get("lang"),
            "themes": STANDARD_THEMES,
            "custom_theme": CUSTOM_THEME,
            "snippet": html,
        },
    )
