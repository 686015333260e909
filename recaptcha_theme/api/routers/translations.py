from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from recaptcha_theme.api.errors import ApiException
from recaptcha_theme.api.responses import success_payload
from recaptcha_theme.api.schemas import TranslationsEnvelope
from recaptcha_theme.translations import (
    MissingTranslationKeyError,
    TranslationLookup,
    is_built_in_language,
    normalize_language,
)
from recaptcha_theme.web import common as web_common

router = APIRouter(prefix="/translations", tags=["api-translations"])


@router.get(
    "/{language}",
    response_model=TranslationsEnvelope,
)
async def get_translations(
    language: str,
    request: Request,
    key: str | None = None,
    translations: TranslationLookup = Depends(web_common.get_translation_lookup),
):
    normalized = normalize_language(language)
    if normalized is None:
        raise ApiException(
            status_code=400,
            code="invalid_language",
            message="Language must be a language code such as 'en' or 'pt-br'.",
        )

    data: dict[str, object] = {
        "language": normalized,
        "built_in": is_built_in_language(normalized),
    }
    if key is None:
        data["translations"] = dict(translations.lookup(language=normalized))
        return success_payload(request, data=data)

    try:
        value = translations.lookup(key, normalized)
    except MissingTranslationKeyError as exc:
        raise ApiException(
            status_code=404,
            code="translation_key_not_found",
            message=str(exc),
            details={"key": exc.key, "language": exc.language},
        ) from exc
    data["key"] = key
    data["value"] = value
    return success_payload(request, data=data)
