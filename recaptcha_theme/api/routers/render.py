from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from recaptcha_theme.api.responses import success_payload
from recaptcha_theme.api.schemas import RenderEnvelope, RenderRequest
from recaptcha_theme.translations import TranslationLookup
from recaptcha_theme.web import common as web_common

router = APIRouter(prefix="/render", tags=["api-render"])


@router.post(
    "",
    response_model=RenderEnvelope,
)
async def render_widget(
    payload: RenderRequest,
    request: Request,
    translations: TranslationLookup = Depends(web_common.get_translation_lookup),
):
    html, resolved = web_common.render_snippet(
        request,
        translations,
        theme=payload.theme,
        options=payload.options,
    )
    return success_payload(
        request,
        data={
            "html": html,
            "options": resolved,
        },
    )
