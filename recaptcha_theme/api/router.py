from __future__ import annotations

from fastapi import APIRouter

from recaptcha_theme.api.routers import render, translations

router = APIRouter(prefix="/api/v1")
router.include_router(render.router)
router.include_router(translations.router)
