from __future__ import annotations

from fastapi import FastAPI

from recaptcha_theme.api.errors import register_api_exception_handlers
from recaptcha_theme.api.router import router as api_router
from recaptcha_theme.logging_config import configure_logging, parse_redact_fields
from recaptcha_theme.settings import settings
from recaptcha_theme.web.middleware import RequestLoggingMiddleware, parse_skip_paths
from recaptcha_theme.web.routers import health, widget

configure_logging(
    level=settings.log_level,
    log_format=settings.log_format,
    redact_fields=parse_redact_fields(settings.log_redact_fields),
    include_uvicorn_access=settings.log_uvicorn_access,
)

app = FastAPI(title=settings.app_name)
register_api_exception_handlers(app)
app.add_middleware(
    RequestLoggingMiddleware,
    log_requests=settings.log_requests,
    skip_paths=parse_skip_paths(settings.log_request_skip_paths),
)
app.include_router(health.router)
app.include_router(widget.router)
app.include_router(api_router)
