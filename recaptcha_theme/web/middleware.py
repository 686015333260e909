from __future__ import annotations

from secrets import token_urlsafe
import time
import logging
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from recaptcha_theme.logging_context import set_request_id

REQUEST_ID_HEADER = "X-Request-ID"

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Emit one record per request, carrying the theme and language it rendered.

    Routes that render a snippet leave ``request.state.captcha`` behind
    (see ``web.common.render_snippet``); other routes log without it.
    """

    def __init__(
        self,
        app,
        *,
        log_requests: bool = True,
        skip_paths: tuple[str, ...] = (),
    ) -> None:
        super().__init__(app)
        self._log_requests = log_requests
        self._skip_paths = tuple(path for path in skip_paths if path)

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or token_urlsafe(12)
        request.state.request_id = request_id
        set_request_id(request_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request.failed",
                extra=_request_record(request, "request.failed", started),
            )
            raise
        finally:
            set_request_id(None)

        response.headers[REQUEST_ID_HEADER] = request_id
        if self._should_log(request.url.path):
            record = _request_record(request, "request.completed", started)
            record["status_code"] = response.status_code
            logger.info("request.completed", extra=record)
        return response

    def _should_log(self, path: str) -> bool:
        if not self._log_requests:
            return False
        return not any(path.startswith(prefix) for prefix in self._skip_paths)


def _request_record(request: Request, event: str, started: float) -> dict[str, Any]:
    record: dict[str, Any] = {
        "event": event,
        "request_id": request.state.request_id,
        "method": request.method,
        "path": request.url.path,
        "duration_ms": int((time.perf_counter() - started) * 1000),
    }
    captcha = getattr(request.state, "captcha", None)
    if captcha:
        record["captcha_theme"] = captcha["theme"]
        record["captcha_lang"] = captcha["lang"]
        record["snippet_empty"] = captcha["snippet_empty"]
    return record


def parse_skip_paths(raw_value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw_value.split(",") if part.strip())
