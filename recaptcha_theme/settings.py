from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_TRANSLATIONS_DIR = PACKAGE_DIR / "i18n"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}.")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}.") from exc


@dataclass(frozen=True)
class Settings:
    app_name: str = _env_str("APP_NAME", "recaptcha-theme")
    log_level: str = _env_str("LOG_LEVEL", "INFO")
    log_format: str = _env_str("LOG_FORMAT", "console")
    log_redact_fields: str = _env_str("LOG_REDACT_FIELDS", "")
    log_requests: bool = _env_bool("LOG_REQUESTS", True)
    log_request_skip_paths: str = _env_str("LOG_REQUEST_SKIP_PATHS", "/healthz")
    log_uvicorn_access: bool = _env_bool("LOG_UVICORN_ACCESS", False)
    captcha_default_theme: str = _env_str("CAPTCHA_DEFAULT_THEME", "red")
    captcha_default_lang: str = _env_str("CAPTCHA_DEFAULT_LANG", "en")
    captcha_default_tabindex: int = _env_int("CAPTCHA_DEFAULT_TABINDEX", 0)
    # An empty value keeps the bundled i18n directory.
    captcha_translations_dir: str = _env_str("CAPTCHA_TRANSLATIONS_DIR", "") or str(
        DEFAULT_TRANSLATIONS_DIR
    )


settings = Settings()
