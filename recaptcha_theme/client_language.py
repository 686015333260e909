from __future__ import annotations

import re

_QUALITY_RE = re.compile(r"(;\s?q=[0-9.]+)|\s", re.IGNORECASE)


def client_language(accept_language: str | None) -> str | None:
    """Return the first language tag of an ``Accept-Language`` header, lower-cased.

    Quality weights are dropped, so ``"pt-BR;q=0.9, en"`` yields ``"pt-br"``.
    Returns None for a missing or empty header, or a bare wildcard.
    """
    if not accept_language:
        return None
    cleaned = _QUALITY_RE.sub("", accept_language.strip().lower())
    first = cleaned.split(",")[0]
    if not first or first == "*":
        return None
    return first


def primary_subtag(language: str | None) -> str | None:
    if not language:
        return None
    return re.split(r"[-_]", language, maxsplit=1)[0] or None
