from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request

from heritage_catalog.i18n.context import reset_language, set_language
from heritage_catalog.utils.language import (
    LanguageWhitelist,
    get_language_whitelist,
    get_request_language,
)

CONTENT_LANGUAGE_HEADER = "X-Content-Language"


def install_i18n_middleware(app: FastAPI, *, whitelist: Optional[LanguageWhitelist] = None) -> None:
    """
    Install request-scoped language resolution.

    This middleware guarantees:
    - request language is available via ContextVar (heritage_catalog.i18n.get_language)
    - the resolved language is echoed in the X-Content-Language response header
    """
    resolved_whitelist = whitelist or get_language_whitelist()

    @app.middleware("http")
    async def _i18n_middleware(request: Request, call_next):
        lang = get_request_language(request, resolved_whitelist)
        request.state.language = lang
        token = set_language(lang, resolved_whitelist)
        try:
            response = await call_next(request)
        finally:
            reset_language(token)

        response.headers[CONTENT_LANGUAGE_HEADER] = lang
        return response
