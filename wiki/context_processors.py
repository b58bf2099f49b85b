"""Template context processors for gameWiki."""

from __future__ import annotations

from django.conf import settings
from django.http import HttpRequest
from django.urls import translate_url


def wiki_navigation(request: HttpRequest) -> dict[str, object]:
    """Expose editor availability and locale-switch links to all templates.

    Args:
        request: Current request object.

    Returns:
        Context dict with `admin_enabled` and `locale_links` (one
        `{code, name, url}` row per configured language).
    """

    locale_links = [
        {"code": code, "name": name, "url": translate_url(request.get_full_path(), code)}
        for code, name in settings.LANGUAGES
    ]
    return {"admin_enabled": settings.WIKI_ADMIN_ENABLED, "locale_links": locale_links}
