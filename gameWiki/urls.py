"""URL configuration for gameWiki.

Pages are locale-prefixed (`/en/...`, `/zh/...`); JSON APIs are not.
"""

from __future__ import annotations

from django.conf.urls.i18n import i18n_patterns
from django.urls import include, path

from editor import views as editor_views
from wiki import views as wiki_views

urlpatterns = [
    path("api/games/<slug:game_slug>/events/", wiki_views.events_api, name="events_api"),
    path(
        "api/editor/<slug:game_slug>/<slug:entity_type>/",
        editor_views.entity_api,
        name="editor_entity_api",
    ),
]

urlpatterns += i18n_patterns(
    path("editor/", include("editor.urls")),
    path("", include("wiki.urls")),
)
