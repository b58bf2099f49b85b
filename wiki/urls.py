"""URL configuration for public wiki pages."""

from __future__ import annotations

from django.urls import path

from wiki import views

app_name = "wiki"

urlpatterns = [
    path("", views.home, name="home"),
    path("games/", views.games_index, name="games"),
    path("games/<slug:game_slug>/", views.game_detail, name="game_detail"),
    path("games/<slug:game_slug>/events/", views.events_index, name="events"),
    path("games/<slug:game_slug>/events/<slug:event_slug>/", views.event_detail, name="event_detail"),
    path("games/<slug:game_slug>/<slug:category_slug>/", views.category_list, name="category"),
    path(
        "games/<slug:game_slug>/<slug:category_slug>/<slug:item_slug>/",
        views.item_detail,
        name="item_detail",
    ),
]
