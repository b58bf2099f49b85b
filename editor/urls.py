"""URL configuration for the data editor pages."""

from __future__ import annotations

from django.urls import path

from editor import views

app_name = "editor"

urlpatterns = [
    path("", views.index, name="index"),
    path("<slug:game_slug>/<slug:entity_type>/", views.entity_list, name="entity_list"),
    path("<slug:game_slug>/<slug:entity_type>/new/", views.entity_new, name="entity_new"),
    path("<slug:game_slug>/<slug:entity_type>/<str:entity_id>/", views.entity_edit, name="entity_edit"),
    path(
        "<slug:game_slug>/<slug:entity_type>/<str:entity_id>/delete/",
        views.entity_delete,
        name="entity_delete",
    ),
]
