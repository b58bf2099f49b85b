"""App configuration for the development-only data editor."""

from __future__ import annotations

from django.apps import AppConfig


class EditorConfig(AppConfig):
    """Configuration for the `editor` app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "editor"
