"""App configuration for the public wiki app."""

from __future__ import annotations

from django.apps import AppConfig


class WikiConfig(AppConfig):
    """Configuration for the `wiki` app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "wiki"
