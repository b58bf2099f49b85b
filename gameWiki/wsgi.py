"""WSGI entry point for gameWiki deployments.

Static assets are served by WhiteNoise when `DJANGO_DEBUG` is off, so this
callable is all a WSGI server needs.
"""

from __future__ import annotations

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "gameWiki.settings")

application = get_wsgi_application()
