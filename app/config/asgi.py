"""
ASGI config for the marketplace backend.

Exposes the ASGI callable as a module-level variable named ``application``
for Uvicorn. Only HTTP is served; there are no websocket routes.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_asgi_application()
