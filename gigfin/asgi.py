"""ASGI config for the GigFin project."""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "gigfin.settings")

application = get_asgi_application()
