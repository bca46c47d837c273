"""WSGI config for the GigFin project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "gigfin.settings")

application = get_wsgi_application()
