"""ASGI config for StaffHub project."""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "staffhub.settings")

application = get_asgi_application()
