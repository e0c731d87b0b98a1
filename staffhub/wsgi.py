"""WSGI config for StaffHub project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "staffhub.settings")

application = get_wsgi_application()
