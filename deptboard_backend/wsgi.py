"""
WSGI config for the Department Board backend.

Exposes the WSGI callable as a module-level variable named ``application``
(used by gunicorn: `gunicorn deptboard_backend.wsgi:application`).
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "deptboard_backend.settings")

application = get_wsgi_application()
