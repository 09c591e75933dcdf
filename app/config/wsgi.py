"""
WSGI entry point.

The API is plain request/response (typing and unread state are polled), so
any WSGI server works, e.g.:

    gunicorn config.wsgi:application

See https://docs.djangoproject.com/en/5.2/howto/deployment/wsgi/
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
