"""
ASGI entry point.

Same application as config.wsgi for servers that speak ASGI, e.g.:

    uvicorn config.asgi:application

See https://docs.djangoproject.com/en/5.2/howto/deployment/asgi/
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_asgi_application()
