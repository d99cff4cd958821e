"""
ASGI config for the registry project.

The records API is plain HTTP; this module only exposes Django's ASGI
handler so the project can be served by uvicorn/daphne as well as WSGI.
"""
import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "registry.settings")

application = get_asgi_application()
