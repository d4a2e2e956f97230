"""
ASGI config for almoxarifado project.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'almoxarifado.settings')

application = get_asgi_application()
