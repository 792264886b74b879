"""
ASGI entrypoint: expose `app` pour les process managers (ex: uvicorn plantnet.asgi:app).
Toute la configuration est centralisée dans plantnet.app_setup.factory.
"""

from plantnet.app import app
