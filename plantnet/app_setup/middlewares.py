"""
Middlewares transverses de l’application.
- register_basic_middlewares: CORS (origines du front, cookies autorisés).
- register_request_id_middleware: identifiant de corrélation X-Request-ID (logs + réponses d'erreur).
- register_security_middleware: en-têtes de sécurité, HSTS en production.
Notes:
- L’ordre d’ajout est important: le dernier middleware ajouté s’exécute en premier.
"""
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from plantnet.config import CORS_ORIGINS, IS_PRODUCTION
from .log_config import request_id_var

REQUEST_ID_HEADER = "X-Request-ID"


def register_basic_middlewares(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def register_security_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if IS_PRODUCTION:
            response.headers.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains")
        return response


def register_request_id_middleware(app: FastAPI) -> None:
    """
    Réutilise X-Request-ID s'il est fourni par le proxy, sinon en génère un.
    La valeur est exposée dans request.state, le contexte de logs et la réponse.
    """
    @app.middleware("http")
    async def request_id(request: Request, call_next):
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = rid
        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
