"""
Factory d’application utilisée par les entrypoints (plantnet.app, plantnet.asgi).
Ordonne les étapes d’initialisation de manière lisible et testable.
"""
from typing import Any, Optional

from fastapi import FastAPI

from .lifespan import lifespan
from .log_config import configure_logging
from .middlewares import register_basic_middlewares, register_request_id_middleware, register_security_middleware
from .exceptions import register_exception_handlers
from .routes import register_routes
from .routers import register_routers

def create_app(storage: Optional[Any] = None, gateway: Optional[Any] = None) -> FastAPI:
    """
    Construit l’app FastAPI avec le lifespan et enregistre:
      - middlewares (sécurité, CORS, puis X-Request-ID ajouté en dernier pour s’exécuter en premier)
      - gestionnaires d’exceptions et route d'accueil
      - tous les routers
    Paramètres:
      storage / gateway: collaborateurs déjà construits (client Supabase, StripeGateway);
      à défaut, le lifespan les crée depuis la configuration.
    """
    configure_logging()
    app = FastAPI(title="plantNet API", lifespan=lifespan)
    app.state.storage = storage
    app.state.gateway = gateway
    app.state.rate_limit_enabled = False
    register_security_middleware(app)
    register_basic_middlewares(app)
    register_request_id_middleware(app)
    register_exception_handlers(app)
    register_routes(app)
    register_routers(app)
    return app
