"""
Taxonomie des erreurs applicatives.

Chaque erreur porte un statut HTTP, un code stable et un message destiné au client.
Le rendu JSON est centralisé dans plantnet.app_setup.exceptions.
"""
from typing import Optional


class AppError(Exception):
    status_code = 500
    code = "internal_error"
    message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    code = "validation_error"
    message = "invalid request"


class Unauthenticated(AppError):
    # Message volontairement générique: la cause (signature, expiration, format) n'est pas exposée
    status_code = 401
    code = "unauthenticated"
    message = "unauthorized access"


class Forbidden(AppError):
    status_code = 403
    code = "forbidden"
    message = "forbidden access"


class NotFound(AppError):
    status_code = 404
    code = "not_found"
    message = "Not Found"


class Conflict(AppError):
    status_code = 409
    code = "conflict"
    message = "conflict"


class DownstreamFailure(AppError):
    """Erreur terminale d'un service externe (stockage, Stripe)."""
    status_code = 502
    code = "downstream_failure"
    message = "upstream service error"


class DownstreamUnavailable(DownstreamFailure):
    """Timeout ou erreur réseau: l'appel peut être rejoué."""
    status_code = 503
    code = "downstream_unavailable"
    message = "upstream service unavailable"
