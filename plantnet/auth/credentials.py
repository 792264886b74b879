"""
Jeton de session (JWT HS256) et cookie "token".

- issue_token: signe la revendication d'identité (au minimum l'email) avec une expiration fixe;
  les revendications enregistrées (exp, aud, nbf...) envoyées par le client sont refusées.
- verify_token: vérifie signature + expiration; toute défaillance devient Unauthenticated,
  sans distinguer la cause côté client.
- set_token_cookie / clear_token_cookie: cookie HttpOnly; Secure + SameSite=None en production,
  SameSite=Strict en développement.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi.responses import Response

from plantnet.config import ACCESS_TOKEN_SECRET, TOKEN_TTL_DAYS, TOKEN_COOKIE_NAME, IS_PRODUCTION
from plantnet.errors import Unauthenticated, ValidationError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

# Revendications enregistrées (RFC 7519): fixées par le serveur, jamais reprises du client
REGISTERED_CLAIMS = frozenset({"exp", "nbf", "iat", "iss", "aud", "sub", "jti"})


def issue_token(
    claims: Dict[str, Any],
    secret: Optional[str] = None,
    ttl_days: int = TOKEN_TTL_DAYS,
    now: Optional[datetime] = None,
) -> str:
    secret = secret or ACCESS_TOKEN_SECRET
    if not secret:
        raise RuntimeError("ACCESS_TOKEN_SECRET manquant pour issue_token()")
    reserved = REGISTERED_CLAIMS.intersection(claims)
    if reserved:
        raise ValidationError(f"reserved claims not allowed: {', '.join(sorted(reserved))}")
    now = now or datetime.now(timezone.utc)
    payload = dict(claims)
    payload["exp"] = now + timedelta(days=ttl_days)
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def verify_token(token: str, secret: Optional[str] = None) -> Dict[str, Any]:
    """
    Retourne les revendications d'origine (sans "exp") si le jeton est valide.
    Une seule tentative, pas de retry: la vérification est purement locale.
    """
    secret = secret or ACCESS_TOKEN_SECRET
    if not token or not secret:
        raise Unauthenticated()
    try:
        claims = jwt.decode(token, secret, algorithms=[ALGORITHM], options={"require": ["exp"]})
    except jwt.PyJWTError as e:
        logger.info("token rejected: %s", e.__class__.__name__)
        raise Unauthenticated() from e
    claims.pop("exp", None)
    return claims


def _cookie_policy() -> Dict[str, Any]:
    if IS_PRODUCTION:
        return {"secure": True, "samesite": "none"}
    return {"secure": False, "samesite": "strict"}


def set_token_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=TOKEN_COOKIE_NAME,
        value=token,
        httponly=True,
        path="/",
        **_cookie_policy(),
    )


def clear_token_cookie(response: Response) -> None:
    response.delete_cookie(TOKEN_COOKIE_NAME, path="/", httponly=True, **_cookie_policy())
