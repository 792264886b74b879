"""
Appels vers les services externes (Supabase, Stripe).

Les SDK sont synchrones: chaque appel est exécuté dans un thread (asyncio.to_thread)
sous un timeout explicite, puis l'erreur éventuelle est classée:
- timeout / erreur réseau            -> DownstreamUnavailable (rejouable)
- violation d'unicité Postgres 23505 -> Conflict
- toute autre erreur SDK             -> DownstreamFailure (terminale)
Les erreurs applicatives (AppError) levées par la fonction appelée sont propagées telles quelles.
"""
import asyncio
import logging
from functools import partial
from typing import Any, Callable

import httpx
import stripe
from postgrest.exceptions import APIError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from plantnet.config import DOWNSTREAM_TIMEOUT, DOWNSTREAM_RETRIES
from plantnet.errors import AppError, Conflict, DownstreamFailure, DownstreamUnavailable

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"

# Attente entre tentatives (remplaçable en tests)
RETRY_WAIT = wait_exponential(multiplier=0.2, max=2)

TRANSIENT_ERRORS = (
    TimeoutError,
    asyncio.TimeoutError,
    httpx.TimeoutException,
    httpx.TransportError,
    stripe.APIConnectionError,
    stripe.RateLimitError,
)


def classify(exc: BaseException) -> AppError:
    if isinstance(exc, AppError):
        return exc
    if isinstance(exc, TRANSIENT_ERRORS):
        return DownstreamUnavailable()
    if isinstance(exc, APIError) and str(getattr(exc, "code", "")) == UNIQUE_VIOLATION:
        return Conflict("duplicate key")
    return DownstreamFailure()


async def _call_once(name: str, fn: Callable[..., Any], timeout: float) -> Any:
    try:
        return await asyncio.wait_for(asyncio.to_thread(fn), timeout=timeout)
    except AppError:
        raise
    except Exception as e:
        err = classify(e)
        if isinstance(err, DownstreamUnavailable):
            logger.warning("downstream %s unavailable: %s", name, e.__class__.__name__)
        elif isinstance(err, DownstreamFailure):
            logger.exception("downstream %s failed", name)
        raise err from e


async def call(
    name: str,
    fn: Callable[..., Any],
    *args: Any,
    retryable: bool = False,
    timeout: float | None = None,
    attempts: int | None = None,
    **kwargs: Any,
) -> Any:
    """
    Exécute fn(*args, **kwargs) avec timeout et, si retryable, retries exponentiels.
    - name: libellé pour les logs (ex: "catalog.find_plant")
    - retryable: seuls les appels idempotents doivent l'être (lectures, upsert, Stripe avec idempotency_key)
    """
    timeout = DOWNSTREAM_TIMEOUT if timeout is None else timeout
    if attempts is None:
        attempts = DOWNSTREAM_RETRIES if retryable else 1
    bound = partial(fn, *args, **kwargs)

    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max(1, attempts)),
        wait=RETRY_WAIT,
        retry=retry_if_exception_type(DownstreamUnavailable),
        reraise=True,
    ):
        with attempt:
            return await _call_once(name, bound, timeout)
