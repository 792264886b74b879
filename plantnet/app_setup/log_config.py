"""
Configuration des logs applicatifs.
- Un logger par module (logging.getLogger(__name__)) sous la racine "plantnet".
- Chaque ligne porte l'identifiant de requête (X-Request-ID) posé par le middleware.
"""
import logging
from contextvars import ContextVar

from plantnet.config import LOG_LEVEL

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def configure_logging(level: str = LOG_LEVEL) -> None:
    logger = logging.getLogger("plantnet")
    logger.setLevel(level)
    if any(isinstance(f, RequestIdFilter) for h in logger.handlers for f in h.filters):
        return
    handler = logging.StreamHandler()
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
