"""
Point d'entrée principal du backend.

Usage:
    python -m plantnet

Variables d'environnement:
- PORT: port d'écoute (par défaut 3000)
- UVICORN_RELOAD: active le reload auto en dev ("1"/"true"/"yes")
- LOG_LEVEL: niveau de logs (ex: "info", "debug")
"""
import os
import uvicorn

from plantnet.config import PORT, LOG_LEVEL


def main() -> None:
    reload_flag = os.environ.get("UVICORN_RELOAD", "").lower() in ("1", "true", "yes")
    uvicorn.run(
        "plantnet.asgi:app",
        host="0.0.0.0",
        port=PORT,
        reload=reload_flag,
        log_level=LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
