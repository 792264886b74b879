"""
Configuration centrale du backend plantNet.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets (JWT, Stripe, Supabase)
- Politique des cookies selon l'environnement (développement / production)
- Timeouts et retries appliqués aux appels externes (stockage, Stripe)
"""
from pathlib import Path
import os
from dotenv import load_dotenv

# Charger .env à la racine du projet de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=False)

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _flag(name: str, default: str = "false") -> bool:
    return _clean_env(os.getenv(name, default)).lower() in ("1", "true", "yes")

# Environnement: "production" active les cookies secure + SameSite=None
APP_ENV = _clean_env(os.getenv("APP_ENV") or os.getenv("NODE_ENV") or "development").lower()
IS_PRODUCTION = APP_ENV == "production"

PORT = int(_clean_env(os.getenv("PORT") or "3000"))
LOG_LEVEL = _clean_env(os.getenv("LOG_LEVEL") or "info").upper()

# Jeton de session (cookie "token")
ACCESS_TOKEN_SECRET = _clean_env(os.getenv("ACCESS_TOKEN_SECRET") or "")
TOKEN_TTL_DAYS = int(_clean_env(os.getenv("TOKEN_TTL_DAYS") or "365"))
TOKEN_COOKIE_NAME = "token"

# Stripe: STRIPE_SK_KEY accepté pour compat avec l'ancien déploiement
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or os.getenv("STRIPE_SK_KEY") or "")
PAYMENT_CURRENCY = _clean_env(os.getenv("PAYMENT_CURRENCY") or "usd").lower()

# Supabase (stockage plants / orders / users)
# - SUPABASE_URL peut parfois être sans schéma: on préfixe en https:// si nécessaire
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or os.getenv("SUPABASE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# CORS: origines du front en développement
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:5174").split(",")
    if o.strip()
]

# Appels externes: timeout par appel (secondes) et nombre de tentatives pour les appels rejouables
DOWNSTREAM_TIMEOUT = float(_clean_env(os.getenv("DOWNSTREAM_TIMEOUT") or "10"))
DOWNSTREAM_RETRIES = int(_clean_env(os.getenv("DOWNSTREAM_RETRIES") or "3"))

# Commandes: vérifier le Payment Intent Stripe avant d'enregistrer
ORDER_VERIFY_PAYMENT = _flag("ORDER_VERIFY_PAYMENT", "true")

# Rôles autorisés à publier des plantes (POST /add-plant)
SELLER_ROLES = [r.strip() for r in os.getenv("SELLER_ROLES", "seller,admin").split(",") if r.strip()]
DEFAULT_ROLE = "customer"
