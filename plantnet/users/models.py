from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


def normalize_email(email: str) -> str:
    """Forme canonique de l'email (clé unique du profil et du jeton)."""
    return (email or "").strip().lower()


class UserProfileIn(BaseModel):
    """Profil envoyé à chaque connexion; role et horodatages sont fixés par le serveur."""
    model_config = ConfigDict(extra="allow")

    email: EmailStr
    name: Optional[str] = None
    image: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return normalize_email(v)
