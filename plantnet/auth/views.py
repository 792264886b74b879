from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from plantnet.users.models import normalize_email
from plantnet.utils.rate_limit import optional_rate_limit
from .credentials import issue_token, set_token_cookie, clear_token_cookie

router = APIRouter(tags=["Auth"])


class IdentityClaim(BaseModel):
    # Champs supplémentaires conservés tels quels dans le jeton (sauf revendications enregistrées)
    model_config = ConfigDict(extra="allow")

    email: EmailStr

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return normalize_email(v)


@router.post("/jwt", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_token(claim: IdentityClaim, response: Response):
    """Émet le jeton de session et le pose dans le cookie HttpOnly "token".
    - Validité: TOKEN_TTL_DAYS (365 jours par défaut)
    - 400 si le corps contient une revendication enregistrée (exp, aud, nbf, iat, iss, sub, jti)
    - Rate limit: 10 requêtes / 60s
    """
    token = issue_token(claim.model_dump(mode="json"))
    set_token_cookie(response, token)
    return {"success": True}


@router.get("/logout")
def logout(response: Response):
    clear_token_cookie(response)
    return {"success": True}
