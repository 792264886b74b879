from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from supabase import Client

from plantnet.infra.storage import get_storage
from plantnet.utils.rate_limit import rate_limit_health_info
from .service import storage_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root():
    return {"ok": True}

@router.get("/storage")
async def health_storage(request: Request, storage: Client = Depends(get_storage)):
    info = await storage_info(storage)
    info["rate_limit"] = rate_limit_health_info(request)
    return JSONResponse(info, status_code=200 if info["connect_ok"] else 503)
