import logging

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.dependencies.services import get_baas
from app.services.supabase import BaasClient

logger = logging.getLogger(__name__)

router = APIRouter()

# Debug only: raw reachability check of the Supabase REST API
@router.get("/supabase")
def test_supabase(baas: BaasClient = Depends(get_baas)):
    try:
        probe = baas.probe()
    except httpx.HTTPError as e:
        logger.error(f"Supabase connection failed: {str(e)}")
        return JSONResponse(status_code=500, content={
            "status": "error",
            "message": f"Supabase connection failed: {str(e)}",
        })
    return {"status": "success", **probe}
