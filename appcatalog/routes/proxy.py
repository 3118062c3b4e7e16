"""
Health proxy route
Relays only the status code of an outbound GET so the browser avoids CORS
"""

from typing import Optional

import httpx
import structlog
from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse, Response

from appcatalog.utils.dependencies import HealthClientDep

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/proxy-health")
async def proxy_health(
    client: HealthClientDep,
    url: Optional[str] = Query(None, description="Health URL to probe"),
):
    """Probe url and answer with its status code and no body"""
    if not url:
        raise HTTPException(status_code=400, detail="Health URL not provided")

    try:
        status_code = await client.probe(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error("Health check failed", url=url, error=str(e))
        return JSONResponse(
            status_code=500,
            content={"error": "Health check failed", "details": str(e)},
        )

    return Response(status_code=status_code)
