"""API route aggregation.

All routers registered here get mounted in main.py.

Auth is applied at the include_router level using FastAPI's
dependencies parameter, so every route in the links router is
protected. The public router holds the /{username} catch-all and must
stay last.
"""

from fastapi import APIRouter, Depends

from linkbio.api.auth import router as auth_router
from linkbio.api.health import router as health_router
from linkbio.api.links import router as links_router
from linkbio.api.public import router as public_router
from linkbio.auth.dependencies import get_current_user

_auth = [Depends(get_current_user)]

v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(links_router, tags=["links"], dependencies=_auth)

api_router = APIRouter()

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes — require a valid bearer token
api_router.include_router(v1_router)

# Public pages — catch-all, keep last
api_router.include_router(public_router, tags=["public"])
