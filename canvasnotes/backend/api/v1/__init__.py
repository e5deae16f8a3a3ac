"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from canvasnotes.backend.api.v1.endpoints import rpc

router = APIRouter()

# Note procedures
router.include_router(rpc.router, prefix="/rpc", tags=["notes"])
