"""API v1 router aggregator."""

from fastapi import APIRouter, Depends

from radar.api.v1.dependencies import require_admin
from radar.api.v1.pipeline.routes import router as pipeline_router
from radar.api.v1.radar.routes import router as radar_router

# Admin is enforced at the router so authentication fails before request validation.
api_router = APIRouter(dependencies=[Depends(require_admin)])

api_router.include_router(radar_router, prefix="/radar", tags=["Radar"])
api_router.include_router(pipeline_router, prefix="/pipeline", tags=["Pipeline"])
