from fastapi import APIRouter

from filesize_recon.api.v1.routes_utilization import router as utilization_router


api_router = APIRouter()

api_router.include_router(utilization_router, prefix="/utilization", tags=["utilization"])
