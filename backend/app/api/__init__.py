from fastapi import APIRouter
from .metadata import router as metadata_router
from .dashboard import router as dashboard_router

api_router = APIRouter()
api_router.include_router(metadata_router,  prefix="/metadata",  tags=["Metadata"])
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])
