from fastapi import APIRouter

from assetbridge.api.v1 import assets, import_routes

api_router = APIRouter()

api_router.include_router(assets.router, prefix="/assets", tags=["assets"])
api_router.include_router(import_routes.router, prefix="/import", tags=["import"])
