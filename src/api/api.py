from api.endpoints import metadata
from fastapi import APIRouter

api_router = APIRouter()
api_router.include_router(metadata.router, tags=["Image & PDF Metadata"])
