from fastapi import APIRouter

from src.catalog.api.v1 import entities

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(entities.router)
