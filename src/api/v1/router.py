"""Version 1 API router."""
from fastapi import APIRouter

from src.api.v1.endpoints import auth, categories, subscriptions, users


api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(subscriptions.router)
api_router.include_router(categories.router)
api_router.include_router(users.router)
