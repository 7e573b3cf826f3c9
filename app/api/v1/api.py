from fastapi import APIRouter
from app.api.v1.endpoints import waitlist

api_router = APIRouter()

api_router.include_router(waitlist.router, prefix="/waitlist", tags=["waitlist"])
