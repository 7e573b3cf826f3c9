from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List
import json

from app.core.database import get_db
from app.schemas.waitlist import RoleOption, WaitlistResult, role_options
from app.services.waitlist_service import (
    DUPLICATE_MESSAGE,
    RATE_LIMITED_MESSAGE,
    VALIDATION_MESSAGE,
    WaitlistService,
)

router = APIRouter()

_STATUS_BY_MESSAGE = {
    DUPLICATE_MESSAGE: 200,  # already listed, treated idempotently
    VALIDATION_MESSAGE: 422,
    RATE_LIMITED_MESSAGE: 429,
}


def _status_for(result: WaitlistResult) -> int:
    if result.success:
        return 201
    return _STATUS_BY_MESSAGE.get(result.message, 500)


@router.post("", response_model=WaitlistResult, response_model_exclude_none=True)
async def join_waitlist(request: Request, db: Session = Depends(get_db)):
    """Add the visitor to the waitlist.

    Always answers with ``{success, message, error?}``; the status code mirrors the outcome.
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = None
    result = WaitlistService(db).join(payload, request.headers)
    return JSONResponse(status_code=_status_for(result), content=result.model_dump(exclude_none=True))


@router.get("/roles", response_model=List[RoleOption])
async def list_roles():
    """Role choices for the signup form, in display order"""
    return role_options()
