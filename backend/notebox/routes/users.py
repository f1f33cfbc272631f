"""
Notebox Backend — User Route Handlers
======================================

What:  Account endpoints under /api/users.
How:   UserService does validation and persistence; these handlers attach
       or destroy the session (notebox/middleware/session.py) and shape the
       response.

Endpoints:
    GET  /api/users/        → 200 user (or null) | 401
    POST /api/users/signup  → 201 user + cookie  | 400 | 409
    POST /api/users/login   → 201 user + cookie  | 400 | 401
    POST /api/users/logout  → 200                | 500
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from notebox.database import get_db_session
from notebox.middleware.auth import require_auth
from notebox.middleware.session import end_session, start_session
from notebox.schemas.common import ErrorResponse
from notebox.schemas.user import LoginInput, SignUpInput, UserResponse
from notebox.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get(
    "/",
    response_model=Optional[UserResponse],
    responses={401: {"description": "No valid session", "model": ErrorResponse}},
    summary="Get the authenticated user",
)
async def get_authenticated_user(
    user_id: uuid.UUID = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[UserResponse]:
    """Returns null when the session outlived its user."""
    user = await user_service.get_user(db, user_id)
    if user is None:
        return None
    return UserResponse.model_validate(user)


@router.post(
    "/signup",
    status_code=201,
    response_model=UserResponse,
    responses={
        400: {"description": "Missing fields", "model": ErrorResponse},
        409: {"description": "Username or email taken", "model": ErrorResponse},
    },
    summary="Create an account and log in",
)
async def sign_up(
    request: Request,
    body: Optional[SignUpInput] = None,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    body = body or SignUpInput()
    user = await user_service.sign_up(
        db, username=body.username, email=body.email, password=body.password
    )
    # The session row may live in another transaction; the user must exist first
    await db.commit()
    await start_session(request, user.id)
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    status_code=201,
    response_model=UserResponse,
    responses={
        400: {"description": "Missing fields", "model": ErrorResponse},
        401: {"description": "Invalid credentials", "model": ErrorResponse},
    },
    summary="Log in",
)
async def log_in(
    request: Request,
    body: Optional[LoginInput] = None,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    body = body or LoginInput()
    user = await user_service.log_in(db, username=body.username, password=body.password)
    await start_session(request, user.id)
    return UserResponse.model_validate(user)


@router.post(
    "/logout",
    responses={500: {"description": "Session could not be destroyed", "model": ErrorResponse}},
    summary="Log out",
)
async def log_out(request: Request) -> Response:
    await end_session(request)
    return Response(status_code=200)
