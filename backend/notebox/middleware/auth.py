"""
Notebox Backend — Auth Guard
=============================

What:  Dependency that rejects requests without an authenticated session.
How:   Reads request.state.session (populated by SessionMiddleware). If no
       user id is attached, raises UnauthorizedError before the protected
       handler runs; otherwise returns the user id.
Who:   Attached router-wide to /api/notes and to GET /api/users/.

Example usage:
    router = APIRouter(prefix="/api/notes", dependencies=[Depends(require_auth)])

    @router.get("/")
    async def handler(user_id: UUID = Depends(require_auth)): ...
"""

import uuid

from starlette.requests import Request

from notebox.exceptions import UnauthorizedError
from notebox.middleware.session import get_session


async def require_auth(request: Request) -> uuid.UUID:
    session = get_session(request)
    if not session.is_authenticated:
        raise UnauthorizedError("User not authenticated")
    return session.user_id
