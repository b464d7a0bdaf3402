"""Admin login/logout endpoints."""

from fastapi import APIRouter, Depends, Request, Response

from app.api.deps import get_services, run_blocking
from app.core.auth import (
    clear_session_cookie,
    create_session_token,
    get_session,
    set_session_cookie,
)
from app.core.errors import UnauthorizedAppError
from app.core.rate_limit import enforce_login_rate_limit
from app.core.validation import read_validated_body
from app.schemas.auth import LoginRequest, SessionResponse, SessionUser

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", dependencies=[Depends(enforce_login_rate_limit)])
async def login(request: Request, response: Response) -> SessionResponse:
    """Check credentials and set the session cookie."""
    payload = await read_validated_body(request, LoginRequest)
    user = await run_blocking(
        get_services(request).users.authenticate, str(payload.email), payload.password
    )
    if user is None:
        raise UnauthorizedAppError(code="invalid_credentials", message="Invalid credentials")

    cfg = request.app.state.settings.auth
    set_session_cookie(response, create_session_token(user, cfg), cfg)
    return SessionResponse(
        authenticated=True,
        user=SessionUser(id=user["id"], email=user["email"], role=user["role"]),
    )


@router.post("/logout")
async def logout(request: Request, response: Response) -> dict:
    clear_session_cookie(response, request.app.state.settings.auth)
    return {"message": "Logged out"}


@router.get("/session")
async def session(request: Request) -> SessionResponse:
    claims = get_session(request)
    if not claims:
        return SessionResponse(authenticated=False)
    return SessionResponse(
        authenticated=True,
        user=SessionUser(id=claims["sub"], email=claims["email"], role=claims["role"]),
    )
