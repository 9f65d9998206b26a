"""
Signup, login and protected-access endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, status

from ..gate import AuthGate
from ..schemas import (
    ClaimsOut,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    ProtectedResponse,
    SignupRequest,
    SignupResponse,
    UserOut,
)
from ..tokens import Claims

router = APIRouter(tags=["auth"])


def get_gate(request: Request) -> AuthGate:
    return request.app.state.gate


def require_claims(
    request: Request,
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
    gate: AuthGate = Depends(get_gate),
) -> Claims:
    """
    Verify the bearer token and attach its claims to ``request.state.claims``.

    Raises:
        AccessDenied: Any token failure; rendered as a uniform 403
    """
    result = gate.authorize(authorization)
    if not result.allowed:
        raise result.error
    request.state.claims = result.claims
    return result.claims


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def signup(payload: SignupRequest, gate: AuthGate = Depends(get_gate)):
    user = gate.signup(payload.username, payload.email, payload.password)
    return SignupResponse(message="User registered successfully", user=UserOut.model_validate(user))


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def login(payload: LoginRequest, gate: AuthGate = Depends(get_gate)):
    token = gate.login(payload.email, payload.password)
    return LoginResponse(message="Login successful", token=token)


@router.get(
    "/protected",
    response_model=ProtectedResponse,
    responses={403: {"model": ErrorResponse}},
)
def protected(claims: Claims = Depends(require_claims)):
    return ProtectedResponse(
        message="Access granted",
        user=ClaimsOut(id=claims.subject_id, email=claims.email),
    )
