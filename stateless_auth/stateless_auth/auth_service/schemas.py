from pydantic import BaseModel

from typing import Optional


# Fields are optional here so that presence is checked by the gate and
# reported as a 400, the same as blank values.
class SignupRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserOut(BaseModel):
    id: int
    username: str
    email: str

    class Config:
        from_attributes = True


class SignupResponse(BaseModel):
    message: str
    user: UserOut


class LoginResponse(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"


class ClaimsOut(BaseModel):
    id: int
    email: str


class ProtectedResponse(BaseModel):
    message: str
    user: ClaimsOut


class ErrorResponse(BaseModel):
    detail: str
