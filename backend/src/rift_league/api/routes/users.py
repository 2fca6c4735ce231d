"""REST endpoints for user registration, login and identity."""

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from rift_league.api.dependencies import get_current_user, get_user_service
from rift_league.models.user import User

router = APIRouter(prefix="/api/users", tags=["users"])


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str


class LoginRequest(BaseModel):
    username: str
    password: str


@router.post("/register", status_code=201)
def register(body: RegisterRequest, request: Request):
    """Register a user. The response carries the bearer token."""
    username = body.username.strip()
    email = body.email.strip().lower()
    if not username or "@" not in email:
        raise HTTPException(status_code=400, detail="A username and a valid email are required")

    try:
        user = get_user_service(request).register_user(username, email, body.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {**user.to_public_dict(), "token": user.token}


@router.post("/login")
def login(body: LoginRequest, request: Request):
    """Exchange a username and password for a new bearer token."""
    if not body.username.strip() or not body.password:
        raise HTTPException(status_code=400, detail="Username and password are required")

    user = get_user_service(request).login_user(body.username.strip(), body.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid username or password")
    return {**user.to_public_dict(), "token": user.token}


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return user.to_public_dict()
