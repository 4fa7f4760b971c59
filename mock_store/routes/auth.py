"""Authentication routes for the reference store"""

from fastapi import APIRouter, HTTPException

from ..models.user import AuthResponse, LoginRequest, RegisterRequest
from ..database.users import user_db
from ..security.auth import token_service

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest):
    """Exchange email and password for a bearer token"""
    user = user_db.authenticate(request.email, request.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return AuthResponse(token=token_service.issue(user), email=user.email, role=user.role)


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(request: RegisterRequest):
    """Create a shopper account and sign it in"""
    user = user_db.create_user(
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    if not user:
        raise HTTPException(status_code=409, detail="An account with this email already exists")

    return AuthResponse(token=token_service.issue(user), email=user.email, role=user.role)
