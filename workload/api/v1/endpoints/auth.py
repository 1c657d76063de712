"""Authentication endpoints (API JWT)."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from workload.core.security import create_access_token, get_current_user, get_password_hash
from workload.db.session import get_db
from workload.models.user import User
from workload.schemas.auth import AuthUserResponse, LoginRequest, RegisterRequest, TokenResponse
from workload.services.account_service import authenticate_user
from workload.services.user_service import create_user, get_user_by_email, get_user_by_username

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/register", response_model=AuthUserResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> AuthUserResponse:
    email = payload.email.strip().lower()
    if get_user_by_email(db=db, email=email) is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    username = email.split("@")[0]
    if get_user_by_username(db=db, username=username) is not None:
        username = email
        if get_user_by_username(db=db, username=username) is not None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken")
    user = create_user(
        db=db,
        username=username,
        hashed_password=get_password_hash(payload.password),
        role="CUSTOMER",
        email=email,
    )
    logger.info("[AUTH] Registered customer user_id=%s", user.id)
    return AuthUserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> TokenResponse:
    user: User | None = authenticate_user(db, payload.email, payload.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect email or password")
    return TokenResponse(access_token=create_access_token(data={"sub": str(user.id)}))


@router.get("/me", response_model=AuthUserResponse)
def me(current_user: User = Depends(get_current_user)) -> AuthUserResponse:
    return AuthUserResponse.model_validate(current_user)
