from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from storefront.application.auth import AuthService
from storefront.application.schemas import LoginRequest, Message, RegisterRequest, TokenResponse, UserRead
from storefront.core_settings import get_settings
from storefront.domain.models import User
from storefront.infrastructure.db import get_db
from .deps import current_user

router = APIRouter(prefix="/api/auth", tags=["auth"])

@router.post("/register", response_model=UserRead, status_code=201)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    return AuthService(db).register(payload)

@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    token, user = AuthService(db).login(payload.email, payload.password)
    return {"token": token, "expires_in": get_settings().TOKEN_EXPIRE_HOURS * 3600, "user": user}

@router.get("/verify")
def verify(user: User = Depends(current_user)):
    return {"valid": True, "user": UserRead.model_validate(user)}

@router.post("/logout", response_model=Message)
def logout():
    # Tokens are stateless; the client discards its copy
    return {"message": "Logged out"}
