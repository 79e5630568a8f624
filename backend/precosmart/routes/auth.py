import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.orm import Session

from precosmart.core.config import settings
from precosmart.core.database import get_db
from precosmart.core.deps import get_current_user
from precosmart.core.security import create_token, create_token_pair, decode_token, hash_password, verify_password
from precosmart.models.user import User
from precosmart.services.organization_service import list_user_organizations


router = APIRouter()
logger = logging.getLogger(__name__)


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class MembershipOut(BaseModel):
    organization_id: int
    organization_name: str
    tax_id: Optional[str] = None
    role: str


class SessionResponse(BaseModel):
    id: int
    email: EmailStr
    name: Optional[str] = None
    memberships: List[MembershipOut]


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetResponse(BaseModel):
    message: str
    reset_token: Optional[str] = None


class PasswordResetConfirm(BaseModel):
    token: str
    new_password: str = Field(min_length=6)


def _tokens_for(user: User) -> TokenResponse:
    access, refresh = create_token_pair(str(user.id))
    return TokenResponse(access_token=access, refresh_token=refresh)


@router.post("/register", response_model=TokenResponse)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    email = data.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(email=email, name=data.name.strip(), hashed_password=hash_password(data.password), active=True)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("registered user=%s", user.id)
    return _tokens_for(user)


@router.post("/login", response_model=TokenResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == data.email.lower()).first()
    if not user or not user.active or not verify_password(data.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return _tokens_for(user)


@router.post("/refresh", response_model=TokenResponse)
def refresh_token_endpoint(data: RefreshRequest, db: Session = Depends(get_db)):
    payload = decode_token(data.refresh_token, expected_type="refresh")
    if not payload:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    user = db.query(User).filter(User.id == int(payload["sub"])).first()
    if not user or not user.active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return _tokens_for(user)


@router.get("/me", response_model=SessionResponse)
def current_session(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    memberships = [
        MembershipOut(
            organization_id=m.organization_id,
            organization_name=m.organization.name,
            tax_id=m.organization.tax_id,
            role=m.role,
        )
        for m in list_user_organizations(db, user.id)
    ]
    return SessionResponse(id=user.id, email=user.email, name=user.name, memberships=memberships)


@router.post("/logout")
def logout(user: User = Depends(get_current_user)):
    # Tokens are stateless; the client discards them
    logger.info("user=%s signed out", user.id)
    return {"ok": True}


@router.post("/password-reset", response_model=PasswordResetResponse)
def request_password_reset(data: PasswordResetRequest, db: Session = Depends(get_db)):
    message = "If the email is registered, a reset link has been sent"
    user = db.query(User).filter(User.email == data.email.lower()).first()
    if not user or not user.active:
        return PasswordResetResponse(message=message)

    token = create_token(str(user.id), settings.reset_token_expire_minutes, token_type="reset")
    logger.info("password reset requested for user=%s", user.id)
    # No mail transport; the token is handed back only in dev/test
    if settings.env in {"dev", "test"}:
        return PasswordResetResponse(message=message, reset_token=token)
    return PasswordResetResponse(message=message)


@router.post("/password-reset/confirm")
def confirm_password_reset(data: PasswordResetConfirm, db: Session = Depends(get_db)):
    payload = decode_token(data.token, expected_type="reset")
    if not payload:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid reset token")
    user = db.query(User).filter(User.id == int(payload["sub"])).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid reset token")
    user.hashed_password = hash_password(data.new_password)
    db.commit()
    logger.info("password reset for user=%s", user.id)
    return {"ok": True}
