from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from fastapi.security import OAuth2PasswordRequestForm
from uuid import UUID
from coursequiz.db.session import get_db
from coursequiz.db.models import User
from coursequiz.core.security import verify_password, create_access_token, create_refresh_token, decode_token
from coursequiz.crud import crud_user
from coursequiz.schemas.token import Token, RefreshTokenRequest
from coursequiz.schemas.user import UserResponse
from coursequiz.api.deps import get_current_user

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _issue_tokens(user: User) -> dict:
    subject = {"sub": str(user.id)}
    return {
        "access_token": create_access_token(data=subject),
        "refresh_token": create_refresh_token(data=subject),
        "token_type": "bearer",
    }


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    user = crud_user.get_user_by_email(db, form_data.username)
    if not user or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )
    return _issue_tokens(user)


@router.post("/refresh", response_model=Token)
def refresh_token(
    token_data: RefreshTokenRequest,
    db: Session = Depends(get_db)
):
    payload = decode_token(token_data.refresh_token, expected_type="refresh")
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    user = crud_user.get_user(db, UUID(user_id))
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return _issue_tokens(user)


@router.get("/me", response_model=UserResponse)
def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user
