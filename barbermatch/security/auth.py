from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from uuid import uuid4
from passlib.context import CryptContext
from fastapi import HTTPException, Depends, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from barbermatch.config import Settings
from barbermatch.models.user_model import User
from barbermatch.database import get_db

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/token")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def authenticate_user(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email, User.is_active == True).first()  # noqa: E712
    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def _create_token(
    data: dict, settings: Settings, token_type: str, expires_delta: timedelta
) -> Tuple[str, datetime]:
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + expires_delta

    to_encode.update({
        "exp": expire,
        "jti": str(uuid4()),  # Unique identifier for this token
        "iat": now,
        "type": token_type,
    })
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
    return encoded_jwt, expire


def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None):
    expires_delta = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    return _create_token(data, settings, "access", expires_delta)


def create_refresh_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None):
    expires_delta = expires_delta or timedelta(days=settings.refresh_token_expire_days)
    return _create_token(data, settings, "refresh", expires_delta)


def _user_from_token(token: str, expected_type: str, db: Session, settings: Settings) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials" if expected_type == "access" else "Invalid refresh token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise credentials_exception

    user_id: str = payload.get("sub")
    jti: str = payload.get("jti")
    token_type: str = payload.get("type")
    if user_id is None or jti is None or token_type != expected_type:
        raise credentials_exception

    # Check if token is blacklisted
    from barbermatch.utils.token_blacklist import token_blacklist_service
    if token_blacklist_service.is_token_blacklisted(db, jti):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has been revoked",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.query(User).filter(User.id == user_id, User.is_active == True).first()  # noqa: E712
    if user is None:
        raise credentials_exception
    return user


def verify_refresh_token(token: str, db: Session, settings: Settings) -> User:
    """Verify refresh token and return user"""
    return _user_from_token(token, "refresh", db, settings)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return _user_from_token(token, "access", db, settings)


def get_current_active_user(current_user: User = Depends(get_current_user)):
    """Get current user and ensure they are active (not logged out)"""
    if current_user.status != "active":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is currently logged out"
        )
    return current_user


def get_current_barber(current_user: User = Depends(get_current_active_user)):
    """Get current user and ensure they are a barber"""
    if not current_user.is_barber:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Barber account required"
        )
    return current_user


def get_current_customer(current_user: User = Depends(get_current_active_user)):
    """Get current user and ensure they are a customer"""
    if current_user.role != "customer":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Customer account required"
        )
    return current_user
