from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from typing import Annotated
from barbermatch.config import Settings
from barbermatch.services.user_crud import user_crud
from barbermatch.schemas.user_schema import UserCreate, UserOut, ProfileUpdate, UserLogin, LoginResponse, \
    LogoutResponse, RefreshTokenRequest, RefreshTokenResponse
from barbermatch.database import get_db
from barbermatch.security.auth import oauth2_scheme, get_current_user, get_current_active_user, get_settings
from barbermatch.utils.user_app_service import user_app_service
from barbermatch.models.user_model import User
from barbermatch.logger import get_logger


user_router = APIRouter()
logger = get_logger(__name__)


# AUTH ENDPOINTS

@user_router.post("/auth/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register_user(user: UserCreate, db: Session = Depends(get_db)):
    """Sign up as a customer or a barber"""
    try:
        logger.info(f"Registering {user.role.value}: {user.email}")
        db_user = user_crud.create_user(db, user)
        logger.info(f"User registered successfully: {user.email}")
        return UserOut.model_validate(db_user)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error registering user {user.email}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while registering user"
        )


@user_router.post("/token", response_model=LoginResponse)
def user_token(
        form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
        db: Session = Depends(get_db),
        settings: Settings = Depends(get_settings),
):
    logger.info(f"Token request for user: {form_data.username}")
    user_login = UserLogin(email=form_data.username, password=form_data.password)
    return user_app_service.login_user(db, user_login, settings)


@user_router.post("/auth/login", response_model=LoginResponse, status_code=status.HTTP_200_OK)
def login_user(
        user_login: UserLogin,
        db: Session = Depends(get_db),
        settings: Settings = Depends(get_settings),
):
    """Login user and return access and refresh tokens"""
    logger.info(f"Login attempt for user: {user_login.email}")
    return user_app_service.login_user(db, user_login, settings)


@user_router.post("/auth/logout", response_model=LogoutResponse, status_code=status.HTTP_200_OK)
def logout_user(
        refresh_request: RefreshTokenRequest,
        current_user: User = Depends(get_current_user),
        token: str = Depends(oauth2_scheme),
        db: Session = Depends(get_db)
):
    """Logout user by blacklisting both access and refresh tokens"""
    return user_app_service.logout_user(db, current_user, token, refresh_request.refresh_token)


@user_router.post("/auth/refresh", response_model=RefreshTokenResponse, status_code=status.HTTP_200_OK)
def refresh_access_token(
        refresh_request: RefreshTokenRequest,
        db: Session = Depends(get_db),
        settings: Settings = Depends(get_settings),
):
    """Refresh access token using valid refresh token"""
    logger.info("Refreshing access token")
    return user_app_service.refresh_access_token(db, refresh_request, settings)


# PROFILE ENDPOINTS

@user_router.get("/me", response_model=UserOut, status_code=status.HTTP_200_OK)
def get_current_user_profile(current_user: User = Depends(get_current_active_user)):
    """Get current user profile"""
    return UserOut.model_validate(current_user)


@user_router.patch("/me", response_model=UserOut, status_code=status.HTTP_200_OK)
def update_current_user_profile(
        profile_update: ProfileUpdate,
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db)
):
    """Edit the current user's profile"""
    logger.info(f"User updating profile: {current_user.email}")
    updated_user = user_crud.update_profile(db, current_user.id, profile_update)
    return UserOut.model_validate(updated_user)
