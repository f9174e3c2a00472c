from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from barbermatch.config import Settings
from barbermatch.models.user_model import User
from barbermatch.schemas.user_schema import (
    UserOut,
    UserLogin,
    LoginResponse,
    LogoutResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
)
from barbermatch.security.auth import (
    authenticate_user,
    create_access_token,
    create_refresh_token,
    verify_refresh_token,
)
from barbermatch.utils.token_blacklist import token_blacklist_service
from barbermatch.logger import get_logger

logger = get_logger(__name__)


def _issue_tokens(user: User, settings: Settings) -> RefreshTokenResponse:
    claims = {"sub": str(user.id), "role": user.role}
    access_token, _ = create_access_token(data=claims, settings=settings)
    refresh_token, _ = create_refresh_token(data=claims, settings=settings)
    return RefreshTokenResponse(access_token=access_token, refresh_token=refresh_token, token_type="bearer")


class UserService:
    """Session handling: login, logout and refresh-token rotation"""

    @staticmethod
    def login_user(db: Session, user_login: UserLogin, settings: Settings) -> LoginResponse:
        user = authenticate_user(db, user_login.email, user_login.password)

        # Logging in again undoes a logout
        if user.status != "active":
            user.status = "active"
            db.commit()
            db.refresh(user)

        tokens = _issue_tokens(user, settings)
        logger.info(f"{user.role.capitalize()} logged in: {user.email}")
        return LoginResponse(**tokens.model_dump(), user=UserOut.model_validate(user))

    @staticmethod
    def logout_user(db: Session, user: User, access_token: str, refresh_token: str = None) -> LogoutResponse:
        try:
            user.status = "inactive"
            token_blacklist_service.revoke(db, access_token, refresh_token)
        except Exception as e:
            logger.error(f"Logout failed for {user.email}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error occurred during logout",
            )

        logger.info(f"User logged out: {user.email}")
        return LogoutResponse(message="Successfully logged out")

    @staticmethod
    def refresh_access_token(
        db: Session, refresh_request: RefreshTokenRequest, settings: Settings
    ) -> RefreshTokenResponse:
        """Trade a refresh token for a new pair; the old one is revoked"""
        user = verify_refresh_token(refresh_request.refresh_token, db, settings)

        try:
            token_blacklist_service.revoke(db, refresh_request.refresh_token)
        except Exception as e:
            logger.error(f"Refresh failed for {user.email}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error occurred while refreshing token",
            )

        logger.info(f"Tokens rotated for user: {user.email}")
        return _issue_tokens(user, settings)


user_app_service = UserService()
