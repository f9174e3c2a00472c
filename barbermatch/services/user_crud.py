from datetime import datetime, timezone
from fastapi import HTTPException, status
from typing import List, Optional
from barbermatch.catalog import get_haircut_option
from barbermatch.schemas.user_schema import (
    BARBER_ONLY_FIELDS,
    OfferedHaircutIn,
    ProfileUpdate,
    Role,
    UserCreate,
)
from barbermatch.models.user_model import User
from barbermatch.utils.availability import EMPTY_AVAILABILITY
from sqlalchemy.orm import Session
from barbermatch.security.auth import get_password_hash
from barbermatch.logger import get_logger

logger = get_logger(__name__)


def _barber_defaults() -> dict:
    return {
        "availability": EMPTY_AVAILABILITY,
        "subscription_active": False,
        "bio": "",
        "specialties": [],
        "experience_years": 0,
        "services_offered": [],
    }


class UserCRUD:
    @staticmethod
    def get_user_id(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == str(user_id)).first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_barber(db: Session, barber_id: str) -> Optional[User]:
        return db.query(User).filter(
            User.id == str(barber_id),
            User.role == Role.barber.value,
            User.is_active == True,  # noqa: E712
        ).first()

    @staticmethod
    def create_user(db: Session, user: UserCreate) -> User:
        """Create the account and its profile document"""
        existing_user = db.query(User).filter(User.email == user.email).first()
        if existing_user:
            if existing_user.is_active:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="User with the email already exist"
                )
            # Reactivate the existing inactive user instead of creating new one
            existing_user.display_name = user.display_name
            existing_user.password_hash = get_password_hash(user.password)
            existing_user.role = user.role.value
            existing_user.status = "active"
            existing_user.is_active = True
            existing_user.created_at = datetime.now(timezone.utc)
            if user.role == Role.barber:
                for key, value in _barber_defaults().items():
                    setattr(existing_user, key, value)
            db.commit()
            db.refresh(existing_user)
            return existing_user

        fields = dict(
            email=user.email,
            display_name=user.display_name,
            password_hash=get_password_hash(user.password),
            role=user.role.value,
            status="active",
            is_active=True,
        )
        if user.role == Role.barber:
            fields.update(_barber_defaults())

        db_user = User(**fields)
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
        logger.info(f"Profile created for {db_user.email} ({db_user.role})")
        return db_user

    @staticmethod
    def update_profile(db: Session, user_id: str, profile_update: ProfileUpdate) -> User:
        db_user = db.query(User).filter(User.id == str(user_id)).first()
        if not db_user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found: This user does not exist in the database"
            )

        update_data = profile_update.model_dump(exclude_unset=True)
        barber_fields = sorted(BARBER_ONLY_FIELDS.intersection(update_data))
        if barber_fields and not db_user.is_barber:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Only barbers can set: {', '.join(barber_fields)}"
            )

        if "services_offered" in update_data and profile_update.services_offered is not None:
            update_data["services_offered"] = UserCRUD._resolve_services(profile_update.services_offered)

        try:
            for key, value in update_data.items():
                if value is None:
                    continue
                if key == "password":
                    setattr(db_user, "password_hash", get_password_hash(value))
                else:
                    setattr(db_user, key, value)

            db.commit()
            db.refresh(db_user)
            logger.info(f"Profile updated: {db_user.email}")
            return db_user

        except Exception as e:
            db.rollback()
            logger.error(f"Error updating profile {user_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error occurred while updating profile"
            )

    @staticmethod
    def _resolve_services(services: List[OfferedHaircutIn]) -> List[dict]:
        """Fill in haircut name and gender from the catalog"""
        resolved = []
        for service in services:
            option = get_haircut_option(service.haircut_option_id)
            if option is None:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail=f"Unknown haircut option: {service.haircut_option_id}"
                )
            item = service.model_dump()
            item["haircut_name"] = option.name
            item["gender"] = option.gender
            resolved.append(item)
        return resolved

    @staticmethod
    def search_barbers(db: Session, search: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[User]:
        """Barbers whose name, specialties or bio contain the search term.

        The subscription flag is not applied as a filter.
        """
        barbers = (
            db.query(User)
            .filter(User.role == Role.barber.value, User.is_active == True)  # noqa: E712
            .order_by(User.display_name.asc())
            .all()
        )
        if search:
            term = search.strip().lower()
            barbers = [
                barber for barber in barbers
                if term in (barber.display_name or "").lower()
                or term in ", ".join(barber.specialties or []).lower()
                or term in (barber.bio or "").lower()
            ]
        return barbers[skip:skip + limit]

    @staticmethod
    def find_offered_service(barber: User, service_id: str) -> Optional[dict]:
        for service in barber.services_offered or []:
            if service.get("id") == service_id:
                return service
        return None


user_crud = UserCRUD()
