import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Runtime configuration, built once at startup and handed to create_app()"""

    database_url: str = "sqlite:///./barbermatch.db"
    db_pool_size: int = 20
    db_max_overflow: int = 30
    db_pool_timeout: int = 30
    db_pool_recycle: int = 300

    secret_key: str = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - dev fallback only
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    refresh_token_expire_days: int = 7

    ai_provider: str = "mock"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"
    gemini_image_model: str = "gemini-2.0-flash-exp"
    ai_timeout_seconds: float = 60.0

    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Settings":
        # Load .env from project root unless told otherwise
        env_path = env_file or Path(__file__).resolve().parent.parent / ".env"
        load_dotenv(dotenv_path=env_path)

        secret_key = os.getenv("SECRET_KEY")
        if not secret_key:
            warnings.warn(
                "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION",
                RuntimeWarning,
                stacklevel=2,
            )
            secret_key = cls.secret_key

        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            db_pool_size=int(os.getenv("DB_POOL_SIZE", "20")),
            db_max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "30")),
            db_pool_timeout=int(os.getenv("DB_POOL_TIMEOUT", "30")),
            db_pool_recycle=int(os.getenv("DB_POOL_RECYCLE", "300")),
            secret_key=secret_key,
            algorithm=os.getenv("ALGORITHM", "HS256"),
            access_token_expire_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30")),
            refresh_token_expire_days=int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7")),
            ai_provider=os.getenv("AI_PROVIDER", "mock").lower(),
            gemini_api_key=os.getenv("GEMINI_API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL", cls.gemini_model),
            gemini_image_model=os.getenv("GEMINI_IMAGE_MODEL", cls.gemini_image_model),
            ai_timeout_seconds=float(os.getenv("AI_TIMEOUT_SECONDS", "60")),
            cors_origins=_split_csv(os.getenv("CORS_ORIGINS", "*")),
        )
