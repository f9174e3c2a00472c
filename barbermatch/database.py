from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from barbermatch.config import Settings
from barbermatch.logger import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def build_engine(settings: Settings) -> Engine:
    """Create the engine described by settings.

    SQLite gets a single shared connection for in-memory databases and no pool
    sizing; every other backend gets the pooled setup.
    """
    url = settings.database_url
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)
    else:
        engine = create_engine(
            url,
            pool_pre_ping=True,
            pool_recycle=settings.db_pool_recycle,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            echo=False,
        )
        logger.info(
            f"Connection pool: size={settings.db_pool_size}, "
            f"max_overflow={settings.db_max_overflow}, timeout={settings.db_pool_timeout}s"
        )
    logger.info("Database engine created")
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
