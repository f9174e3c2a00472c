from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from barbermatch.ai.hairstyle_ai import HairstyleAI, build_hairstyle_ai
from barbermatch.config import Settings
from barbermatch.database import Base, build_engine, build_session_factory
from barbermatch.middleware import add_request_id_and_process_time
from barbermatch.routes.user_route import user_router
from barbermatch.routes.barber_route import barber_router
from barbermatch.routes.booking_route import booking_router
from barbermatch.routes.review_route import review_router
from barbermatch.routes.ai_route import ai_router

# Register every table on Base.metadata
from barbermatch.models import booking_model, review_model, token_blacklist, user_model  # noqa: F401


def create_app(settings: Optional[Settings] = None, hairstyle_ai: Optional[HairstyleAI] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    engine = build_engine(settings)
    Base.metadata.create_all(bind=engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.hairstyle_ai.aclose()
        engine.dispose()

    app = FastAPI(
        title="Barbermatch API",
        version="1.0.0",
        description="API for Barbermatch, a marketplace where customers find barbers, "
                    "book appointments, negotiate prices, leave reviews and try AI hairstyle suggestions.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.hairstyle_ai = hairstyle_ai or build_hairstyle_ai(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(add_request_id_and_process_time)

    @app.get("/", status_code=200)
    async def home():
        return {"message": "Welcome to the Barbermatch REST API"}

    app.include_router(user_router, prefix="/api", tags=["Users"])
    app.include_router(barber_router, prefix="/api", tags=["Barbers"])
    app.include_router(booking_router, prefix="/api", tags=["Bookings"])
    app.include_router(review_router, prefix="/api", tags=["Reviews"])
    app.include_router(ai_router, prefix="/api", tags=["AI"])
    return app
