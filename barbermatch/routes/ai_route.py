from fastapi import APIRouter, Depends, HTTPException, Request, status
from barbermatch.ai.hairstyle_ai import HairstyleAI, HairstyleAIError
from barbermatch.models.user_model import User
from barbermatch.schemas.ai_schema import (
    DiagnoseFaceRequest,
    GeneratedImage,
    GenerateImageRequest,
    HairstyleSuggestion,
    SuggestHairstyleRequest,
    TryOnRequest,
)
from barbermatch.security.auth import get_current_active_user
from barbermatch.logger import get_logger

ai_router = APIRouter(prefix="/ai")
logger = get_logger(__name__)


def get_hairstyle_ai(request: Request) -> HairstyleAI:
    return request.app.state.hairstyle_ai


def _bad_gateway(e: HairstyleAIError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@ai_router.post("/suggest", response_model=HairstyleSuggestion)
async def suggest_hairstyle(
    body: SuggestHairstyleRequest,
    current_user: User = Depends(get_current_active_user),
    ai: HairstyleAI = Depends(get_hairstyle_ai),
):
    """Suggest a hairstyle from face shape and preferred style"""
    try:
        return await ai.suggest_hairstyle(body.face_shape, body.preferred_style)
    except HairstyleAIError as e:
        raise _bad_gateway(e)


@ai_router.post("/diagnose", response_model=HairstyleSuggestion)
async def diagnose_face(
    body: DiagnoseFaceRequest,
    current_user: User = Depends(get_current_active_user),
    ai: HairstyleAI = Depends(get_hairstyle_ai),
):
    """Detect face shape from a photo and suggest a hairstyle"""
    logger.info(f"User {current_user.id} requested a face diagnosis")
    try:
        return await ai.diagnose_face_and_suggest(body.photo_data_uri, body.preferred_style)
    except HairstyleAIError as e:
        raise _bad_gateway(e)


@ai_router.post("/hairstyle-image", response_model=GeneratedImage)
async def generate_hairstyle_image(
    body: GenerateImageRequest,
    current_user: User = Depends(get_current_active_user),
    ai: HairstyleAI = Depends(get_hairstyle_ai),
):
    try:
        return GeneratedImage(image_data_uri=await ai.generate_hairstyle_image(body.image_prompt))
    except HairstyleAIError as e:
        raise _bad_gateway(e)


@ai_router.post("/try-on", response_model=GeneratedImage)
async def generate_try_on(
    body: TryOnRequest,
    current_user: User = Depends(get_current_active_user),
    ai: HairstyleAI = Depends(get_hairstyle_ai),
):
    """Render the user's photo with a new hairstyle"""
    logger.info(f"User {current_user.id} requested a try-on: {body.hairstyle_description}")
    try:
        image = await ai.generate_try_on(body.photo_data_uri, body.hairstyle_description)
        return GeneratedImage(image_data_uri=image)
    except HairstyleAIError as e:
        raise _bad_gateway(e)
