"""
Hairstyle suggestion and visualization.

HairstyleAI is the capability the routes depend on. MockHairstyleAI answers
with canned placeholder data; GeminiHairstyleAI calls the Gemini
generateContent REST endpoint. Which one is used is decided by settings.
"""

import json
from abc import ABC, abstractmethod
from html import escape
from typing import Any, Dict, List, Optional

import httpx

from barbermatch.config import Settings
from barbermatch.logger import get_logger
from barbermatch.schemas.ai_schema import HairstyleSuggestion
from barbermatch.utils.data_uri import parse_data_uri, to_data_uri

logger = get_logger(__name__)

SUGGESTION_FAILED = "AI failed to provide a hairstyle suggestion."
DIAGNOSIS_FAILED = "AI failed to provide a hairstyle suggestion based on the photo."
IMAGE_FAILED = "Image generation failed or returned no media URL."
TRY_ON_FAILED = "Image generation for try-on failed or returned no media URL."
UNREADABLE_RESPONSE = "AI service returned an unreadable response."


class HairstyleAIError(Exception):
    pass


class HairstyleAI(ABC):
    @abstractmethod
    async def suggest_hairstyle(self, face_shape: str, preferred_style: str) -> HairstyleSuggestion:
        """Suggest a hairstyle for a known face shape"""

    @abstractmethod
    async def diagnose_face_and_suggest(self, photo_data_uri: str, preferred_style: str) -> HairstyleSuggestion:
        """Detect the face shape in a photo and suggest a hairstyle for it"""

    @abstractmethod
    async def generate_hairstyle_image(self, image_prompt: str) -> str:
        """Render a hairstyle on its own; returns a data URI"""

    @abstractmethod
    async def generate_try_on(self, photo_data_uri: str, hairstyle_description: str) -> str:
        """Render the person in the photo with a new hairstyle; returns a data URI"""

    async def aclose(self) -> None:
        return None


def placeholder_image(label: str) -> str:
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg" width="512" height="512">'
        '<rect width="100%" height="100%" fill="#e5e7eb"/>'
        '<text x="50%" y="50%" font-family="sans-serif" font-size="24" fill="#374151" '
        f'text-anchor="middle" dominant-baseline="middle">{escape(label)}</text>'
        '</svg>'
    )
    return to_data_uri("image/svg+xml", svg.encode("utf-8"))


class MockHairstyleAI(HairstyleAI):
    """Deterministic stand-in used in development and tests"""

    STYLES = {
        "casual": ("Textured Crop", "A low-maintenance crop with natural texture on top."),
        "trendy": ("Voluminous Textured Quiff", "Height at the front with short, faded sides."),
        "professional": ("Classic Side Part", "A clean, tapered side part that stays neat all day."),
    }
    DEFAULT_STYLE = ("Modern Taper", "A versatile taper that balances most face shapes.")
    DETECTED_FACE_SHAPE = "Oval"

    def _pick(self, face_shape: str, preferred_style: str, detected: Optional[str] = None) -> HairstyleSuggestion:
        name, description = self.STYLES.get(preferred_style.strip().lower(), self.DEFAULT_STYLE)
        return HairstyleSuggestion(
            detected_face_shape=detected,
            suggested_hairstyle_name=name,
            suggested_hairstyle_description=f"{description} Suits a {face_shape.lower()} face.",
            image_prompt=f"Studio photo of a {name.lower()} hairstyle, clean background.",
        )

    async def suggest_hairstyle(self, face_shape: str, preferred_style: str) -> HairstyleSuggestion:
        return self._pick(face_shape, preferred_style)

    async def diagnose_face_and_suggest(self, photo_data_uri: str, preferred_style: str) -> HairstyleSuggestion:
        parse_data_uri(photo_data_uri)
        return self._pick(self.DETECTED_FACE_SHAPE, preferred_style, detected=self.DETECTED_FACE_SHAPE)

    async def generate_hairstyle_image(self, image_prompt: str) -> str:
        return placeholder_image(image_prompt[:40])

    async def generate_try_on(self, photo_data_uri: str, hairstyle_description: str) -> str:
        parse_data_uri(photo_data_uri)
        return placeholder_image(f"Try-on: {hairstyle_description[:30]}")


SUGGESTION_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "detectedFaceShape": {"type": "STRING"},
        "suggestedHairstyleName": {"type": "STRING"},
        "suggestedHairstyleDescription": {"type": "STRING"},
        "imagePrompt": {"type": "STRING"},
    },
    "required": ["suggestedHairstyleName", "suggestedHairstyleDescription", "imagePrompt"],
}

SUGGEST_PROMPT = """You are an expert hairstylist AI. Based on the user's face shape and preferred style type, suggest a suitable hairstyle.

Provide the following:
1. 'suggestedHairstyleName': The specific name of the hairstyle.
2. 'suggestedHairstyleDescription': A short, compelling description.
3. 'imagePrompt': A concise prompt suitable for an image generation model to visualize the hairstyle on the given face shape.

User Face Shape: {face_shape}
User Preferred Style Type: {preferred_style}
"""

DIAGNOSE_PROMPT = """You are an expert hairstylist AI. Analyze the provided user's photo to understand their facial features. Based on these features and their preferred style type, suggest a suitable hairstyle.

User Preferred Style Type: {preferred_style}

Output the following:
1. 'detectedFaceShape': A brief, common descriptor of the user's face shape (e.g., Round, Oval, Square, Heart, Diamond, Long).
2. 'suggestedHairstyleName': The specific name of the hairstyle.
3. 'suggestedHairstyleDescription': A short description of why this hairstyle suits their features and preferred style.
4. 'imagePrompt': A concise prompt for an image generation model to visualize only the hairstyle itself, not on the user's face.
"""

TRY_ON_PROMPT = (
    "Give the person in this photo a new hairstyle: {description}. "
    "Try to maintain their facial features. The new hairstyle should look natural for them."
)


class GeminiHairstyleAI(HairstyleAI):
    """Gemini generateContent over HTTP. No retries, no caching."""

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        api_key: str,
        model: str,
        image_model: str,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ValueError("GEMINI_API_KEY is required for the gemini AI provider")
        self.model = model
        self.image_model = image_model
        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers={"x-goog-api-key": api_key},
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _generate(self, model: str, parts: List[Dict[str, Any]], generation_config: Dict[str, Any]) -> dict:
        payload = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": generation_config,
        }
        try:
            response = await self._client.post(f"/models/{model}:generateContent", json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Gemini request failed: {e}")
            raise HairstyleAIError("AI service is unreachable.") from e

        if response.status_code != 200:
            logger.error(f"Gemini returned {response.status_code}: {response.text[:500]}")
            raise HairstyleAIError(f"AI service returned an error ({response.status_code}).")
        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"Gemini returned a non-JSON body: {response.text[:200]}")
            raise HairstyleAIError(UNREADABLE_RESPONSE) from e
        if not isinstance(body, dict):
            logger.error(f"Gemini returned an unexpected body: {response.text[:200]}")
            raise HairstyleAIError(UNREADABLE_RESPONSE)
        return body

    @staticmethod
    def _parts(body: dict) -> List[dict]:
        candidates = body.get("candidates") or []
        if not candidates:
            return []
        return (candidates[0].get("content") or {}).get("parts") or []

    @staticmethod
    def _photo_part(photo_data_uri: str) -> dict:
        photo = parse_data_uri(photo_data_uri)
        return {"inline_data": {"mime_type": photo.mime_type, "data": photo.data}}

    async def _suggest(self, parts: List[dict], failure: str) -> HairstyleSuggestion:
        body = await self._generate(
            self.model,
            parts,
            {"responseMimeType": "application/json", "responseSchema": SUGGESTION_SCHEMA},
        )
        text = "".join(part.get("text", "") for part in self._parts(body))
        try:
            output = json.loads(text)
            return HairstyleSuggestion(
                detected_face_shape=output.get("detectedFaceShape"),
                suggested_hairstyle_name=output["suggestedHairstyleName"],
                suggested_hairstyle_description=output["suggestedHairstyleDescription"],
                image_prompt=output["imagePrompt"],
            )
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Unusable suggestion from Gemini: {e}")
            raise HairstyleAIError(failure) from e

    async def _image(self, parts: List[dict], failure: str) -> str:
        body = await self._generate(self.image_model, parts, {"responseModalities": ["TEXT", "IMAGE"]})
        for part in self._parts(body):
            media = part.get("inlineData") or part.get("inline_data")
            if media and media.get("data"):
                mime_type = media.get("mimeType") or media.get("mime_type") or "image/png"
                return f"data:{mime_type};base64,{media['data']}"
        raise HairstyleAIError(failure)

    async def suggest_hairstyle(self, face_shape: str, preferred_style: str) -> HairstyleSuggestion:
        prompt = SUGGEST_PROMPT.format(face_shape=face_shape, preferred_style=preferred_style)
        return await self._suggest([{"text": prompt}], SUGGESTION_FAILED)

    async def diagnose_face_and_suggest(self, photo_data_uri: str, preferred_style: str) -> HairstyleSuggestion:
        parts = [
            self._photo_part(photo_data_uri),
            {"text": DIAGNOSE_PROMPT.format(preferred_style=preferred_style)},
        ]
        return await self._suggest(parts, DIAGNOSIS_FAILED)

    async def generate_hairstyle_image(self, image_prompt: str) -> str:
        return await self._image([{"text": image_prompt}], IMAGE_FAILED)

    async def generate_try_on(self, photo_data_uri: str, hairstyle_description: str) -> str:
        parts = [
            self._photo_part(photo_data_uri),
            {"text": TRY_ON_PROMPT.format(description=hairstyle_description)},
        ]
        return await self._image(parts, TRY_ON_FAILED)


def build_hairstyle_ai(settings: Settings) -> HairstyleAI:
    if settings.ai_provider == "gemini":
        logger.info(f"Using Gemini hairstyle AI ({settings.gemini_model} / {settings.gemini_image_model})")
        return GeminiHairstyleAI(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            image_model=settings.gemini_image_model,
            timeout=settings.ai_timeout_seconds,
        )
    if settings.ai_provider != "mock":
        raise ValueError(f"Unknown AI provider: {settings.ai_provider}")
    logger.info("Using mock hairstyle AI")
    return MockHairstyleAI()
