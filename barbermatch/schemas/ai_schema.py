from pydantic import BaseModel, Field, field_validator
from typing import Optional
from barbermatch.utils.data_uri import DataURIError, parse_data_uri


def _check_data_uri(v: str) -> str:
    try:
        parse_data_uri(v)
    except DataURIError as e:
        raise ValueError(str(e))
    return v


class SuggestHairstyleRequest(BaseModel):
    face_shape: str = Field(..., min_length=2, examples=["Oval"])
    preferred_style: str = Field(..., min_length=2, examples=["Trendy"])


class DiagnoseFaceRequest(BaseModel):
    photo_data_uri: str = Field(..., description="data:<mimetype>;base64,<encoded_data>")
    preferred_style: str = Field(..., min_length=2, examples=["Casual"])

    @field_validator('photo_data_uri')
    @classmethod
    def photo_must_be_data_uri(cls, v):
        return _check_data_uri(v)


class HairstyleSuggestion(BaseModel):
    detected_face_shape: Optional[str] = None
    suggested_hairstyle_name: str
    suggested_hairstyle_description: str
    image_prompt: str


class GenerateImageRequest(BaseModel):
    image_prompt: str = Field(..., min_length=3)


class TryOnRequest(BaseModel):
    photo_data_uri: str = Field(..., description="data:<mimetype>;base64,<encoded_data>")
    hairstyle_description: str = Field(..., min_length=2, examples=["a textured quiff"])

    @field_validator('photo_data_uri')
    @classmethod
    def photo_must_be_data_uri(cls, v):
        return _check_data_uri(v)


class GeneratedImage(BaseModel):
    image_data_uri: str
