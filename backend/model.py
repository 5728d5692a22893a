# backend/model.py
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from .utils import data_url_to_bytes, strip_encoding_prefix


class Phase(str, Enum):
    IDLE = "idle"
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    COMPLETE = "complete"
    FAILED = "failed"


class ImagePayload(BaseModel):
    """Image as it travels between surfaces: mime type + data URL."""

    model_config = ConfigDict(frozen=True)

    mime_type: str
    data_url: str

    @property
    def base64_body(self) -> str:
        return strip_encoding_prefix(self.data_url)

    def to_bytes(self) -> bytes:
        return data_url_to_bytes(self.data_url)


class InlineImage(BaseModel):
    """First image part pulled out of a Gemini response."""

    data: str  # base64 body
    mime_type: str = "image/png"


class StylePreset(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    prompt: str
    icon: str


class SessionView(BaseModel):
    session_id: str
    phase: Phase
    mime_type: Optional[str] = None
    original_image: Optional[ImagePayload] = None
    generated_image: Optional[ImagePayload] = None
    error_message: Optional[str] = None


class UploadRequest(BaseModel):
    image_base64: str = Field(..., description="Raw base64 body, or a full data URL")
    mime_type: str


class GenerateRequest(BaseModel):
    prompt: Optional[str] = None
    preset_id: Optional[str] = None  # used when prompt is empty


class DefaultPromptResponse(BaseModel):
    prompt: str
