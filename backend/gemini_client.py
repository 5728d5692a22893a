import base64
import logging
from typing import Any, Iterable, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import ValidationError

from .errors import EmptyResponseError, GatewayTransportError, ModelDeclinedError
from .model import InlineImage
from .utils import DEFAULT_MIME_TYPE

logger = logging.getLogger(__name__)

DECLINED_TEXT_LIMIT = 100


def response_parts(response: Any) -> list:
    """
    Parts of the first candidate, or [] when the response has none.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    return list(getattr(content, "parts", None) or [])


def extract_first_image(parts: Iterable[Any]) -> Optional[InlineImage]:
    """
    Walk the parts in order and return the first one carrying inline image
    data. Later parts are ignored, even other images.
    """
    for part in parts:
        inline_data = getattr(part, "inline_data", None)
        data = getattr(inline_data, "data", None) if inline_data is not None else None
        if not data:
            continue
        if isinstance(data, (bytes, bytearray)):
            body = base64.b64encode(data).decode("ascii")
        else:
            body = data
        mime_type = getattr(inline_data, "mime_type", None) or DEFAULT_MIME_TYPE
        return InlineImage(data=body, mime_type=mime_type)
    return None


def extract_text(response: Any, parts: Iterable[Any]) -> str:
    text = getattr(response, "text", None)
    if text:
        return text
    return "".join(getattr(p, "text", None) or "" for p in parts)


def image_from_response(response: Any) -> InlineImage:
    parts = response_parts(response)
    image = extract_first_image(parts)
    if image is not None:
        return image

    text = extract_text(response, parts)
    if text:
        raise ModelDeclinedError(text, limit=DECLINED_TEXT_LIMIT)
    raise EmptyResponseError()


class GeminiImageEditor:
    """
    Sends one (prompt, image) request to Gemini and returns the first image
    it answers with. No retry, no timeout.
    """

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash-image", client: Optional[genai.Client] = None):
        self.model = model
        self._client = client or genai.Client(api_key=api_key)

    def build_contents(self, image_bytes: bytes, mime_type: str, prompt: str) -> list:
        return [
            types.Content(
                role="user",
                parts=[
                    types.Part.from_text(text=prompt),
                    types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
                ],
            )
        ]

    async def edit_image(self, base64_body: str, mime_type: str, prompt: str) -> InlineImage:
        image_bytes = base64.b64decode(base64_body)
        contents = self.build_contents(image_bytes, mime_type, prompt)

        logger.info(
            "[Gemini] edit request model=%s mime=%s size=%d prompt=%s",
            self.model, mime_type, len(image_bytes), prompt[:50],
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=contents,
            )
        except genai_errors.APIError as e:
            logger.error("[Gemini] API error %s: %s", e.code, e.message)
            raise GatewayTransportError(f"Gemini API error {e.code}: {e.message}") from e
        except httpx.HTTPError as e:
            logger.error("[Gemini] transport error: %s", e)
            raise GatewayTransportError(f"Could not reach Gemini: {e}") from e
        except ValidationError as e:
            logger.error("[Gemini] malformed response: %s", e)
            raise GatewayTransportError(f"Malformed response from Gemini: {e}") from e

        image = image_from_response(response)
        logger.info("[Gemini] got image mime=%s len=%d", image.mime_type, len(image.data))
        return image
