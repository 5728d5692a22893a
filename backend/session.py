# backend/session.py

import logging
from typing import Dict, Optional, Protocol

from .errors import InvalidImageError, SessionStateError
from .model import ImagePayload, InlineImage, Phase, SessionView
from .utils import decode, encode, gen_session_id, is_image_mime_type

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to generate image. Please try again."


class ImageEditor(Protocol):
    async def edit_image(self, base64_body: str, mime_type: str, prompt: str) -> InlineImage:
        ...


class Session:
    """
    One upload/edit/result unit of work.

    Phase and fields always agree: generated_image only in COMPLETE,
    error_message only in FAILED, original_image everywhere except IDLE.
    Re-generating clears the previous result as soon as PROCESSING starts.
    """

    def __init__(self, session_id: Optional[str] = None):
        self.session_id = session_id or gen_session_id()
        self.phase = Phase.IDLE
        self.original_image: Optional[ImagePayload] = None
        self.generated_image: Optional[ImagePayload] = None
        self.mime_type: Optional[str] = None
        self.error_message: Optional[str] = None
        # bumped on every reset/upload/generation so late results can be dropped
        self._generation = 0

    def accept_image(self, data: bytes, mime_type: str) -> ImagePayload:
        if not is_image_mime_type(mime_type):
            raise InvalidImageError("Please upload a valid image file")
        if not data:
            raise InvalidImageError("Image file is empty")
        if self.phase is Phase.PROCESSING:
            raise SessionStateError("Cannot replace the image while a generation is running")

        self._generation += 1
        self.original_image = ImagePayload(mime_type=mime_type, data_url=encode(data, mime_type))
        self.mime_type = mime_type
        self.generated_image = None
        self.error_message = None
        self.phase = Phase.UPLOADED
        logger.info("[Session %s] image accepted mime=%s size=%d", self.session_id, mime_type, len(data))
        return self.original_image

    def begin_generation(self) -> Optional[int]:
        """
        Move into PROCESSING and return the token that run_generation needs.
        Returns None (and does nothing) without an image.
        """
        if self.original_image is None:
            return None
        if self.phase is Phase.PROCESSING:
            raise SessionStateError("A generation is already running for this session")

        self._generation += 1
        self.generated_image = None
        self.error_message = None
        self.phase = Phase.PROCESSING
        return self._generation

    def complete(self, image: ImagePayload) -> None:
        if self.phase is not Phase.PROCESSING:
            raise SessionStateError(f"Cannot complete from phase {self.phase.value}")
        self.generated_image = image
        self.error_message = None
        self.phase = Phase.COMPLETE

    def fail(self, message: Optional[str]) -> None:
        if self.phase is not Phase.PROCESSING:
            raise SessionStateError(f"Cannot fail from phase {self.phase.value}")
        self.generated_image = None
        self.error_message = message or GENERIC_FAILURE_MESSAGE
        self.phase = Phase.FAILED

    def reset(self) -> None:
        self._generation += 1
        self.phase = Phase.IDLE
        self.original_image = None
        self.generated_image = None
        self.mime_type = None
        self.error_message = None
        logger.info("[Session %s] reset", self.session_id)

    async def generate(self, prompt: str, editor: ImageEditor) -> Phase:
        token = self.begin_generation()
        if token is None:
            return self.phase
        await self.run_generation(prompt, editor, token)
        return self.phase

    async def run_generation(self, prompt: str, editor: ImageEditor, token: int) -> None:
        """
        Run the generation identified by `token` (from begin_generation) and
        record the outcome. Does nothing once the session was reset or
        regenerated. Editor failures end up in FAILED and are never re-raised.
        """
        if not self._is_current(token):
            logger.info("[Session %s] generation %d superseded before start", self.session_id, token)
            return
        original = self.original_image
        logger.info("[Session %s] generating, prompt=%s", self.session_id, prompt[:50])

        try:
            result = await editor.edit_image(original.base64_body, original.mime_type, prompt)
        except Exception as e:
            logger.exception("[Session %s] generation failed: %s", self.session_id, e)
            if self._is_current(token):
                self.fail(str(e))
            return

        if not self._is_current(token):
            logger.info("[Session %s] dropping stale result", self.session_id)
            return
        self.complete(ImagePayload(mime_type=result.mime_type, data_url=decode(result.data, result.mime_type)))
        logger.info("[Session %s] generation complete", self.session_id)

    def _is_current(self, token: int) -> bool:
        return token == self._generation and self.phase is Phase.PROCESSING

    def snapshot(self) -> SessionView:
        return SessionView(
            session_id=self.session_id,
            phase=self.phase,
            mime_type=self.mime_type,
            original_image=self.original_image,
            generated_image=self.generated_image,
            error_message=self.error_message,
        )


class SessionStore:
    """In-memory sessions, one per browser context. Nothing is persisted."""

    def __init__(self):
        self._sessions: Dict[str, Session] = {}

    def create(self) -> Session:
        session = Session()
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def discard(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)
