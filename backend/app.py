# backend/app.py

import logging
from contextlib import asynccontextmanager
from typing import List

from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException, Request, Response

from config.settings import settings
from .errors import InvalidImageError, SessionStateError
from .gemini_client import GeminiImageEditor
from .model import (
    DefaultPromptResponse,
    GenerateRequest,
    Phase,
    SessionView,
    StylePreset,
    UploadRequest,
)
from .presets import DEFAULT_PROMPT, PRESET_STYLES, get_preset
from .session import ImageEditor, Session, SessionStore
from .utils import b64decode_upload, download_filename

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# One in-memory store shared by all requests
sessions = SessionStore()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Missing key must stop the service before it accepts any request
    api_key = settings.require_api_key()
    app.state.editor = GeminiImageEditor(api_key=api_key, model=settings.GEMINI_MODEL)
    logger.info("[App] ready, model=%s", settings.GEMINI_MODEL)
    yield


app = FastAPI(title="StyleShift Image Service", lifespan=lifespan)


def get_editor(request: Request) -> ImageEditor:
    return request.app.state.editor


def get_session(session_id: str) -> Session:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@app.get("/presets", response_model=List[StylePreset])
async def list_presets():
    return list(PRESET_STYLES)


@app.get("/presets/default", response_model=DefaultPromptResponse)
async def default_prompt():
    return DefaultPromptResponse(prompt=DEFAULT_PROMPT)


@app.post("/sessions", response_model=SessionView, status_code=201)
async def create_session():
    session = sessions.create()
    logger.info("[App] new session %s", session.session_id)
    return session.snapshot()


@app.get("/sessions/{session_id}", response_model=SessionView)
async def get_session_state(session: Session = Depends(get_session)):
    """
    Poll target: current phase plus images / error.
    """
    return session.snapshot()


@app.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str):
    if not sessions.discard(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return Response(status_code=204)


@app.post("/sessions/{session_id}/image", response_model=SessionView)
async def upload_image(req: UploadRequest, session: Session = Depends(get_session)):
    try:
        data = b64decode_upload(req.image_base64)
        session.accept_image(data, req.mime_type)
    except InvalidImageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return session.snapshot()


def resolve_prompt(req: GenerateRequest) -> str:
    if req.prompt and req.prompt.strip():
        return req.prompt.strip()
    if req.preset_id:
        preset = get_preset(req.preset_id)
        if preset is None:
            raise HTTPException(status_code=400, detail=f"Unknown preset: {req.preset_id}")
        return preset.prompt
    raise HTTPException(status_code=400, detail="Prompt must not be empty")


@app.post("/sessions/{session_id}/generate", response_model=SessionView, status_code=202)
async def generate(
    req: GenerateRequest,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    editor: ImageEditor = Depends(get_editor),
):
    prompt = resolve_prompt(req)

    if session.phase is Phase.PROCESSING:
        raise HTTPException(status_code=409, detail="A generation is already running")
    token = session.begin_generation()
    if token is None:
        raise HTTPException(status_code=400, detail="Upload an image first")

    # Gemini call runs after the response; clients poll GET /sessions/{id}
    background_tasks.add_task(session.run_generation, prompt, editor, token)
    return session.snapshot()


@app.post("/sessions/{session_id}/reset", response_model=SessionView)
async def reset_session(session: Session = Depends(get_session)):
    session.reset()
    return session.snapshot()


@app.get(
    "/sessions/{session_id}/download",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}, "description": "The edited image."}},
)
async def download(session: Session = Depends(get_session)):
    if session.phase is not Phase.COMPLETE or session.generated_image is None:
        raise HTTPException(status_code=404, detail="No generated image yet")

    image = session.generated_image
    filename = download_filename(image.mime_type)
    return Response(
        content=image.to_bytes(),
        media_type=image.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
