import base64
import time
from typing import Any, Dict, List, Optional
from io import BytesIO

import requests
from PIL import Image

from config.settings import settings

BACKEND_URL = settings.BACKEND_URL


def create_session() -> Dict[str, Any]:
    resp = requests.post(f"{BACKEND_URL}/sessions", timeout=10)
    resp.raise_for_status()
    return resp.json()


def fetch_presets() -> List[Dict[str, Any]]:
    resp = requests.get(f"{BACKEND_URL}/presets", timeout=10)
    resp.raise_for_status()
    return resp.json()


def fetch_default_prompt() -> str:
    resp = requests.get(f"{BACKEND_URL}/presets/default", timeout=10)
    resp.raise_for_status()
    return resp.json()["prompt"]


def upload_image(session_id: str, data: bytes, mime_type: str) -> Dict[str, Any]:
    payload = {"image_base64": base64.b64encode(data).decode("ascii"), "mime_type": mime_type}
    resp = requests.post(f"{BACKEND_URL}/sessions/{session_id}/image", json=payload, timeout=30)
    resp.raise_for_status()
    return resp.json()


def call_generate(session_id: str, prompt: str) -> Dict[str, Any]:
    resp = requests.post(f"{BACKEND_URL}/sessions/{session_id}/generate", json={"prompt": prompt}, timeout=30)
    resp.raise_for_status()
    return resp.json()


def poll_session(session_id: str, poll_interval: float = settings.POLL_INTERVAL) -> Optional[Dict[str, Any]]:
    """Poll GET /sessions/{id} until the session leaves processing"""
    while True:
        resp = requests.get(f"{BACKEND_URL}/sessions/{session_id}", timeout=10)
        if resp.status_code == 404:
            return None

        data = resp.json()
        if data.get("phase") != "processing":
            return data

        time.sleep(poll_interval)


def reset_session(session_id: str) -> Dict[str, Any]:
    resp = requests.post(f"{BACKEND_URL}/sessions/{session_id}/reset", timeout=10)
    resp.raise_for_status()
    return resp.json()


def download_result(session_id: str):
    """GET /download -> (bytes, filename, mime)"""
    resp = requests.get(f"{BACKEND_URL}/sessions/{session_id}/download", timeout=30)
    resp.raise_for_status()
    disposition = resp.headers.get("content-disposition", "")
    filename = disposition.split("filename=")[-1].strip('"') or "styleshift-edit.png"
    return resp.content, filename, resp.headers.get("content-type", "image/png")


def selected_preset_id(prompt: str, presets: List[Dict[str, Any]]) -> Optional[str]:
    """Preset whose text the prompt box currently holds, if any"""
    for preset in presets:
        if preset["prompt"] == prompt:
            return preset["id"]
    return None


def data_url_to_image(data_url: str) -> Image.Image:
    body = data_url.partition(",")[2]
    return Image.open(BytesIO(base64.b64decode(body)))


def error_detail(e: requests.HTTPError) -> str:
    try:
        return e.response.json().get("detail", str(e))
    except ValueError:
        return str(e)
