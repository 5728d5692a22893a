from unittest.mock import Mock, patch

import pytest
import requests

from config.settings import settings
from frontend import client
from frontend.client import download_result, error_detail, poll_session, selected_preset_id

PRESETS = [
    {"id": "tuxedo", "label": "Formal Tuxedo", "prompt": "Make it a tuxedo.", "icon": "🎩"},
    {"id": "leather", "label": "Leather Jacket", "prompt": "Make it leather.", "icon": "🧥"},
]


def http_response(status_code, json_data=None, content=b"", headers=None):
    resp = Mock()
    resp.status_code = status_code
    resp.json.return_value = json_data
    resp.content = content
    resp.headers = headers or {}
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error", response=resp)
    else:
        resp.raise_for_status.return_value = None
    return resp


class TestSelectedPreset:

    def test_matches_preset_prompt(self):
        assert selected_preset_id("Make it leather.", PRESETS) == "leather"

    def test_custom_prompt_matches_nothing(self):
        assert selected_preset_id("Make it a kilt.", PRESETS) is None
        assert selected_preset_id("", []) is None


class TestBackendSettings:

    def test_backend_url_comes_from_settings(self):
        assert client.BACKEND_URL == settings.BACKEND_URL

    def test_poll_uses_configured_interval(self):
        responses = [
            http_response(200, {"phase": "processing"}),
            http_response(200, {"phase": "complete"}),
        ]
        with patch("frontend.client.requests.get", side_effect=responses) as get, \
                patch("frontend.client.time.sleep") as sleep:
            result = poll_session("abc")

        assert result == {"phase": "complete"}
        assert get.call_args.args[0] == f"{settings.BACKEND_URL}/sessions/abc"
        sleep.assert_called_once_with(settings.POLL_INTERVAL)

    def test_poll_unknown_session(self):
        with patch("frontend.client.requests.get", return_value=http_response(404)):
            assert poll_session("gone") is None


class TestDownloadResult:

    def test_returns_bytes_and_filename(self):
        resp = http_response(
            200,
            content=b"png-bytes",
            headers={
                "content-disposition": 'attachment; filename="styleshift-edit-42.png"',
                "content-type": "image/png",
            },
        )
        with patch("frontend.client.requests.get", return_value=resp):
            assert download_result("abc") == (b"png-bytes", "styleshift-edit-42.png", "image/png")

    def test_missing_session_raises_http_error_with_detail(self):
        resp = http_response(404, {"detail": "Session not found"})
        with patch("frontend.client.requests.get", return_value=resp):
            with pytest.raises(requests.HTTPError) as exc:
                download_result("gone")
        assert error_detail(exc.value) == "Session not found"

    def test_error_detail_without_json_body(self):
        resp = http_response(502)
        resp.json.side_effect = ValueError("no json")
        err = requests.HTTPError("502 error", response=resp)
        assert error_detail(err) == "502 error"
