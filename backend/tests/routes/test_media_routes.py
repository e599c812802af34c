"""
Tests for /extract-audio, /transcribe and the status endpoints
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from darkmaker.core import TranscodeError
from darkmaker.main import create_app
from darkmaker.services.use_cases import EMPTY_TRANSCRIPT_MESSAGE


@pytest.fixture
def client(settings, workspace, fake_gateway):
    return TestClient(create_app(settings=settings, workspace=workspace, gateway=fake_gateway))


class TestExtractAudio:
    def test_returns_wav_and_cleans_up(self, client, fake_gateway, leftover_files):
        response = client.post("/extract-audio", files={"video": ("clip.mp4", b"MP4", "video/mp4")})

        assert response.status_code == 200
        assert response.headers["content-type"] == "audio/wav"
        assert response.content == b"RIFF-FAKE-WAV"
        fake_gateway.extract_audio.assert_awaited_once()
        assert leftover_files() == []

    def test_missing_file_is_400(self, client):
        assert client.post("/extract-audio").status_code == 400

    def test_wrong_type_is_400(self, client, leftover_files):
        response = client.post("/extract-audio", files={"video": ("a.txt", b"hi", "text/plain")})
        assert response.status_code == 400
        assert leftover_files() == []

    def test_ffmpeg_failure_is_500(self, client, fake_gateway, leftover_files):
        fake_gateway.extract_audio.side_effect = TranscodeError("audio extraction failed (exit 1)")
        response = client.post("/extract-audio", files={"video": ("clip.mp4", b"MP4", "video/mp4")})
        assert response.status_code == 500
        assert leftover_files() == []


class TestTranscribe:
    def test_returns_script(self, client, fake_gateway, leftover_files):
        fake_gateway.transcribe.return_value = "hello there"
        response = client.post(
            "/transcribe",
            files={"audio": ("speech.wav", b"RIFF", "audio/wav")},
            data={"languageCode": "en-US"},
        )

        assert response.status_code == 200
        assert response.json() == {"script": "hello there"}
        assert fake_gateway.transcribe.await_args.args[1] == "en-US"
        assert leftover_files() == []

    def test_default_language_is_left_to_settings(self, client, fake_gateway):
        client.post("/transcribe", files={"audio": ("speech.wav", b"RIFF", "audio/wav")})
        assert fake_gateway.transcribe.await_args.args[1] is None

    def test_empty_transcript_fallback(self, client, fake_gateway):
        fake_gateway.transcribe.return_value = ""
        response = client.post("/transcribe", files={"audio": ("speech.wav", b"RIFF", "audio/wav")})
        assert response.json() == {"script": EMPTY_TRANSCRIPT_MESSAGE}

    def test_missing_file_is_400(self, client):
        assert client.post("/transcribe").status_code == 400


class TestStatusEndpoints:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "version" in response.json()

    def test_status(self, client):
        assert client.get("/status").json() == {"status": "ok"}

    def test_health_ok(self, client):
        with patch("darkmaker.main.shutil.which", return_value="/usr/bin/tool"):
            response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["checks"]["ffmpeg"]["available"] is True

    def test_health_unhealthy_without_ffmpeg(self, client):
        with patch("darkmaker.main.shutil.which", return_value=None):
            response = client.get("/health")
        assert response.status_code == 503
        assert response.json()["detail"]["status"] == "unhealthy"
