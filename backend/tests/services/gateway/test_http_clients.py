"""
Tests for the transcription and speech synthesis HTTP clients
"""

import json
from dataclasses import replace

import httpx
import pytest

from darkmaker.core import ConfigError, UpstreamError
from darkmaker.models import FileHandle
from darkmaker.services.gateway.speech import SpeechClient
from darkmaker.services.gateway.transcription import TranscriptionClient, to_iso639_1


@pytest.fixture
def narration(workspace) -> FileHandle:
    path = workspace.intake_path("narration", "-voice.mp3")
    path.write_bytes(b"ID3-audio")
    return FileHandle(path=path, display_name="voice.mp3")


def test_to_iso639_1():
    assert to_iso639_1("pt-BR") == "pt"
    assert to_iso639_1("en_US") == "en"
    assert to_iso639_1("es") == "es"
    assert to_iso639_1(None) is None


@pytest.mark.asyncio
class TestTranscriptionClient:
    async def test_posts_multipart_and_returns_text(self, settings, narration):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = request.content
            return httpx.Response(200, json={"text": "  hello world  "})

        client = TranscriptionClient(settings, transport=httpx.MockTransport(handler))
        text = await client.transcribe(narration, "pt-BR")

        assert text == "hello world"
        assert seen["auth"] == "Bearer test-transcription-key"
        assert b'name="language"' in seen["body"]
        assert b"ID3-audio" in seen["body"]
        assert b"whisper-1" in seen["body"]

    async def test_missing_text_field(self, settings, narration):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"segments": []}))
        client = TranscriptionClient(settings, transport=transport)
        assert await client.transcribe(narration) == ""

    async def test_missing_key(self, settings, narration):
        client = TranscriptionClient(replace(settings, transcription_api_key=None))
        with pytest.raises(ConfigError, match="TRANSCRIPTION_API_KEY"):
            await client.transcribe(narration)

    async def test_non_success_status(self, settings, narration):
        transport = httpx.MockTransport(lambda request: httpx.Response(401, text="bad key"))
        client = TranscriptionClient(settings, transport=transport)
        with pytest.raises(UpstreamError, match="401"):
            await client.transcribe(narration)

    async def test_transport_failure(self, settings, narration):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = TranscriptionClient(settings, transport=httpx.MockTransport(handler))
        with pytest.raises(UpstreamError, match="connection refused"):
            await client.transcribe(narration)

    async def test_invalid_json(self, settings, narration):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        client = TranscriptionClient(settings, transport=transport)
        with pytest.raises(UpstreamError, match="invalid JSON"):
            await client.transcribe(narration)


@pytest.mark.asyncio
class TestSpeechClient:
    async def test_synthesizes_into_output(self, settings, workspace):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers["xi-api-key"]
            seen["json"] = json.loads(request.content)
            return httpx.Response(200, content=b"MP3BYTES")

        client = SpeechClient(settings, workspace, transport=httpx.MockTransport(handler))
        handle = await client.synthesize_speech("Narration text", "voice-42")

        assert seen["url"].endswith("/text-to-speech/voice-42")
        assert seen["key"] == "test-speech-key"
        assert seen["json"] == {"text": "Narration text", "model_id": "eleven_multilingual_v2"}
        assert handle.path.parent == workspace.output_dir
        assert handle.path.read_bytes() == b"MP3BYTES"

    async def test_default_voice(self, settings, workspace):
        urls = []

        def handler(request):
            urls.append(str(request.url))
            return httpx.Response(200, content=b"x")

        client = SpeechClient(settings, workspace, transport=httpx.MockTransport(handler))
        await client.synthesize_speech("text")
        assert urls[0].endswith("/voice-default")

    async def test_no_voice_configured(self, settings, workspace):
        client = SpeechClient(replace(settings, default_voice_id=None), workspace)
        with pytest.raises(ConfigError):
            await client.synthesize_speech("text")

    async def test_missing_key(self, settings, workspace):
        client = SpeechClient(replace(settings, speech_api_key=None), workspace)
        with pytest.raises(ConfigError, match="SPEECH_API_KEY"):
            await client.synthesize_speech("text", "v")

    @pytest.mark.parametrize("response", [
        httpx.Response(500, text="overloaded"),
        httpx.Response(200, content=b""),
    ])
    async def test_upstream_failures_leave_no_file(self, settings, workspace, response):
        client = SpeechClient(settings, workspace, transport=httpx.MockTransport(lambda request: response))
        with pytest.raises(UpstreamError):
            await client.synthesize_speech("text", "v")
        assert list(workspace.output_dir.iterdir()) == []
