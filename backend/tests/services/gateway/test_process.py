"""
Tests for darkmaker.services.gateway.process
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from darkmaker.core import DownloadError, TranscodeError
from darkmaker.services.gateway.process import run_tool


def _process(returncode=0, stdout=b"", stderr=b""):
    process = MagicMock()
    process.returncode = returncode
    process.communicate = AsyncMock(return_value=(stdout, stderr))
    process.wait = AsyncMock(return_value=returncode)
    return process


@pytest.mark.asyncio
class TestRunTool:
    async def test_returns_stdout(self):
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=_process(stdout=b"12.5\n"))) as spawn:
            out = await run_tool(["ffprobe", "-v", "error", "a.mp3"], timeout=5)

        assert out == b"12.5\n"
        args = spawn.call_args.args
        assert args == ("ffprobe", "-v", "error", "a.mp3")

    async def test_nonzero_exit_raises_with_stderr_tail(self):
        stderr = b"x" * 2000 + b"Invalid data found"
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=_process(1, stderr=stderr))):
            with pytest.raises(TranscodeError) as exc:
                await run_tool(["ffmpeg"], timeout=5, error_cls=TranscodeError, action="mux")

        message = str(exc.value)
        assert "mux failed (exit 1)" in message
        assert message.endswith("Invalid data found")
        assert len(message) < 900

    async def test_missing_binary(self):
        with patch("asyncio.create_subprocess_exec", AsyncMock(side_effect=FileNotFoundError())):
            with pytest.raises(DownloadError, match="not installed"):
                await run_tool(["yt-dlp", "--", "https://example.com"], timeout=5, error_cls=DownloadError)

    async def test_timeout_kills_process(self):
        process = _process()

        async def hang():
            await asyncio.sleep(10)

        process.communicate = MagicMock(side_effect=lambda: hang())
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            with pytest.raises(TranscodeError, match="timed out"):
                await run_tool(["ffmpeg"], timeout=0.01, error_cls=TranscodeError)

        process.kill.assert_called_once()
