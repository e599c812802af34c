"""
External process runner

Every external tool is started with an argument list through
``asyncio.create_subprocess_exec``; no command line is ever assembled as a
string or passed to a shell. A non-zero exit status is the only failure
signal, stdout/stderr are kept for diagnostics.
"""

import asyncio
from typing import List, Sequence, Type

from darkmaker.core import get_logger, PipelineError, DarkMakerError

logger = get_logger(__name__, component="gateway")

STDERR_TAIL_CHARS = 800


async def run_tool(
    cmd: Sequence[str],
    *,
    timeout: float,
    error_cls: Type[DarkMakerError] = PipelineError,
    action: str = "",
) -> bytes:
    """
    Run an external tool and return its stdout

    Args:
        cmd: Program and arguments
        timeout: Seconds to wait before the process is killed
        error_cls: Exception raised on any failure
        action: Short description used in logs and error messages

    Raises:
        error_cls: On a missing binary, a non-zero exit or a timeout
    """
    args: List[str] = [str(part) for part in cmd]
    label = action or args[0]
    logger.info(f"Running {label}", extra={"tool": args[0], "argv": args})

    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as exc:
        raise error_cls(f"{label} failed: '{args[0]}' is not installed") from exc
    except OSError as exc:
        raise error_cls(f"{label} failed to start: {exc}") from exc

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError as exc:
        process.kill()
        await process.wait()
        logger.error(f"{label} timed out", extra={"timeout_seconds": timeout})
        raise error_cls(f"{label} timed out after {timeout:.0f}s") from exc

    if process.returncode != 0:
        detail = (stderr or b"").decode(errors="replace").strip()[-STDERR_TAIL_CHARS:]
        logger.error(f"{label} exited with status {process.returncode}", extra={"stderr": detail})
        raise error_cls(f"{label} failed (exit {process.returncode}): {detail or 'unknown error'}")

    return stdout or b""
