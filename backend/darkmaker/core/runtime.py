"""
Startup guards: external tools on PATH and writable workspace directories.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List

from .logging import get_logger

logger = get_logger(__name__, component="runtime")

REQUIRED_RENDER_TOOLS = ("ffmpeg", "ffprobe")
OPTIONAL_TOOLS = ("yt-dlp",)

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def parse_bool_env(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def missing_runtime_tools(tools: Iterable[str]) -> List[str]:
    return [tool for tool in tools if not shutil.which(tool)]


def assert_directory_writable(path: Path) -> None:
    """Raise RuntimeError unless ``path`` is an existing directory we can create files in"""
    if not path.is_dir():
        raise RuntimeError(f"Required directory is missing: {path}")
    try:
        with tempfile.TemporaryFile(dir=path):
            pass
    except OSError as exc:
        raise RuntimeError(f"Directory is not writable: {path}") from exc


def _directory_report(path: Path) -> Dict[str, object]:
    entry: Dict[str, object] = {"path": str(path), "writable": True}
    try:
        assert_directory_writable(path)
    except RuntimeError as exc:
        entry.update(writable=False, error=str(exc))
    return entry


def run_startup_runtime_checks(
    *,
    intake_dir: Path,
    output_dir: Path,
    strict_tools: bool,
) -> Dict[str, object]:
    """
    Check the workspace directories and the media toolchain

    An unwritable directory always aborts startup. Missing ffmpeg/ffprobe
    only aborts when ``strict_tools`` is set; otherwise the report marks
    the service as degraded and /health surfaces it.
    """
    directories = {"intake": _directory_report(intake_dir), "output": _directory_report(output_dir)}
    broken = [entry["error"] for entry in directories.values() if not entry["writable"]]
    if broken:
        raise RuntimeError("; ".join(str(message) for message in broken))

    missing = missing_runtime_tools(REQUIRED_RENDER_TOOLS)
    missing_optional = missing_runtime_tools(OPTIONAL_TOOLS)
    if missing_optional:
        logger.warning("Optional tools not found, URL downloads will fail", extra={"missing": missing_optional})
    if missing:
        if strict_tools:
            raise RuntimeError("Missing required runtime tools: " + ", ".join(missing))
        logger.warning("Required media tools not found", extra={"missing": missing})

    return {
        "directories": directories,
        "tools": {
            "required": list(REQUIRED_RENDER_TOOLS),
            "optional": list(OPTIONAL_TOOLS),
            "missing": missing,
            "missing_optional": missing_optional,
        },
        "ok": not missing,
    }
