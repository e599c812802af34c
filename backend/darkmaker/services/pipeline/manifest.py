"""
Concat manifest builder

Produces the playlist ffmpeg's concat demuxer reads: one ``file`` line per
slide followed by its ``duration``. The concat demuxer ignores the duration
of the final entry unless that entry is listed again, so the last image is
repeated once without a duration.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from darkmaker.models import FileHandle


@dataclass(frozen=True)
class ManifestEntry:
    path: Path
    duration: Optional[float]


def quote_concat_path(path: Path) -> str:
    """Single-quote a path for the concat demuxer, escaping embedded quotes"""
    return "'" + str(path).replace("'", "'\\''") + "'"


def manifest_entries(images: Sequence[FileHandle], duration_per_image: float) -> List[ManifestEntry]:
    if not images:
        raise ValueError("Cannot build a manifest without images")

    entries = [ManifestEntry(image.path, duration_per_image) for image in images]
    entries.append(ManifestEntry(images[-1].path, None))
    return entries


def build_manifest(images: Sequence[FileHandle], duration_per_image: float) -> str:
    """Render the concat manifest text for ``images``

    >>> print(build_manifest([FileHandle(Path("/w/a.png"), "a.png")], 3.0))
    file '/w/a.png'
    duration 3.0
    file '/w/a.png'
    <BLANKLINE>
    """
    lines = []
    for entry in manifest_entries(images, duration_per_image):
        lines.append(f"file {quote_concat_path(entry.path)}")
        if entry.duration is not None:
            lines.append(f"duration {entry.duration}")
    return "\n".join(lines) + "\n"
