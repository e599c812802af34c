"""
Slide timing

Spreads the narration evenly over the slides, never showing a slide for
less than MIN_SECONDS_PER_IMAGE.
"""

from typing import Optional

from darkmaker.config import MIN_SECONDS_PER_IMAGE


def compute_duration_per_image(total_audio_seconds: float, image_count: int) -> float:
    """Seconds each image is held so the slideshow spans the narration

    >>> compute_duration_per_image(30.0, 3)
    10.0
    >>> compute_duration_per_image(3.0, 10)
    2.0
    """
    return max(MIN_SECONDS_PER_IMAGE, total_audio_seconds / max(1, image_count))


def resolve_duration_per_image(
    total_audio_seconds: float,
    image_count: int,
    requested_duration: Optional[float] = None,
) -> float:
    """Caller-fixed duration when one is given, otherwise the computed one"""
    if requested_duration and requested_duration > 0:
        return max(MIN_SECONDS_PER_IMAGE, requested_duration)
    return compute_duration_per_image(total_audio_seconds, image_count)
