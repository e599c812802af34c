"""
Constants configuration

API metadata, CORS origins and upload rules.
"""

# API settings
API_TITLE = "DarkMaker API"
API_DESCRIPTION = "Turn a video link or a narration into a narrated image slideshow"
API_VERSION = "1.0.0"

# CORS origins
CORS_ORIGINS = ["*"]

# File upload settings
ALLOWED_MIME_PREFIXES = ("video/", "audio/", "image/")
MAX_MEDIA_FILES = 50

# Render settings
TARGET_WIDTH = 1920
TARGET_HEIGHT = 1080
TARGET_FPS = 25
MIN_SECONDS_PER_IMAGE = 2.0

__all__ = [
    "API_TITLE",
    "API_DESCRIPTION",
    "API_VERSION",
    "CORS_ORIGINS",
    "ALLOWED_MIME_PREFIXES",
    "MAX_MEDIA_FILES",
    "TARGET_WIDTH",
    "TARGET_HEIGHT",
    "TARGET_FPS",
    "MIN_SECONDS_PER_IMAGE",
]
