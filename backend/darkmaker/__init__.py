"""
DarkMaker backend

Turns a video link or an uploaded narration into a narrated slideshow video.
"""
