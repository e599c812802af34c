"""
Storage infrastructure.
"""

from .workspace import Workspace

__all__ = ["Workspace"]
