# Andy Zhao
"""
Camera package

This module provides:
- PinholeCamera: a rig camera implementing the Camera protocol used by RANSAC
"""

from .pinhole import PinholeCamera

__all__ = [
    "PinholeCamera",
]
