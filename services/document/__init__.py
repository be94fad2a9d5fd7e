"""
Document host exports.

Clean interface for the session to import document components.
"""

from .base import RGBA, CanvasInfo, DocumentHost, SelectionRect
from .stub import StubDocumentHost
from .file_host import FileDocumentHost, read_png_palette, read_png_size

__all__ = [
    "RGBA",
    "CanvasInfo",
    "DocumentHost",
    "SelectionRect",
    "StubDocumentHost",
    "FileDocumentHost",
    "read_png_palette",
    "read_png_size",
]
