"""
File-backed document host.

Treats a PNG on disk as the active document. Used by the command-line entry
point when no editor is attached.

Canvas hints come from the PNG itself:
  size     IHDR width/height
  palette  PLTE entries of an indexed image, alpha from tRNS (255 when absent)
"""

import logging
import struct
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from inference.errors import SnapshotError

from .base import RGBA, CanvasInfo, DocumentHost, SelectionRect

logger = logging.getLogger(__name__)

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class FileDocumentHost(DocumentHost):
    """
    Args:
        path:      PNG file standing in for the active document
        selection: Optional selection rectangle to report
    """

    def __init__(self, path: Union[str, Path], selection: Optional[SelectionRect] = None):
        self.path = Path(path)
        self.selection = selection

    def snapshot(self) -> bytes:
        try:
            data = self.path.read_bytes()
        except OSError as e:
            raise SnapshotError(f"Cannot read {self.path}: {e}") from e
        if not data:
            raise SnapshotError(f"{self.path} is empty")
        return data

    def canvas_info(self) -> Optional[CanvasInfo]:
        try:
            data = self.path.read_bytes()
        except OSError:
            return None

        size = read_png_size(data[:24])
        if size is None:
            logger.debug(f"{self.path} is not a PNG, canvas size unknown")
            return None
        width, height = size
        return CanvasInfo(
            width=width,
            height=height,
            selection=self.selection,
            palette=read_png_palette(data),
        )


def read_png_size(header: bytes) -> Optional[tuple]:
    """Width and height from the IHDR chunk of a PNG header (first 24 bytes)."""
    if len(header) < 24 or not header.startswith(_PNG_SIGNATURE) or header[12:16] != b"IHDR":
        return None
    return struct.unpack(">II", header[16:24])


def read_png_palette(data: bytes) -> List[RGBA]:
    """
    Palette of an indexed PNG as RGBA tuples, in index order.

    Returns an empty list for truecolor/grayscale images, non-PNG data, or a
    PLTE chunk that is cut short.
    """
    if not data.startswith(_PNG_SIGNATURE):
        return []

    plte: Optional[bytes] = None
    trns = b""
    for chunk_type, payload in _iter_chunks(data):
        if chunk_type == b"PLTE":
            plte = payload
        elif chunk_type == b"tRNS":
            trns = payload
        elif chunk_type in (b"IDAT", b"IEND"):
            # PLTE and tRNS always precede image data
            break

    if not plte or len(plte) % 3:
        return []

    palette = []
    for index in range(len(plte) // 3):
        r, g, b = plte[index * 3:index * 3 + 3]
        a = trns[index] if index < len(trns) else 255
        palette.append((r, g, b, a))
    return palette


def _iter_chunks(data: bytes) -> Iterator[Tuple[bytes, bytes]]:
    """Yield (type, payload) per chunk; stops quietly at a truncated chunk."""
    pos = len(_PNG_SIGNATURE)
    while pos + 8 <= len(data):
        length, chunk_type = struct.unpack(">I4s", data[pos:pos + 8])
        start = pos + 8
        end = start + length
        if end + 4 > len(data):
            logger.debug(f"Truncated {chunk_type!r} chunk at offset {pos}")
            return
        yield chunk_type, data[start:end]
        pos = end + 4  # skip CRC
