"""
Stub document host for testing and offline development.

Deterministic and fast.
"""

from typing import Optional

from inference.errors import SnapshotError

from .base import CanvasInfo, DocumentHost

# 1x1 transparent PNG
BLANK_PNG = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


class StubDocumentHost(DocumentHost):
    """
    Fake document with fixed bytes and canvas info.

    Args:
        image_bytes: Bytes returned by snapshot(); None simulates "no active document"
        canvas:      CanvasInfo returned by canvas_info()
    """

    def __init__(
        self,
        image_bytes: Optional[bytes] = BLANK_PNG,
        canvas: Optional[CanvasInfo] = None,
    ):
        self.image_bytes = image_bytes
        self.canvas = canvas
        self.snapshot_count = 0

    def snapshot(self) -> bytes:
        self.snapshot_count += 1
        if not self.image_bytes:
            raise SnapshotError("No active document")
        return self.image_bytes

    def canvas_info(self) -> Optional[CanvasInfo]:
        return self.canvas
