"""
Document host abstract interface.

Role: expose the active document to the script-generation pipeline.

Rules:
- snapshot() returns encoded image bytes (PNG) or raises SnapshotError
- canvas_info() is optional context; None means nothing is known
- No mutation of the document
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# (r, g, b, a), each 0-255
RGBA = Tuple[int, int, int, int]


@dataclass(frozen=True)
class SelectionRect:
    """Active selection bounds in canvas pixels."""

    x: int
    y: int
    width: int
    height: int


@dataclass
class CanvasInfo:
    """Canvas hints embedded into the prompt."""

    width: int
    height: int
    selection: Optional[SelectionRect] = None
    palette: List[RGBA] = field(default_factory=list)


class DocumentHost(ABC):
    """
    Abstract document boundary.
    The session depends ONLY on this interface.
    """

    @abstractmethod
    def snapshot(self) -> bytes:
        """
        Encode the active document.

        Returns:
            Encoded image bytes

        Raises:
            SnapshotError: no active document, or encoding failed
        """
        raise NotImplementedError

    @abstractmethod
    def canvas_info(self) -> Optional[CanvasInfo]:
        """Return size, selection and palette of the active document, if any."""
        raise NotImplementedError
