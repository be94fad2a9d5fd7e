"""
tests/unit/test_document_and_script.py

Unit tests for document hosts and script executors.

Verifies:
✔ StubDocumentHost returns bytes or raises SnapshotError
✔ FileDocumentHost reads PNG bytes and IHDR size
✔ Indexed PNGs report their PLTE palette, alpha from tRNS
✔ Script executors report success/failure as ScriptResult
"""

import struct
import zlib

import pytest

from inference.errors import SnapshotError
from services.document import (
    CanvasInfo,
    FileDocumentHost,
    SelectionRect,
    StubDocumentHost,
    read_png_palette,
    read_png_size,
)
from services.document.stub import BLANK_PNG
from services.script import FileScriptExecutor, RecordingScriptExecutor


def png_chunk(chunk_type: bytes, payload: bytes) -> bytes:
    crc = zlib.crc32(chunk_type + payload) & 0xFFFFFFFF
    return struct.pack(">I", len(payload)) + chunk_type + payload + struct.pack(">I", crc)


def indexed_png(palette: bytes, trns: bytes = None) -> bytes:
    """2x1 indexed-colour PNG (bit depth 8, colour type 3)."""
    ihdr = struct.pack(">IIBBBBB", 2, 1, 8, 3, 0, 0, 0)
    data = b"\x89PNG\r\n\x1a\n" + png_chunk(b"IHDR", ihdr) + png_chunk(b"PLTE", palette)
    if trns is not None:
        data += png_chunk(b"tRNS", trns)
    data += png_chunk(b"IDAT", zlib.compress(b"\x00\x00\x01"))
    return data + png_chunk(b"IEND", b"")


class TestStubDocumentHost:
    def test_snapshot(self):
        host = StubDocumentHost(canvas=CanvasInfo(width=32, height=32))
        assert host.snapshot() == BLANK_PNG
        assert host.canvas_info().width == 32
        assert host.snapshot_count == 1

    def test_no_active_document(self):
        with pytest.raises(SnapshotError):
            StubDocumentHost(image_bytes=None).snapshot()


class TestFileDocumentHost:
    def test_reads_png(self, tmp_path):
        path = tmp_path / "sprite.png"
        path.write_bytes(BLANK_PNG)
        selection = SelectionRect(x=1, y=2, width=3, height=4)

        host = FileDocumentHost(path, selection=selection)

        assert host.snapshot() == BLANK_PNG
        info = host.canvas_info()
        assert (info.width, info.height) == (1, 1)
        assert info.selection == selection

    def test_missing_file(self, tmp_path):
        host = FileDocumentHost(tmp_path / "missing.png")
        with pytest.raises(SnapshotError):
            host.snapshot()
        assert host.canvas_info() is None

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.png"
        path.write_bytes(b"")
        with pytest.raises(SnapshotError):
            FileDocumentHost(path).snapshot()

    def test_png_size(self):
        assert read_png_size(BLANK_PNG[:24]) == (1, 1)
        assert read_png_size(b"GIF89a" + b"\x00" * 18) is None

    def test_indexed_png_palette(self, tmp_path):
        path = tmp_path / "indexed.png"
        path.write_bytes(indexed_png(b"\x00\x00\x00\xff\x00\x00\x00\x80\xff", trns=b"\x00"))

        info = FileDocumentHost(path).canvas_info()

        assert (info.width, info.height) == (2, 1)
        assert info.palette == [(0, 0, 0, 0), (255, 0, 0, 255), (0, 128, 255, 255)]

    def test_palette_without_transparency(self):
        assert read_png_palette(indexed_png(b"\x10\x20\x30")) == [(16, 32, 48, 255)]

    def test_truecolor_png_has_no_palette(self, tmp_path):
        path = tmp_path / "sprite.png"
        path.write_bytes(BLANK_PNG)
        assert FileDocumentHost(path).canvas_info().palette == []

    def test_truncated_palette_ignored(self):
        data = indexed_png(b"\x10\x20\x30\x40\x50\x60")
        cut = data.index(b"PLTE") + 4 + 2
        assert read_png_palette(data[:cut]) == []
        assert read_png_palette(b"not a png") == []


class TestScriptExecutors:
    def test_recording_success(self):
        executor = RecordingScriptExecutor()
        result = executor.execute("app.refresh()")
        assert result.ok
        assert executor.scripts == ["app.refresh()"]

    def test_recording_failure(self):
        result = RecordingScriptExecutor(fail_with="attempt to index a nil value").execute("x")
        assert not result.ok
        assert result.error == "attempt to index a nil value"

    def test_file_executor_writes(self, tmp_path):
        path = tmp_path / "out" / "script.lua"
        result = FileScriptExecutor(path).execute("app.refresh()")
        assert result.ok
        assert path.read_text() == "app.refresh()"

    def test_file_executor_error(self, tmp_path):
        # A directory cannot be written as a file
        result = FileScriptExecutor(tmp_path).execute("x")
        assert result.status == "error"
