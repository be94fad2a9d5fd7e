"""
tests/prompting/test_prompt_builder.py

Unit tests for the PromptBuilder layer.

Verifies:
✔ build_prompt always carries the layer-safety contract and output requirement
✔ build_prompt ends with the user request, never truncated
✔ Canvas size and selection hints appear only when known
✔ build_palette_table renders at most _MAX_PALETTE_ENTRIES entries
✔ Transparent palette entries are reported as opaque
✔ No palette → "{}"
"""

import pytest
from agent.prompting.prompt_builder import (
    CONTEXT_PREAMBLE,
    LAYER_SAFETY,
    OUTPUT_REQUIREMENT,
    _MAX_PALETTE_ENTRIES,
    build_palette_table,
    build_prompt,
    selection_hint,
    size_hint,
)
from services.document import CanvasInfo, SelectionRect


class TestBuildPrompt:
    """Tests for the build_prompt() assembler."""

    def test_minimal_prompt_no_canvas(self):
        """Minimal call: user request only."""
        result = build_prompt("draw a cat")

        assert result.startswith(CONTEXT_PREAMBLE)
        assert LAYER_SAFETY in result
        assert "CANVAS SIZE" not in result
        assert "ACTIVE SELECTION" not in result
        assert "CURRENT PALETTE (use ONLY these indices 0-F):\n{}" in result

    def test_ends_with_request_and_requirement(self):
        result = build_prompt("draw a cat")
        assert result.endswith("User Request: draw a cat" + OUTPUT_REQUIREMENT)

    def test_long_request_not_truncated(self):
        request = "a very detailed castle " * 500
        assert request in build_prompt(request)

    def test_canvas_hints(self):
        canvas = CanvasInfo(
            width=64,
            height=32,
            selection=SelectionRect(x=4, y=5, width=10, height=12),
            palette=[(255, 0, 0, 255)],
        )
        result = build_prompt("draw a flag", canvas)

        assert "CANVAS SIZE: 64x32 pixels." in result
        assert "ACTIVE SELECTION: x=4, y=5, width=10, height=12. ONLY draw within this area!" in result
        assert "{[0]=Color{r=255,g=0,b=0,a=255},}" in result

    def test_mentions_helper_and_refresh(self):
        result = build_prompt("draw")
        assert "drawHexGrid" in result
        assert "app.refresh()" in result


class TestHints:
    def test_size_hint_unknown(self):
        assert size_hint(None) == ""
        assert size_hint(CanvasInfo(width=0, height=0)) == ""

    def test_selection_hint_none(self):
        assert selection_hint(None) == ""


class TestPaletteTable:
    def test_empty(self):
        assert build_palette_table([]) == "{}"

    def test_transparent_becomes_opaque(self):
        assert build_palette_table([(10, 20, 30, 0)]) == "{[0]=Color{r=10,g=20,b=30,a=255},}"

    def test_partial_alpha_kept(self):
        assert "a=128" in build_palette_table([(1, 2, 3, 128)])

    def test_capped_at_sixteen(self):
        palette = [(i, i, i, 255) for i in range(40)]
        table = build_palette_table(palette)

        assert _MAX_PALETTE_ENTRIES == 16
        assert "[15]=" in table
        assert "[16]=" not in table

    @pytest.mark.parametrize("limit", [1, 4])
    def test_custom_limit(self, limit):
        palette = [(0, 0, 0, 255)] * 8
        assert build_palette_table(palette, limit=limit).count("Color{") == limit
