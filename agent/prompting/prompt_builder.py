"""
Prompt Builder Layer
====================

Assembles the user prompt sent to every backend.

Responsibilities:
- Embeds canvas hints (size, active selection, palette table) as text
- States the layer-safety contract and the drawHexGrid helper the wrapped
  script provides
- Ends with the user's request and the output-format requirement

Invariants:
- The palette table lists at most _MAX_PALETTE_ENTRIES entries (hex digits 0-F)
- Fully transparent palette entries are reported as opaque
- The user request is never truncated
- Backend-specific wording (system role, image-unavailable note) is added
  by inference.request_builder, NOT here
"""

from typing import Optional, Sequence

from services.document import RGBA, CanvasInfo, SelectionRect

# ── Budget Constants ──────────────────────────────────────────────────────────
_MAX_PALETTE_ENTRIES: int = 16   # one hex digit per pixel in drawHexGrid strings

# ── Behavioral Contract ───────────────────────────────────────────────────────
CONTEXT_PREAMBLE = "Context: You are Aseprite Assistant. Use Lua to script Aseprite.\n\n"

LAYER_SAFETY = """CRITICAL LAYER SAFETY: Always start by creating a new layer AND cel:
```lua
local sprite = app.activeSprite
local layer = sprite:newLayer()
layer.name = 'AI Generation'
app.activeLayer = layer
-- CRITICAL: Create a cel (image) in this layer
local cel = sprite:newCel(layer, app.activeFrame)
```

OPTIMIZED DRAWING METHOD - You have a helper function for efficient drawing:
```lua
-- drawHexGrid(startX, startY, width, hexString, palette)
-- hexString: each character (0-F) is a palette index
-- Example: "0001112000011120" draws a 4x4 grid
```

"""

DRAWING_GUIDE = """AVAILABLE METHODS:
1. PREFERRED: Use drawHexGrid() for efficient pixel-perfect drawing
   - Generate a hex string where each char is a palette index
   - Example: drawHexGrid(0, 0, 8, "00112233...", palette)
2. FALLBACK: Use app.activeImage:drawPixel(x, y, palette[index]) ONLY if needed
   - Always use palette[index], NEVER Color{r=...,g=...,b=...}
3. ANIMATION: Create frames with sprite:newFrame() or sprite:newEmptyFrame()

STYLE REQUIREMENTS:
- Create PROFESSIONAL, HIGH-QUALITY pixel art
- Use shading and lighting for depth (not flat colors)
- Maintain coherent color palette usage
- Ensure proper proportions for pixel art
- NO stray pixels or noise

ALWAYS end with `app.refresh()`

"""

OUTPUT_REQUIREMENT = "\n\nOutput MUST be a complete Lua code block in markdown format."


def build_palette_table(palette: Sequence[RGBA], limit: int = _MAX_PALETTE_ENTRIES) -> str:
    """
    Render palette entries as a Lua table literal.

    Example:
        {[0]=Color{r=0,g=0,b=0,a=255},[1]=Color{r=255,g=255,b=255,a=255},}

    Returns "{}" when there is no palette.
    """
    if not palette:
        return "{}"

    entries = []
    for index, (r, g, b, a) in enumerate(palette[:limit]):
        # Transparent index 0 is common; the model should still get a usable color.
        if a == 0:
            a = 255
        entries.append(f"[{index}]=Color{{r={r},g={g},b={b},a={a}}},")
    return "{" + "".join(entries) + "}"


def size_hint(canvas: Optional[CanvasInfo]) -> str:
    if canvas is None or canvas.width <= 0 or canvas.height <= 0:
        return ""
    return f"CANVAS SIZE: {canvas.width}x{canvas.height} pixels. "


def selection_hint(selection: Optional[SelectionRect]) -> str:
    if selection is None:
        return ""
    return (
        f"ACTIVE SELECTION: x={selection.x}, y={selection.y}, "
        f"width={selection.width}, height={selection.height}. "
        "ONLY draw within this area! "
    )


def build_prompt(user_request: str, canvas: Optional[CanvasInfo] = None) -> str:
    """
    Assemble the full prompt for one submission.

    Args:
        user_request: Text typed by the user (never truncated)
        canvas:       Optional canvas hints from the document host

    Returns:
        Prompt string ready to pass as RequestContext.prompt
    """
    selection = canvas.selection if canvas is not None else None
    palette = canvas.palette if canvas is not None else []

    return (
        CONTEXT_PREAMBLE
        + size_hint(canvas)
        + selection_hint(selection)
        + "\n\n"
        + LAYER_SAFETY
        + "CURRENT PALETTE (use ONLY these indices 0-F):\n"
        + build_palette_table(palette)
        + "\n\n"
        + DRAWING_GUIDE
        + "User Request: "
        + user_request
        + OUTPUT_REQUIREMENT
    )
