"""
Wraps extracted code into the script actually handed to the host.

Final script layout:
    app.transaction(function()
      drawHexGrid helper
      local palette = {...}
      local selX, selY, selW, selH = ...
      <generated code>
    end)

The transaction makes the whole generation a single undo step. Selection
bounds default to "no selection" (-1, -1, 999999, 999999), which
drawHexGrid treats as unclipped.
"""

from typing import Optional

from services.document import SelectionRect

NO_SELECTION = (-1, -1, 999999, 999999)

DRAW_HEX_GRID_HELPER = """function drawHexGrid(startX, startY, width, hexString, palette, selX, selY, selW, selH)
    local x = 0
    local y = 0
    selX = selX or -1
    selY = selY or -1
    selW = selW or 999999
    selH = selH or 999999
    for i = 1, #hexString do
        local char = hexString:sub(i, i)
        local colorIndex = tonumber(char, 16)
        if colorIndex and palette[colorIndex] then
            local px = startX + x
            local py = startY + y
            -- Check if pixel is within selection bounds
            if selX == -1 or (px >= selX and px < selX + selW and py >= selY and py < selY + selH) then
                app.activeImage:drawPixel(px, py, palette[colorIndex])
            end
        end
        x = x + 1
        if x >= width then
            x = 0
            y = y + 1
        end
    end
end

"""


def selection_bounds(selection: Optional[SelectionRect]) -> tuple:
    if selection is None:
        return NO_SELECTION
    return (selection.x, selection.y, selection.width, selection.height)


def wrap_script(code: str, palette_table: str = "{}", selection: Optional[SelectionRect] = None) -> str:
    """
    Build the final script for the host evaluator.

    Args:
        code:          Extracted code block body
        palette_table: Lua table literal from build_palette_table()
        selection:     Active selection, if any
    """
    sel_x, sel_y, sel_w, sel_h = selection_bounds(selection)
    helper = (
        DRAW_HEX_GRID_HELPER
        + "-- Current palette\n"
        + f"local palette = {palette_table}\n\n"
        + "-- Selection bounds (if any)\n"
        + f"local selX, selY, selW, selH = {sel_x}, {sel_y}, {sel_w}, {sel_h}\n\n"
    )
    return "app.transaction(function()\n" + helper + code + "\nend)"
