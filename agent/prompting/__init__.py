"""
Prompt Builder layer for the autopaint agent.

Exports the prompt assembler and the script wrapper.
"""

from .prompt_builder import build_palette_table, build_prompt
from .script_wrapper import wrap_script

__all__ = ["build_palette_table", "build_prompt", "wrap_script"]
