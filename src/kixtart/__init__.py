"""KiXtart script classifier and indenter."""

from __future__ import annotations

__version__ = "0.1.0"


def format(source: str, indent_offset: int = 4) -> str:
    """Reindent KiXtart source, *indent_offset* columns per level."""
    from kixtart.indent import reindent

    return reindent(source, indent_offset)
