"""Line reconstruction from positioned PDF text fragments.

A PDF text layer emits runs of glyphs with page coordinates but no line
structure. Fragments sharing a floored vertical coordinate form one line;
lines are read top to bottom (bottom-origin coordinates, so higher ``y``
first) and fragments within a line left to right.
"""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Iterable

from .models import TextFragment


def reconstruct_page(fragments: Iterable[TextFragment]) -> list[str]:
    """Return the text lines of a single page in reading order."""

    rows: dict[int, list[TextFragment]] = defaultdict(list)
    for frag in fragments:
        # Floor absorbs sub-point jitter between glyph runs on the same row.
        rows[math.floor(frag.y)].append(frag)

    lines: list[str] = []
    for y in sorted(rows, reverse=True):
        row = sorted(rows[y], key=lambda f: f.x)
        lines.append(" ".join(f.text for f in row))
    return lines


def reconstruct_lines(pages: Iterable[Iterable[TextFragment]]) -> list[str]:
    """Reconstruct lines for every page, separating pages with a blank line.

    An empty fragment stream yields an empty list.
    """

    lines: list[str] = []
    for page in pages:
        lines.extend(reconstruct_page(page))
        lines.append("")
    if lines and not any(lines):
        return []
    return lines


def lines_to_text(lines: Iterable[str]) -> str:
    return "\n".join(lines)


__all__ = ["lines_to_text", "reconstruct_lines", "reconstruct_page"]
