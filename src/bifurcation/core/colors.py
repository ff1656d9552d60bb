from __future__ import annotations

from typing import Optional

from .types import ColorTag


def colors_match(box_color: Optional[ColorTag], target_color: Optional[ColorTag]) -> bool:
    """Return True if a box of ``box_color`` satisfies a target of ``target_color``.

    Missing colors read as neutral. Inactive on either side never matches,
    neutral on either side matches everything else, otherwise tags must be equal.
    """
    box = ColorTag(box_color) if box_color is not None else ColorTag.NEUTRAL
    target = ColorTag(target_color) if target_color is not None else ColorTag.NEUTRAL

    if box is ColorTag.INACTIVE or target is ColorTag.INACTIVE:
        return False
    if box is ColorTag.NEUTRAL or target is ColorTag.NEUTRAL:
        return True
    return box is target


__all__ = ["colors_match"]
