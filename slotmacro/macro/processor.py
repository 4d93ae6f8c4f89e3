# AI GOVERNANCE:
# Apply auditor-router
# This is a CODE change

"""
Macro Content Processor
Pure string operations on macro content: breakpoint segmentation,
breakpoint removal and trigger-key stripping. No host access.
"""

from __future__ import annotations
from typing import List


def has_breakpoints(content: str, marker: str) -> bool:
    """Check if decoded macro content contains at least one breakpoint marker"""
    return bool(marker) and marker in content


def split_breakpoints(content: str, marker: str) -> List[str]:
    """
    Split decoded macro content into ordered segments

    Args:
        content: Decoded macro content
        marker: Breakpoint marker (decoded notation)

    Returns:
        Segments in playback order. Empty segments are kept, so a marker at
        the very end yields a trailing "" segment.
    """
    if not marker:
        return [content]
    return content.split(marker)


def strip_breakpoints(content: str, marker: str) -> str:
    """Remove every breakpoint marker (used when copying a macro)"""
    if not marker:
        return content
    return content.replace(marker, "")


def strip_trigger(captured: str, trigger_length: int) -> str:
    """
    Remove the key that stopped the recording from the end of a capture

    The editor records the stop key before the stop handler runs, so the
    last trigger_length characters always belong to it.
    """
    if trigger_length <= 0:
        return captured
    return captured[:-trigger_length]
