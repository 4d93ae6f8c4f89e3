# AI GOVERNANCE:
# Apply auditor-router
# This is a CODE change

"""
Macro Slot Manager
Owns the ordered slot identifiers, the active slot and rotation
"""

from __future__ import annotations
from typing import List, Sequence
import re

from .models import DynamicSlots, SlotValidationError

from slotmacro.utils.logger import log

SLOT_PATTERN = re.compile(r"[a-z]")


def validate_slots(identifiers: Sequence[str]) -> List[str]:
    """
    Validate slot identifiers

    Raises:
        SlotValidationError: not a list, empty, or identifier other than a-z
    """
    if not isinstance(identifiers, (list, tuple)):
        raise SlotValidationError(identifiers, "Slots must be a list of named registers (a-z).")
    slots = list(identifiers)
    if not slots:
        raise SlotValidationError("", "At least one macro slot is required.")
    for slot in slots:
        if not isinstance(slot, str) or not SLOT_PATTERN.fullmatch(slot):
            raise SlotValidationError(slot)
    return slots


class SlotManager:
    """
    Ordered ring of macro slots with one active slot.
    Rotating never touches the playback cursor; callers reset it.
    """

    def __init__(self, identifiers: Sequence[str] = ("a", "b"),
                 dynamic_slots: DynamicSlots = DynamicSlots.STATIC):
        self._slots: List[str] = []
        self._index = 0
        self._dynamic_slots = dynamic_slots
        self._first_run = True
        self.configure(identifiers, dynamic_slots)

    # ==================== PROPERTIES ====================

    @property
    def slots(self) -> List[str]:
        return list(self._slots)

    @property
    def active_index(self) -> int:
        return self._index

    @property
    def dynamic_slots(self) -> DynamicSlots:
        return self._dynamic_slots

    @property
    def first_run(self) -> bool:
        return self._first_run

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self):
        return iter(list(self._slots))

    # ==================== CONFIGURATION ====================

    def configure(self, identifiers: Sequence[str],
                  dynamic_slots: DynamicSlots = None):
        """
        Replace the slot list and reset the active slot to the first one.
        Nothing changes if validation fails.
        """
        slots = validate_slots(identifiers)

        self._slots = slots
        self._index = 0
        self._first_run = True
        if dynamic_slots is not None:
            self._dynamic_slots = dynamic_slots
        log(f"[SLOTS] Configured slots: {''.join(slots)} ({self._dynamic_slots.value})")

    # ==================== SELECTION ====================

    def current(self) -> str:
        return self._slots[self._index]

    def rotate(self) -> str:
        """Advance to the next slot (wraps around)"""
        self._index = (self._index + 1) % len(self._slots)
        return self.current()

    def rotate_back(self) -> str:
        """Step back to the previous slot (wraps around)"""
        self._index = (self._index - 1) % len(self._slots)
        return self.current()

    def rotate_if_dynamic(self, is_recording: bool) -> bool:
        """
        Advance when a new recording starts in rotate mode.
        The very first toggle after configuration never rotates.

        Returns:
            True if the active slot changed
        """
        rotated = False
        if (self._dynamic_slots == DynamicSlots.ROTATE
                and not self._first_run and not is_recording):
            self.rotate()
            rotated = True
            log(f"[SLOTS] Rotated to slot [{self.current()}]")
        self._first_run = False
        return rotated
