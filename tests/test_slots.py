"""
Test macro slot manager
Validation, cyclic rotation and dynamic rotate mode
"""

import pytest
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from slotmacro.macro.slots import SlotManager, validate_slots
from slotmacro.macro.models import DynamicSlots, SlotValidationError, ConfigError


class TestSlotValidation:
    """Slot identifier validation"""

    def test_valid_slots(self):
        """TC-SLOTS-001: single lowercase letters are accepted"""
        assert validate_slots(["a", "b", "z"]) == ["a", "b", "z"]
        assert validate_slots(("q",)) == ["q"]

    @pytest.mark.parametrize("bad", ["A", "1", "ab", "", "+", "a\n", " a"])
    def test_invalid_slot_rejected(self, bad):
        """TC-SLOTS-002: anything but a-z fails"""
        with pytest.raises(SlotValidationError) as exc:
            validate_slots(["a", bad])
        assert exc.value.slot == bad

    def test_empty_sequence_rejected(self):
        """TC-SLOTS-003: at least one slot is required"""
        with pytest.raises(SlotValidationError):
            validate_slots([])

    @pytest.mark.parametrize("bad", ["ab", None, {"a": 1}])
    def test_non_list_rejected(self, bad):
        """TC-SLOTS-009: slots must come as a list or tuple"""
        with pytest.raises(SlotValidationError):
            validate_slots(bad)

    def test_validation_error_is_config_error(self):
        """TC-SLOTS-004: slot errors are configuration errors"""
        with pytest.raises(ConfigError):
            validate_slots(["AB"])
        with pytest.raises(ValueError):
            validate_slots(["AB"])

    def test_failed_configure_keeps_state(self):
        """TC-SLOTS-005: invalid configure leaves slots untouched"""
        manager = SlotManager(["a", "b", "c"])
        manager.rotate()

        with pytest.raises(SlotValidationError):
            manager.configure(["x", "Y"])

        assert manager.slots == ["a", "b", "c"]
        assert manager.current() == "b"


class TestSlotRotation:
    """Selection and rotation"""

    @pytest.fixture
    def slots(self):
        return SlotManager(["a", "b", "c"])

    def test_current_is_first_slot(self, slots):
        """TC-SLOTS-010: configure selects the first slot"""
        assert slots.current() == "a"
        assert slots.active_index == 0

    def test_rotate_advances(self, slots):
        """TC-SLOTS-011: rotate returns the new current slot"""
        assert slots.rotate() == "b"
        assert slots.rotate() == "c"
        assert slots.current() == "c"

    def test_rotate_wraps(self, slots):
        """TC-SLOTS-012: rotating len(slots) times returns to the start"""
        start = slots.current()
        for _ in range(len(slots)):
            slots.rotate()
        assert slots.current() == start

    def test_rotate_back_wraps(self, slots):
        """TC-SLOTS-013: stepping back from the first slot wraps to the last"""
        assert slots.rotate_back() == "c"
        assert slots.rotate_back() == "b"

    def test_single_slot_rotation(self):
        """TC-SLOTS-014: one slot always stays current"""
        slots = SlotManager(["m"])
        assert slots.rotate() == "m"
        assert slots.rotate_back() == "m"

    def test_configure_resets_index(self, slots):
        """TC-SLOTS-015: reconfiguring selects the first slot again"""
        slots.rotate()
        slots.configure(["x", "y"])
        assert slots.current() == "x"

    def test_iteration_order(self, slots):
        """TC-SLOTS-016: iteration follows configuration order"""
        assert list(slots) == ["a", "b", "c"]
        assert len(slots) == 3


class TestDynamicRotation:
    """rotate_if_dynamic in static and rotate modes"""

    def test_static_never_rotates(self):
        """TC-SLOTS-020: static mode keeps the active slot"""
        slots = SlotManager(["a", "b"], DynamicSlots.STATIC)
        for _ in range(4):
            assert slots.rotate_if_dynamic(is_recording=False) is False
        assert slots.current() == "a"

    def test_first_toggle_does_not_rotate(self):
        """TC-SLOTS-021: the first recording after setup uses the first slot"""
        slots = SlotManager(["a", "b"], DynamicSlots.ROTATE)
        assert slots.first_run is True
        assert slots.rotate_if_dynamic(is_recording=False) is False
        assert slots.current() == "a"
        assert slots.first_run is False

    def test_later_starts_rotate(self):
        """TC-SLOTS-022: each new recording moves to the next slot"""
        slots = SlotManager(["a", "b", "c"], DynamicSlots.ROTATE)
        slots.rotate_if_dynamic(is_recording=False)   # start 1
        slots.rotate_if_dynamic(is_recording=True)    # stop 1
        assert slots.current() == "a"

        assert slots.rotate_if_dynamic(is_recording=False) is True  # start 2
        assert slots.current() == "b"
        assert slots.rotate_if_dynamic(is_recording=True) is False  # stop 2
        assert slots.current() == "b"

    def test_configure_rearms_first_run(self):
        """TC-SLOTS-023: reconfiguring suppresses rotation once more"""
        slots = SlotManager(["a", "b"], DynamicSlots.ROTATE)
        slots.rotate_if_dynamic(is_recording=False)
        slots.configure(["a", "b"])
        assert slots.rotate_if_dynamic(is_recording=False) is False
        assert slots.current() == "a"


if __name__ == "__main__":
    # Run with: python -m pytest tests/test_slots.py -v
    pytest.main([__file__, "-v", "-s"])
