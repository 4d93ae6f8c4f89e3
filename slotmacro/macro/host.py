# AI GOVERNANCE:
# Apply auditor-router
# This is a CODE change

"""
Editor Host Interfaces
Capabilities the macro controller needs from the host editor and from an
optional debugger, plus an in-memory host for embedding and tests
"""

from __future__ import annotations
from typing import Optional, List, Callable, Tuple, Dict, Any
from abc import ABC, abstractmethod

from . import keycodes

from slotmacro.utils.logger import log

# Host options touched by performance mode
OPT_LAZYREDRAW = "lazyredraw"
OPT_CLIPBOARD = "clipboard"
OPT_EVENTIGNORE = "eventignore"

# Clipboard targets
SYSTEM_CLIPBOARD = "+"
UNNAMED_REGISTER = '"'


# ==================== HOST INTERFACE ====================

class IEditorHost(ABC):
    """Abstract interface for the host editor (swappable implementation)"""

    # --- recording / playback status ---

    @abstractmethod
    def is_capturing(self) -> bool:
        """Check if the editor is recording into a register"""
        pass

    @abstractmethod
    def is_replaying(self) -> bool:
        """Check if the editor is executing a register"""
        pass

    @abstractmethod
    def begin_capture(self, slot: str):
        pass

    @abstractmethod
    def end_capture(self):
        pass

    @abstractmethod
    def replay_once(self, slot: str):
        """Execute the register once (blocks until done)"""
        pass

    @abstractmethod
    def replay_times(self, slot: str, count: int):
        """Execute the register count times (blocks until done)"""
        pass

    def get_count(self) -> int:
        """Count typed before the triggering key, 0 if none"""
        return 0

    # --- register storage ---

    @abstractmethod
    def get_slot_content(self, slot: str) -> str:
        pass

    @abstractmethod
    def set_slot_content(self, slot: str, content: str):
        pass

    # --- key encoding ---

    @abstractmethod
    def encode_keys(self, text: str) -> str:
        """Key notation -> raw register characters"""
        pass

    @abstractmethod
    def decode_keys(self, raw: str) -> str:
        """Raw register characters -> canonical key notation"""
        pass

    def normalize_encoding(self, raw: str) -> str:
        """Canonical raw form of register content"""
        return self.encode_keys(self.decode_keys(raw))

    # --- user interaction ---

    @abstractmethod
    def prompt_text_input(self, prompt: str, default: str,
                          on_submit: Callable[[Optional[str]], Any]):
        """
        Ask the user for text. on_submit receives the answer, None if the
        prompt was cancelled. It may run after this method returns.
        """
        pass

    @abstractmethod
    def notify(self, message: str, level: int, title: str = ""):
        pass

    @abstractmethod
    def copy_to_clipboard_target(self, target: str, text: str):
        pass

    # --- settings ---

    @abstractmethod
    def get_option(self, name: str) -> Any:
        pass

    @abstractmethod
    def set_option(self, name: str, value: Any):
        pass

    # --- integration ---

    @abstractmethod
    def set_keymap(self, lhs: str, callback: Callable[[], Any], description: str = ""):
        pass

    def defer(self, callback: Callable[[], Any], delay_ms: int):
        """Run callback later on the editor's event loop"""
        callback()


class IDebuggerBridge(ABC):
    """Optional debugger sharing the play / breakpoint keys"""

    @abstractmethod
    def has_breakpoints(self) -> bool:
        pass

    @abstractmethod
    def continue_execution(self):
        pass

    @abstractmethod
    def toggle_breakpoint(self):
        pass


# ==================== IN-MEMORY HOST ====================

class MemoryEditorHost(IEditorHost):
    """
    In-memory editor host.

    Registers live in a dict. Keys pressed with press() are captured while a
    recording is active (including the key that stops it) and then dispatched
    to the registered key binding, like a real editor does. Replays are
    appended to `replays` as (slot, content, count) and deferred callbacks wait
    in `deferred` until run_deferred(). Prompts are answered right away with
    `next_input`.
    """

    def __init__(self, options: Dict[str, Any] = None):
        self.registers: Dict[str, str] = {}
        self.options: Dict[str, Any] = {
            OPT_LAZYREDRAW: False,
            OPT_CLIPBOARD: ["unnamedplus"],
            OPT_EVENTIGNORE: [],
        }
        if options:
            self.options.update(options)

        self.keymaps: Dict[str, Tuple[Callable[[], Any], str]] = {}
        self.notifications: List[Tuple[str, int, str]] = []
        self.replays: List[Tuple[str, str, int]] = []
        self.prompts: List[Tuple[str, str]] = []
        self.deferred: List[Tuple[Callable[[], Any], int]] = []

        self.next_input: Optional[str] = None
        self.count = 0
        self.on_replay: Optional[Callable[[str, str, int], None]] = None

        self._recording: Optional[str] = None
        self._capture: List[str] = []
        self._executing: Optional[str] = None

    # ==================== RECORDING / PLAYBACK ====================

    def is_capturing(self) -> bool:
        return self._recording is not None

    def is_replaying(self) -> bool:
        return self._executing is not None

    @property
    def recording_slot(self) -> Optional[str]:
        return self._recording

    def begin_capture(self, slot: str):
        if self._recording is not None:
            return
        self._recording = slot
        self._capture = []
        log(f"[HOST] Capture started [{slot}]")

    def end_capture(self):
        if self._recording is None:
            return
        slot = self._recording
        self._recording = None
        self.registers[slot] = "".join(self._capture)
        self._capture = []
        log(f"[HOST] Capture ended [{slot}]")

    def replay_once(self, slot: str):
        self._replay(slot, 1)

    def replay_times(self, slot: str, count: int):
        self._replay(slot, count)

    def _replay(self, slot: str, count: int):
        content = self.registers.get(slot, "")
        self._executing = slot
        try:
            self.replays.append((slot, content, count))
            if self.on_replay:
                self.on_replay(slot, content, count)
        finally:
            self._executing = None

    def get_count(self) -> int:
        return self.count

    # ==================== INPUT ====================

    def type_keys(self, keys: str):
        """Type keys (notation) that have no binding"""
        if self._recording is not None:
            self._capture.append(self.encode_keys(keys))

    def press(self, lhs: str, count: int = 0):
        """Press a bound key sequence and run its callback"""
        self.type_keys(lhs)
        binding = self.keymaps.get(keycodes.normalize_keys(lhs))
        if binding is None:
            return None
        self.count = count
        try:
            return binding[0]()
        finally:
            self.count = 0

    def run_deferred(self):
        pending, self.deferred = self.deferred, []
        for callback, _delay in pending:
            callback()

    # ==================== REGISTERS ====================

    def get_slot_content(self, slot: str) -> str:
        return self.normalize_encoding(self.registers.get(slot, ""))

    def set_slot_content(self, slot: str, content: str):
        self.registers[slot] = content

    def encode_keys(self, text: str) -> str:
        return keycodes.encode_keys(text)

    def decode_keys(self, raw: str) -> str:
        return keycodes.decode_keys(raw)

    # ==================== USER INTERACTION ====================

    def prompt_text_input(self, prompt: str, default: str,
                          on_submit: Callable[[Optional[str]], Any]):
        self.prompts.append((prompt, default))
        response, self.next_input = self.next_input, None
        on_submit(response)

    def notify(self, message: str, level: int, title: str = ""):
        self.notifications.append((message, level, title))

    def copy_to_clipboard_target(self, target: str, text: str):
        self.registers[target] = text

    # ==================== SETTINGS ====================

    def get_option(self, name: str) -> Any:
        value = self.options.get(name)
        if isinstance(value, list):
            return list(value)
        return value

    def set_option(self, name: str, value: Any):
        self.options[name] = value

    # ==================== INTEGRATION ====================

    def set_keymap(self, lhs: str, callback: Callable[[], Any], description: str = ""):
        self.keymaps[keycodes.normalize_keys(lhs)] = (callback, description)

    def defer(self, callback: Callable[[], Any], delay_ms: int):
        self.deferred.append((callback, delay_ms))
