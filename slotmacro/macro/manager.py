# AI GOVERNANCE:
# Apply auditor-router
# This is a CODE change

"""
Macro Manager - High-level API for macro slot operations
Coordinates slots, recorder, player, key bindings and status line text
"""

from __future__ import annotations
from typing import Optional, List
import logging

from .models import (
    RecorderConfig, RecorderState, PlaybackResult, ControllerState,
    Importance, NotifyLevel, MacroError, ConfigError, EmptySlotError
)
from .config import build_config, ConfigSource
from .host import IEditorHost, IDebuggerBridge, OPT_CLIPBOARD, SYSTEM_CLIPBOARD, UNNAMED_REGISTER
from .slots import SlotManager
from .recorder import MacroRecorder
from .player import MacroPlayer
from .notifier import Notifier
from .processor import has_breakpoints, strip_breakpoints

from slotmacro.utils.logger import log, configure_logging

RECORD_ICON = "\uf03d "
DEBUGGER_ICON = "\uf188 /\uf03d "
SLOTS_ICON = "\U000f00fd "
SLOTS_PLAIN_PREFIX = "RECs "


class MacroManager:
    """
    High-level Macro Manager
    Entry point for every user action; turns macro errors into notifications
    """

    def __init__(self, host: IEditorHost, debugger: Optional[IDebuggerBridge] = None):
        """
        Initialize macro manager. Call setup() before using any action.

        Args:
            host: Editor host
            debugger: Optional debugger sharing the play / breakpoint keys
        """
        self._host = host
        self._debugger = debugger

        self._config: Optional[RecorderConfig] = None
        self._state = ControllerState()
        self._notifier = Notifier(host)

        # Components (created by setup)
        self._slots: Optional[SlotManager] = None
        self._recorder: Optional[MacroRecorder] = None
        self._player: Optional[MacroPlayer] = None
        self._breakpoint_key = ""

    # ==================== PROPERTIES ====================

    @property
    def config(self) -> Optional[RecorderConfig]:
        return self._config

    @property
    def slots(self) -> Optional[SlotManager]:
        return self._slots

    @property
    def recorder(self) -> Optional[MacroRecorder]:
        return self._recorder

    @property
    def player(self) -> Optional[MacroPlayer]:
        return self._player

    @property
    def current_slot(self) -> Optional[str]:
        if self._slots is None:
            return None
        return self._slots.current()

    @property
    def break_counter(self) -> int:
        return self._state.break_counter

    @property
    def breakpoint_key(self) -> str:
        return self._breakpoint_key

    @property
    def is_recording(self) -> bool:
        return self._host.is_capturing()

    @property
    def is_playing(self) -> bool:
        return self._host.is_replaying()

    @property
    def state(self) -> RecorderState:
        if self._host.is_capturing():
            return RecorderState.RECORDING
        if self._host.is_replaying():
            return RecorderState.PLAYING
        return RecorderState.IDLE

    # ==================== SETUP ====================

    def setup(self, config: ConfigSource = None) -> bool:
        """
        Validate configuration, build components and register key bindings

        Args:
            config: RecorderConfig, dict of overrides, or None for defaults

        Returns:
            True on success. On invalid configuration an error notification
            is shown and the previous setup (if any) stays untouched.
        """
        try:
            cfg = build_config(config)
        except ConfigError as e:
            self._notifier.report(e)
            return False

        logging_opts = cfg.logging
        configure_logging(
            debug_mode=logging_opts.debug_mode,
            enable_file_logging=logging_opts.enable_file_logging,
            enable_console_logging=logging_opts.enable_console_logging,
            log_dir=logging_opts.log_dir
        )

        state = ControllerState()
        notifier = Notifier(self._host, cfg.log_level, cfg.less_notifications)
        slots = SlotManager(cfg.slots, cfg.dynamic_slots)
        recorder = MacroRecorder(
            self._host, slots, state, notifier,
            trigger_key=cfg.mapping.start_stop_recording
        )
        breakpoint_key = self._host.decode_keys(self._host.encode_keys(cfg.mapping.add_breakpoint))
        player = MacroPlayer(
            self._host, slots, recorder, state, notifier,
            breakpoint_marker=breakpoint_key,
            perf=cfg.performance_opts,
            debugger=self._debugger,
            dap_shared_keymaps=cfg.dap_shared_keymaps
        )

        self._config = cfg
        self._state = state
        self._notifier = notifier
        self._slots = slots
        self._recorder = recorder
        self._player = player
        self._breakpoint_key = breakpoint_key

        if cfg.clear:
            self.delete_all_macros(silent=True)

        self._register_keymaps()
        log(f"[MANAGER] Setup complete: slots={''.join(cfg.slots)}, breakpoint={breakpoint_key}")
        return True

    def _ready(self) -> bool:
        if self._config is None:
            log("[MANAGER] Not set up, call setup() first", logging.WARNING)
            return False
        return True

    def _register_keymaps(self):
        """Bind every action to its configured key"""
        cfg = self._config
        mapping = cfg.mapping
        icon = RECORD_ICON if cfg.use_nerdfont_icons else ""
        debugger_icon = DEBUGGER_ICON if cfg.use_nerdfont_icons else ""

        self._host.set_keymap(mapping.start_stop_recording, self.toggle_recording,
                              icon + "Start/Stop Recording")
        self._host.set_keymap(mapping.switch_slot, self.switch_slot, icon + "Switch Macro Slot")
        self._host.set_keymap(mapping.edit_macro, self.edit_macro, icon + "Edit Macro")
        self._host.set_keymap(mapping.yank_macro, self.yank_macro, icon + "Yank Macro")
        self._host.set_keymap(mapping.delete_all_macros, self.delete_all_macros,
                              icon + "Delete All Macros")

        # with dap_shared_keymaps the breakpoint key toggles debugger breakpoints
        # outside recordings, and the play key continues the debugger while
        # debugger breakpoints exist
        if cfg.dap_shared_keymaps:
            breakpoint_desc = debugger_icon + "Breakpoint"
            play_desc = debugger_icon + "Continue/Play"
        else:
            breakpoint_desc = icon + "Insert Macro Breakpoint."
            play_desc = icon + "Play Macro"
        self._host.set_keymap(self._breakpoint_key, self.add_breakpoint, breakpoint_desc)
        self._host.set_keymap(mapping.play_macro, self._play_with_count, play_desc)

    # ==================== RECORDING ====================

    def toggle_recording(self) -> Optional[str]:
        """
        Start recording into the current slot, or stop the running recording

        Returns:
            Decoded recording when one was committed
        """
        if not self._ready():
            return None
        try:
            return self._recorder.toggle()
        except MacroError as e:
            self._notifier.report(e)
            return None

    # ==================== PLAYBACK ====================

    def play(self, count: Optional[int] = None) -> Optional[PlaybackResult]:
        """
        Play the current slot

        Args:
            count: Explicit repeat count (bypasses breakpoints)
        """
        if not self._ready():
            return None
        try:
            return self._player.play(count)
        except MacroError as e:
            self._notifier.report(e)
            return None
        except Exception as e:
            log(f"[MANAGER] Playback error: {e}", logging.ERROR)
            raise

    def _play_with_count(self) -> Optional[PlaybackResult]:
        return self.play(self._host.get_count() or None)

    # ==================== SLOT OPERATIONS ====================

    def switch_slot(self) -> Optional[str]:
        """Make the next slot active"""
        if not self._ready():
            return None
        slot = self._slots.rotate()
        self._state.reset_cursor()

        current = self._decoded(slot)
        msg = f" Now using macro slot [{slot}]"
        if current != "":
            msg += f".\n{current}"
        else:
            msg += "\n(empty)"
        self._notifier.notify(msg, Importance.NONESSENTIAL)
        log(f"[MANAGER] Switched to slot [{slot}]")
        return slot

    def edit_macro(self) -> Optional[str]:
        """
        Let the user edit the current slot as key notation

        Returns:
            Edited text when the host answered the prompt right away,
            None if it was cancelled or is still open
        """
        if not self._ready():
            return None
        self._state.reset_cursor()
        slot = self._slots.current()

        result: List[Optional[str]] = []
        self._host.prompt_text_input(
            f"Edit Macro [{slot}]:", self._decoded(slot),
            lambda edited: result.append(self._apply_edit(slot, edited))
        )
        return result[0] if result else None

    def _apply_edit(self, slot: str, edited: Optional[str]) -> Optional[str]:
        if edited is None:
            log(f"[MANAGER] Edit of slot [{slot}] cancelled")
            return None

        self._state.reset_cursor()
        self._host.set_slot_content(slot, self._host.encode_keys(edited))
        self._notifier.notify(f"Edited Macro [{slot}]:\n{edited}", Importance.NONESSENTIAL)
        log(f"[MANAGER] Edited slot [{slot}]")
        return edited

    def yank_macro(self) -> Optional[str]:
        """
        Copy the current slot (key notation, breakpoints removed) to the
        clipboard or the unnamed register

        Returns:
            Copied text
        """
        if not self._ready():
            return None
        self._state.reset_cursor()
        slot = self._slots.current()

        try:
            content = self._decoded(slot)
            if content == "":
                raise EmptySlotError(slot, f"Nothing to copy, macro slot [{slot}] is still empty.")
        except MacroError as e:
            self._notifier.report(e)
            return None

        content = strip_breakpoints(content, self._breakpoint_key)
        target = self._clipboard_target()
        self._host.copy_to_clipboard_target(target, content)
        self._notifier.notify(f"Copied Macro [{slot}]:\n{content}", Importance.NONESSENTIAL)
        log(f"[MANAGER] Yanked slot [{slot}] to register {target}")
        return content

    def _clipboard_target(self) -> str:
        clipboard = self._host.get_option(OPT_CLIPBOARD) or []
        if isinstance(clipboard, str):
            clipboard = [part for part in clipboard.split(",") if part]
        if clipboard and "unnamed" in clipboard[0]:
            return SYSTEM_CLIPBOARD
        return UNNAMED_REGISTER

    def delete_all_macros(self, silent: bool = False):
        """Clear every configured slot"""
        if not self._ready():
            return
        self._state.reset_cursor()
        for slot in self._slots:
            self._host.set_slot_content(slot, "")
        log("[MANAGER] All macros deleted")
        if not silent:
            self._notifier.notify("All macros deleted.", Importance.NONESSENTIAL)

    def add_breakpoint(self) -> bool:
        """
        Handle the breakpoint key.
        While recording the key itself lands in the capture and becomes the
        breakpoint; here only the user is told about it.

        Returns:
            True if a breakpoint was added (macro or debugger)
        """
        if not self._ready():
            return False

        if self._host.is_capturing():
            self._notifier.notify("Macro breakpoint added.", Importance.ESSENTIAL)
            return True

        # replaying: the marker keys are part of the macro being executed
        if self._host.is_replaying():
            return False

        if not self._config.dap_shared_keymaps:
            self._notifier.notify("Cannot insert breakpoint outside of a recording.",
                                  Importance.ESSENTIAL, NotifyLevel.WARN)
            return False

        if self._debugger is None:
            log("[MANAGER] dap_shared_keymaps is on but no debugger is attached", logging.WARNING)
            return False

        self._debugger.toggle_breakpoint()
        return True

    def _decoded(self, slot: str) -> str:
        return self._host.decode_keys(self._host.get_slot_content(slot))

    # ==================== STATUS LINE ====================

    def recording_status_text(self) -> str:
        """Status line component: recording indicator, empty when idle"""
        if self._config is None or not self._host.is_capturing():
            return ""
        icon = RECORD_ICON if self._config.use_nerdfont_icons else ""
        slot = self._host_recording_slot()
        return f"{icon}Recording… [{slot}]"

    def _host_recording_slot(self) -> str:
        session = self._recorder.session
        if session is not None:
            return session.target_slot
        return self._slots.current()

    def slots_overview_text(self) -> str:
        """
        Status line component listing non-empty slots.
        The active slot is bracketed, "!" marks slots with breakpoints,
        an empty active slot shows as "[ ]". Empty while recording.
        """
        if self._config is None or self._host.is_capturing():
            return ""

        active_slot = self._slots.current()
        out: List[str] = []
        for slot in self._slots:
            content = self._decoded(slot)
            empty = content == ""
            active = slot == active_slot
            bp_icon = "!" if has_breakpoints(content, self._breakpoint_key) else ""

            if empty and active:
                out.append("[ ]")
            elif not empty and active:
                out.append(f"[{slot}{bp_icon}]")
            elif not empty:
                out.append(f"{slot}{bp_icon}")

        output = "".join(out)
        if output in ("", "[ ]"):
            return ""
        prefix = SLOTS_ICON if self._config.use_nerdfont_icons else SLOTS_PLAIN_PREFIX
        return prefix + output
