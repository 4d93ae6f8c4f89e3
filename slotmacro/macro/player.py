# AI GOVERNANCE:
# Apply auditor-router
# This is a CODE change

"""
Macro Playback Engine
Plays the current slot through the host editor, one breakpoint segment per
call when the macro contains breakpoints, with optional performance mode
for large repeat counts
"""

from __future__ import annotations
from typing import Optional, Callable, Dict, Any
from contextlib import contextmanager
import logging

from .models import (
    PlaybackResult, PerformanceOptions, ControllerState, Importance,
    RecursivePlaybackError, EmptySlotError
)
from .host import (
    IEditorHost, IDebuggerBridge, OPT_LAZYREDRAW, OPT_CLIPBOARD, OPT_EVENTIGNORE
)
from .slots import SlotManager
from .recorder import MacroRecorder
from .notifier import Notifier
from .processor import has_breakpoints, split_breakpoints

from slotmacro.utils.logger import log

LAZYREDRAW_HINT = (
    "\nThe editor might appear to freeze due to lazy redrawing. "
    "\nThis is to be expected and not a bug."
)


# ==================== PERFORMANCE MODE ====================

@contextmanager
def performance_mode(host: IEditorHost, opts: PerformanceOptions):
    """
    Relax redraw, clipboard sync and change events for the duration of the
    block. Saved values are restored even if the block raises.
    """
    overrides = []
    if opts.lazyredraw:
        overrides.append((OPT_LAZYREDRAW, True))
    if opts.no_system_clipboard:
        overrides.append((OPT_CLIPBOARD, []))
    overrides.append((OPT_EVENTIGNORE, list(opts.autocmd_events_ignore)))

    original: Dict[str, Any] = {}
    try:
        for name, value in overrides:
            original[name] = host.get_option(name)
            host.set_option(name, value)
        yield
    finally:
        for name, value in reversed(list(original.items())):
            host.set_option(name, value)


# ==================== PLAYBACK ENGINE ====================

class MacroPlayer:
    """
    Macro Playback Engine
    Resolves the current slot, applies the guard clauses and replays it
    """

    def __init__(self, host: IEditorHost, slots: SlotManager, recorder: MacroRecorder,
                 state: ControllerState, notifier: Notifier,
                 breakpoint_marker: str = "##",
                 perf: PerformanceOptions = None,
                 debugger: Optional[IDebuggerBridge] = None,
                 dap_shared_keymaps: bool = False):
        self._host = host
        self._slots = slots
        self._recorder = recorder
        self._state = state
        self._notifier = notifier
        self._marker = breakpoint_marker
        self._perf = perf or PerformanceOptions()
        self._debugger = debugger
        self._dap_shared_keymaps = dap_shared_keymaps

        # Callbacks
        self._on_segment: Optional[Callable[[int, int], None]] = None

    # ==================== PROPERTIES ====================

    @property
    def break_counter(self) -> int:
        return self._state.break_counter

    @property
    def breakpoint_marker(self) -> str:
        return self._marker

    @property
    def is_playing(self) -> bool:
        return self._host.is_replaying()

    def set_callbacks(self, on_segment: Callable[[int, int], None] = None):
        """on_segment(segment_number, segment_count) fires after each segment"""
        self._on_segment = on_segment

    # ==================== PLAYBACK ====================

    def play(self, count: Optional[int] = None) -> PlaybackResult:
        """
        Play the macro in the current slot

        Args:
            count: Explicit repeat count. Any positive count (even 1)
                   bypasses breakpoints and replays the whole macro. Zero or
                   negative counts are treated as no count.

        Raises:
            RecursivePlaybackError: called while recording (recording is
                ended and the slot cleared)
            EmptySlotError: current slot is empty
        """
        slot = self._slots.current()

        # Guard 1: debugger breakpoints take over the play key
        if self._dap_shared_keymaps and self._debugger is not None:
            if self._debugger.has_breakpoints():
                log("[PLAYER] Debugger breakpoints present, continuing debugger")
                self._debugger.continue_execution()
                return PlaybackResult.DEBUGGER_CONTINUE

        # Guard 2: playing while recording would record the replay itself
        if self._host.is_capturing():
            self._recorder.cancel()
            self._host.set_slot_content(slot, "")
            raise RecursivePlaybackError(slot)

        # Guard 3: nothing to play
        macro = self._host.get_slot_content(slot)
        if macro == "":
            raise EmptySlotError(slot)

        if count is not None and count < 0:
            log(f"[PLAYER] Ignoring negative count {count}", logging.WARNING)
        count_given = count is not None and count > 0
        times = count if count_given else 1
        decoded = self._host.decode_keys(macro)

        if has_breakpoints(decoded, self._marker) and not count_given:
            return self._play_segment(slot, macro, decoded)

        if times >= self._perf.count_threshold:
            return self._play_optimized(slot, times)

        log(f"[PLAYER] Playing [{slot}] x{times}")
        self._host.replay_times(slot, times)
        return PlaybackResult.PLAYED

    def _play_segment(self, slot: str, macro: str, decoded: str) -> PlaybackResult:
        """Play the next breakpoint segment, then put the full macro back"""
        segments = [self._host.encode_keys(part)
                    for part in split_breakpoints(decoded, self._marker)]

        # content may have shrunk since the last segment was played
        if self._state.break_counter >= len(segments):
            self._state.reset_cursor()
        self._state.break_counter += 1
        number = self._state.break_counter

        log(f"[PLAYER] Playing [{slot}] segment {number}/{len(segments)}")
        self._host.set_slot_content(slot, segments[number - 1])
        try:
            self._host.replay_once(slot)
        finally:
            self._host.set_slot_content(slot, macro)

        if self._on_segment:
            self._on_segment(number, len(segments))

        if number != len(segments):
            self._notifier.notify(f"Reached Breakpoint #{number}", Importance.ESSENTIAL)
            return PlaybackResult.BREAKPOINT

        self._notifier.notify("Reached end of macro", Importance.ESSENTIAL)
        self._state.reset_cursor()
        return PlaybackResult.END

    def _play_optimized(self, slot: str, times: int) -> PlaybackResult:
        """Replay with performance mode, after the notification had time to show"""
        msg = "Running macro with performance optimizations…"
        if self._perf.lazyredraw:
            msg += LAZYREDRAW_HINT
        self._notifier.notify(msg, Importance.NONESSENTIAL)

        def run():
            with performance_mode(self._host, self._perf):
                log(f"[PLAYER] Playing [{slot}] x{times} (performance mode)")
                self._host.replay_times(slot, times)

        if self._perf.defer_ms > 0:
            self._host.defer(run, self._perf.defer_ms)
            return PlaybackResult.DEFERRED

        run()
        return PlaybackResult.PLAYED
