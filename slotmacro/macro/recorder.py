# AI GOVERNANCE:
# Apply auditor-router
# This is a CODE change

"""
Macro Recorder
Opens and closes recording sessions on the host editor, strips the stop
key from the captured register and rolls back cancelled recordings
"""

from __future__ import annotations
from typing import Optional, Callable

from .models import (
    RecorderState, RecordingSession, ControllerState, Importance, RecordingAborted
)
from .host import IEditorHost
from .slots import SlotManager
from .notifier import Notifier
from .processor import strip_trigger

from slotmacro.utils.logger import log


class MacroRecorder:
    """
    Recording state machine: IDLE <-> RECORDING.
    The host owns the capture; this class owns the session around it.
    """

    def __init__(self, host: IEditorHost, slots: SlotManager, state: ControllerState,
                 notifier: Notifier, trigger_key: str = "q"):
        """
        Initialize recorder

        Args:
            host: Editor host doing the actual capture
            slots: Slot manager resolving the target register
            state: Shared controller state (playback cursor)
            notifier: Notification sink
            trigger_key: Key bound to start/stop, stripped from every capture
        """
        self._host = host
        self._slots = slots
        self._state = state
        self._notifier = notifier
        self._trigger_key = trigger_key
        self._session: Optional[RecordingSession] = None

        # Callbacks
        self._on_state_change: Optional[Callable[[RecorderState], None]] = None

    # ==================== PROPERTIES ====================

    @property
    def state(self) -> RecorderState:
        if self._host.is_capturing():
            return RecorderState.RECORDING
        return RecorderState.IDLE

    @property
    def is_recording(self) -> bool:
        return self._host.is_capturing()

    @property
    def session(self) -> Optional[RecordingSession]:
        return self._session

    @property
    def trigger_length(self) -> int:
        """Length of the stop key as stored in a register"""
        return len(self._host.encode_keys(self._trigger_key))

    def set_callbacks(self, on_state_change: Callable[[RecorderState], None] = None):
        self._on_state_change = on_state_change

    def _set_state(self, state: RecorderState):
        if self._on_state_change:
            self._on_state_change(state)

    # ==================== RECORDING ====================

    def toggle(self) -> Optional[str]:
        """
        Start a recording, or stop the running one

        Returns:
            Decoded content when a recording was committed, else None

        Raises:
            RecordingAborted: stop produced an empty recording
        """
        capturing = self._host.is_capturing()
        rotated = self._slots.rotate_if_dynamic(capturing)

        if not capturing:
            self.start(rotated=rotated)
            return None
        return self.stop()

    def start(self, rotated: bool = False) -> RecordingSession:
        """Begin capturing into the current slot"""
        if self._host.is_capturing():
            log("[RECORDER] Already recording")
            return self._session

        slot = self._slots.current()
        self._session = RecordingSession(
            target_slot=slot,
            prior_content=self._host.get_slot_content(slot),
            rotated=rotated
        )
        self._state.reset_cursor()
        self._host.begin_capture(slot)

        log(f"[RECORDER] Recording started [{slot}]")
        self._notifier.notify(f"Recording to [{slot}]…", Importance.ESSENTIAL)
        self._set_state(RecorderState.RECORDING)
        return self._session

    def stop(self) -> str:
        """
        End the capture and commit the recording

        Returns:
            Decoded recording

        Raises:
            RecordingAborted: nothing left after stripping the stop key;
                the previous content is restored
        """
        session = self._session
        if session is None:
            # capture was started outside of this recorder
            slot = self._slots.current()
            session = RecordingSession(target_slot=slot,
                                       prior_content=self._host.get_slot_content(slot))
        slot = session.target_slot
        self._session = None

        self._host.end_capture()
        self._set_state(RecorderState.IDLE)

        recording = strip_trigger(self._host.get_slot_content(slot), self.trigger_length)
        self._host.set_slot_content(slot, recording)

        just_recorded = self._host.decode_keys(self._host.get_slot_content(slot))
        if just_recorded == "":
            if session.rotated:
                self._slots.rotate_back()
            self._host.set_slot_content(slot, session.prior_content)
            log(f"[RECORDER] Recording aborted [{slot}]")
            raise RecordingAborted(slot)

        log(f"[RECORDER] Recorded [{slot}]: {just_recorded}")
        self._notifier.notify(f"Recorded [{slot}]:\n{just_recorded}", Importance.NONESSENTIAL)
        return just_recorded

    def cancel(self):
        """End a capture without committing anything (content left as the host wrote it)"""
        self._session = None
        if self._host.is_capturing():
            self._host.end_capture()
            log("[RECORDER] Recording cancelled")
            self._set_state(RecorderState.IDLE)
