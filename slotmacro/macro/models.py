# AI GOVERNANCE:
# Apply auditor-router
# This is a CODE change

"""
Macro Slot Data Models
Defines enums, configuration structures, controller state and errors
shared by the slot manager, recorder, player and manager
"""

from enum import Enum, IntEnum
from typing import List, Optional
from dataclasses import dataclass, field


# ==================== ENUMS ====================

class DynamicSlots(Enum):
    STATIC = "static"
    ROTATE = "rotate"


class NotifyLevel(IntEnum):
    """Notification severity, numbered like the editor's log levels"""
    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4


class Importance(Enum):
    ESSENTIAL = "essential"
    NONESSENTIAL = "nonessential"


class RecorderState(Enum):
    IDLE = "idle"
    RECORDING = "recording"
    PLAYING = "playing"


class PlaybackResult(Enum):
    PLAYED = "played"
    BREAKPOINT = "breakpoint"
    END = "end"
    DEFERRED = "deferred"
    DEBUGGER_CONTINUE = "debugger_continue"


# ==================== KEY MAPPING ====================

@dataclass
class KeyMapping:
    """Trigger keys for every user-facing action"""
    start_stop_recording: str = "q"
    play_macro: str = "Q"
    switch_slot: str = "<C-q>"
    edit_macro: str = "cq"
    delete_all_macros: str = "dq"
    yank_macro: str = "yq"
    add_breakpoint: str = "##"

    def to_dict(self) -> dict:
        return {
            "start_stop_recording": self.start_stop_recording,
            "play_macro": self.play_macro,
            "switch_slot": self.switch_slot,
            "edit_macro": self.edit_macro,
            "delete_all_macros": self.delete_all_macros,
            "yank_macro": self.yank_macro,
            "add_breakpoint": self.add_breakpoint
        }

    @staticmethod
    def from_dict(data: dict) -> 'KeyMapping':
        return KeyMapping(
            start_stop_recording=data.get("start_stop_recording", "q"),
            play_macro=data.get("play_macro", "Q"),
            switch_slot=data.get("switch_slot", "<C-q>"),
            edit_macro=data.get("edit_macro", "cq"),
            delete_all_macros=data.get("delete_all_macros", "dq"),
            yank_macro=data.get("yank_macro", "yq"),
            add_breakpoint=data.get("add_breakpoint", "##")
        )


# ==================== PERFORMANCE OPTIONS ====================

DEFAULT_IGNORED_EVENTS = [
    "TextChangedI", "TextChanged", "InsertLeave", "InsertEnter", "InsertCharPre"
]


@dataclass
class PerformanceOptions:
    """Settings relaxed while replaying a macro with a large count"""
    count_threshold: int = 100
    lazyredraw: bool = True
    no_system_clipboard: bool = True
    autocmd_events_ignore: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORED_EVENTS))
    defer_ms: int = 500  # lets the notification render before the blocking replay

    def to_dict(self) -> dict:
        return {
            "count_threshold": self.count_threshold,
            "lazyredraw": self.lazyredraw,
            "no_system_clipboard": self.no_system_clipboard,
            "autocmd_events_ignore": list(self.autocmd_events_ignore),
            "defer_ms": self.defer_ms
        }

    @staticmethod
    def from_dict(data: dict) -> 'PerformanceOptions':
        return PerformanceOptions(
            count_threshold=data.get("count_threshold", 100),
            lazyredraw=data.get("lazyredraw", True),
            no_system_clipboard=data.get("no_system_clipboard", True),
            autocmd_events_ignore=list(data.get("autocmd_events_ignore", DEFAULT_IGNORED_EVENTS)),
            defer_ms=data.get("defer_ms", 500)
        )


# ==================== LOGGING OPTIONS ====================

@dataclass
class LoggingOptions:
    debug_mode: bool = True
    enable_file_logging: bool = False
    enable_console_logging: bool = True
    log_dir: str = "logs"

    def to_dict(self) -> dict:
        return {
            "debug_mode": self.debug_mode,
            "enable_file_logging": self.enable_file_logging,
            "enable_console_logging": self.enable_console_logging,
            "log_dir": self.log_dir
        }

    @staticmethod
    def from_dict(data: dict) -> 'LoggingOptions':
        return LoggingOptions(
            debug_mode=data.get("debug_mode", True),
            enable_file_logging=data.get("enable_file_logging", False),
            enable_console_logging=data.get("enable_console_logging", True),
            log_dir=data.get("log_dir", "logs")
        )


# ==================== RECORDER CONFIG ====================

@dataclass
class RecorderConfig:
    """Complete configuration, validated once at setup"""
    slots: List[str] = field(default_factory=lambda: ["a", "b"])
    dynamic_slots: DynamicSlots = DynamicSlots.STATIC
    clear: bool = False
    mapping: KeyMapping = field(default_factory=KeyMapping)
    dap_shared_keymaps: bool = False
    log_level: NotifyLevel = NotifyLevel.INFO
    less_notifications: bool = False
    use_nerdfont_icons: bool = True
    performance_opts: PerformanceOptions = field(default_factory=PerformanceOptions)
    logging: LoggingOptions = field(default_factory=LoggingOptions)

    def to_dict(self) -> dict:
        return {
            "slots": list(self.slots),
            "dynamic_slots": self.dynamic_slots.value,
            "clear": self.clear,
            "mapping": self.mapping.to_dict(),
            "dap_shared_keymaps": self.dap_shared_keymaps,
            "log_level": int(self.log_level),
            "less_notifications": self.less_notifications,
            "use_nerdfont_icons": self.use_nerdfont_icons,
            "performance_opts": self.performance_opts.to_dict(),
            "logging": self.logging.to_dict()
        }

    @staticmethod
    def from_dict(data: dict) -> 'RecorderConfig':
        return RecorderConfig(
            slots=list(data.get("slots", ["a", "b"])),
            dynamic_slots=DynamicSlots(data.get("dynamic_slots", "static")),
            clear=data.get("clear", False),
            mapping=KeyMapping.from_dict(data.get("mapping", {})),
            dap_shared_keymaps=data.get("dap_shared_keymaps", False),
            log_level=NotifyLevel(data.get("log_level", NotifyLevel.INFO)),
            less_notifications=data.get("less_notifications", False),
            use_nerdfont_icons=data.get("use_nerdfont_icons", True),
            performance_opts=PerformanceOptions.from_dict(data.get("performance_opts", {})),
            logging=LoggingOptions.from_dict(data.get("logging", {}))
        )


# ==================== CONTROLLER STATE ====================

@dataclass
class ControllerState:
    """
    Mutable state shared by recorder and player of one manager.
    break_counter is the 1-indexed segment played last (0 = start over).
    """
    break_counter: int = 0

    def reset_cursor(self):
        self.break_counter = 0


@dataclass
class RecordingSession:
    """Lives between start and stop of one recording"""
    target_slot: str
    prior_content: str = ""
    rotated: bool = False


# ==================== ERRORS ====================

class MacroError(Exception):
    """Base for user-facing macro errors (reported as notifications)"""
    level: Optional[NotifyLevel] = None  # None = configured default level
    importance: Importance = Importance.ESSENTIAL


class ConfigError(MacroError, ValueError):
    """Invalid configuration, aborts setup"""
    level = NotifyLevel.ERROR


class SlotValidationError(ConfigError):
    """Slot identifier is not a single lowercase letter"""

    def __init__(self, slot, message: str = None):
        self.slot = slot
        super().__init__(message or f'"{slot}" is an invalid slot. Choose only named registers (a-z).')


class RecursivePlaybackError(MacroError):
    """Playing a macro while recording it"""
    level = NotifyLevel.ERROR

    def __init__(self, slot: str):
        self.slot = slot
        super().__init__(
            "Playing the macro while it is recording would cause recursion problems. Aborting.\n"
            f"(You can still use recursive macros by using `@{slot}`)"
        )


class EmptySlotError(MacroError):
    level = NotifyLevel.WARN

    def __init__(self, slot: str, message: str = None):
        self.slot = slot
        super().__init__(message or f"Macro Slot [{slot}] is empty.")


class RecordingAborted(MacroError):
    """Recording stopped without capturing anything; previous content kept"""

    def __init__(self, slot: str):
        self.slot = slot
        super().__init__("Recording aborted.\n(Previous recording is kept.)")
