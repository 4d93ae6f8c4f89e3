# AI GOVERNANCE:
# Apply auditor-router
# This is a CODE change

"""
Macro Slot Package
Provides slot rotation, recording, breakpoint-segmented playback and
status line text on top of a host editor's macro registers
"""

from .models import (
    RecorderConfig, KeyMapping, PerformanceOptions, LoggingOptions,
    DynamicSlots, NotifyLevel, Importance, RecorderState, PlaybackResult,
    ControllerState, RecordingSession,
    MacroError, ConfigError, SlotValidationError, RecursivePlaybackError,
    EmptySlotError, RecordingAborted
)

from .host import (
    IEditorHost, IDebuggerBridge, MemoryEditorHost
)

from .processor import (
    has_breakpoints, split_breakpoints, strip_breakpoints, strip_trigger
)

from .slots import SlotManager, validate_slots
from .notifier import Notifier
from .recorder import MacroRecorder
from .player import MacroPlayer, performance_mode
from .config import build_config, load_config, save_config
from .manager import MacroManager


__all__ = [
    # Models
    'RecorderConfig', 'KeyMapping', 'PerformanceOptions', 'LoggingOptions',
    'DynamicSlots', 'NotifyLevel', 'Importance', 'RecorderState', 'PlaybackResult',
    'ControllerState', 'RecordingSession',

    # Errors
    'MacroError', 'ConfigError', 'SlotValidationError', 'RecursivePlaybackError',
    'EmptySlotError', 'RecordingAborted',

    # Host
    'IEditorHost', 'IDebuggerBridge', 'MemoryEditorHost',

    # Processor
    'has_breakpoints', 'split_breakpoints', 'strip_breakpoints', 'strip_trigger',

    # Components
    'SlotManager', 'validate_slots', 'Notifier', 'MacroRecorder',
    'MacroPlayer', 'performance_mode',

    # Config
    'build_config', 'load_config', 'save_config',

    # Manager
    'MacroManager',
]
