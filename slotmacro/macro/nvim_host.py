# AI GOVERNANCE:
# Apply auditor-router
# This is a CODE change

"""
Neovim Host
IEditorHost implementation driving a Neovim instance over msgpack-RPC with
pynvim. Key bindings and deferred callbacks call back into Python through
rpcrequest on this client's channel.
"""

from __future__ import annotations
from typing import Optional, Callable, Dict, Any, List
import logging

from .host import IEditorHost

from slotmacro.utils.logger import log

DISPATCH_METHOD = "slotmacro_dispatch"

_KEYMAP_LUA = """
local lhs, desc, chan, method, id, mode = ...
vim.keymap.set(mode, lhs, function() vim.rpcrequest(chan, method, id) end, { desc = desc })
"""

_DEFER_LUA = """
local delay, chan, method, id = ...
vim.defer_fn(function() vim.rpcrequest(chan, method, id) end, delay)
"""

_INPUT_LUA = """
local prompt, default, chan, method, id = ...
vim.schedule(function()
  vim.ui.input({ prompt = prompt, default = default }, function(input)
    vim.rpcnotify(chan, method, id, input)
  end)
end)
"""

# handlers dropped after their first call
_ONE_SHOT_PREFIXES = ("defer:", "input:")

# options holding comma-separated lists in Neovim
_LIST_OPTIONS = ("clipboard", "eventignore")


class NvimEditorHost(IEditorHost):
    """Editor host backed by a pynvim.Nvim session"""

    def __init__(self, nvim, mode: str = "n"):
        """
        Args:
            nvim: Attached pynvim.Nvim instance
            mode: Mode for key bindings
        """
        self._nvim = nvim
        self._mode = mode
        self._handlers: Dict[str, Callable[..., Any]] = {}
        self._next_id = 0

    @classmethod
    def attach(cls, address: str, mode: str = "n") -> 'NvimEditorHost':
        """Connect to a running Neovim listening on a socket path or host:port"""
        try:
            import pynvim
        except ImportError:
            log("[NVIM] ERROR: pynvim not installed. Install with: pip install pynvim", logging.ERROR)
            raise

        if ":" in address and not address.startswith("/"):
            host, port = address.rsplit(":", 1)
            nvim = pynvim.attach("tcp", address=host, port=int(port))
        else:
            nvim = pynvim.attach("socket", path=address)
        log(f"[NVIM] Attached to {address}")
        return cls(nvim, mode)

    @property
    def nvim(self):
        return self._nvim

    # ==================== EVENT LOOP ====================

    def run(self):
        """Serve key binding callbacks until Neovim disconnects"""
        log("[NVIM] Entering event loop")
        self._nvim.run_loop(self._on_request, self._on_notification)

    def _on_request(self, name: str, args: List[Any]):
        if name == DISPATCH_METHOD and args:
            self.dispatch(args[0], *args[1:])
        return None

    def _on_notification(self, name: str, args: List[Any]):
        if name == DISPATCH_METHOD and args:
            self.dispatch(args[0], *args[1:])

    def dispatch(self, handler_id: str, *args):
        """Run the Python callback registered under handler_id with args"""
        callback = self._handlers.get(handler_id)
        if callback is None:
            log(f"[NVIM] Unknown handler: {handler_id}", logging.WARNING)
            return
        if handler_id.startswith(_ONE_SHOT_PREFIXES):
            del self._handlers[handler_id]
        callback(*args)

    def _register(self, prefix: str, callback: Callable[..., Any]) -> str:
        self._next_id += 1
        handler_id = f"{prefix}:{self._next_id}"
        self._handlers[handler_id] = callback
        return handler_id

    # ==================== RECORDING / PLAYBACK ====================

    def is_capturing(self) -> bool:
        return self._nvim.funcs.reg_recording() != ""

    def is_replaying(self) -> bool:
        return self._nvim.funcs.reg_executing() != ""

    def _normal(self, keys: str):
        self._nvim.command(f"normal! {keys}")

    def begin_capture(self, slot: str):
        self._normal(f"q{slot}")

    def end_capture(self):
        self._normal("q")

    def replay_once(self, slot: str):
        self._normal(f"@{slot}")

    def replay_times(self, slot: str, count: int):
        self._normal(f"{count}@{slot}")

    def get_count(self) -> int:
        return self._nvim.vvars["count"]

    # ==================== REGISTERS ====================

    def get_slot_content(self, slot: str) -> str:
        return self.normalize_encoding(self._nvim.funcs.getreg(slot))

    def set_slot_content(self, slot: str, content: str):
        self._nvim.funcs.setreg(slot, content, "c")

    def encode_keys(self, text: str) -> str:
        return self._nvim.replace_termcodes(text, True, True, True)

    def decode_keys(self, raw: str) -> str:
        return self._nvim.funcs.keytrans(raw)

    # ==================== USER INTERACTION ====================

    def prompt_text_input(self, prompt: str, default: str,
                          on_submit: Callable[[Optional[str]], Any]):
        # the answer arrives as a notification, possibly after the key handler returned
        handler_id = self._register("input", lambda answer=None: on_submit(answer))
        self._nvim.exec_lua(_INPUT_LUA, prompt + " ", default, self._nvim.channel_id,
                            DISPATCH_METHOD, handler_id)

    def notify(self, message: str, level: int, title: str = ""):
        self._nvim.exec_lua("vim.notify(...)", message, level, {"title": title})

    def copy_to_clipboard_target(self, target: str, text: str):
        self._nvim.funcs.setreg(target, text)

    # ==================== SETTINGS ====================

    def get_option(self, name: str) -> Any:
        return self._nvim.options[name]

    def set_option(self, name: str, value: Any):
        if name in _LIST_OPTIONS and isinstance(value, (list, tuple)):
            value = ",".join(value)
        self._nvim.options[name] = value

    # ==================== INTEGRATION ====================

    def set_keymap(self, lhs: str, callback: Callable[[], Any], description: str = ""):
        handler_id = self._register("keymap", callback)
        self._nvim.exec_lua(_KEYMAP_LUA, lhs, description, self._nvim.channel_id,
                            DISPATCH_METHOD, handler_id, self._mode)
        log(f"[NVIM] Mapped {lhs} -> {handler_id}")

    def defer(self, callback: Callable[[], Any], delay_ms: int):
        handler_id = self._register("defer", callback)
        self._nvim.exec_lua(_DEFER_LUA, delay_ms, self._nvim.channel_id,
                            DISPATCH_METHOD, handler_id)
