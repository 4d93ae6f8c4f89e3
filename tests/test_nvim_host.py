"""
Test Neovim host against a mocked pynvim session
"""

import pytest
from unittest.mock import MagicMock, patch
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from slotmacro.macro.nvim_host import NvimEditorHost, DISPATCH_METHOD


@pytest.fixture
def nvim():
    session = MagicMock()
    session.channel_id = 7
    session.options = {"lazyredraw": False, "clipboard": "unnamedplus", "eventignore": ""}
    session.vvars = {"count": 0}
    session.funcs.reg_recording.return_value = ""
    session.funcs.reg_executing.return_value = ""
    return session


@pytest.fixture
def host(nvim):
    return NvimEditorHost(nvim)


class TestNvimCommands:
    """Recording, playback and registers"""

    def test_capture_commands(self, host, nvim):
        """TC-NVIM-001: q{slot} and q"""
        host.begin_capture("a")
        host.end_capture()
        assert [c.args[0] for c in nvim.command.call_args_list] == ["normal! qa", "normal! q"]

    def test_replay_commands(self, host, nvim):
        """TC-NVIM-002: @{slot} and {count}@{slot}"""
        host.replay_once("b")
        host.replay_times("b", 12)
        assert [c.args[0] for c in nvim.command.call_args_list] == ["normal! @b", "normal! 12@b"]

    def test_status(self, host, nvim):
        """TC-NVIM-003: recording / executing registers"""
        assert not host.is_capturing()
        nvim.funcs.reg_recording.return_value = "a"
        nvim.funcs.reg_executing.return_value = "b"
        assert host.is_capturing()
        assert host.is_replaying()

    def test_count(self, host, nvim):
        """TC-NVIM-004: count from v:count"""
        nvim.vvars["count"] = 5
        assert host.get_count() == 5

    def test_registers(self, host, nvim):
        """TC-NVIM-005: content is read normalized and written charwise"""
        nvim.funcs.getreg.return_value = "\x1b"
        nvim.funcs.keytrans.return_value = "<Esc>"
        nvim.replace_termcodes.return_value = "\x1b"

        assert host.get_slot_content("a") == "\x1b"
        nvim.funcs.keytrans.assert_called_with("\x1b")
        nvim.replace_termcodes.assert_called_with("<Esc>", True, True, True)

        host.set_slot_content("a", "dd")
        nvim.funcs.setreg.assert_called_with("a", "dd", "c")


class TestNvimInteraction:
    """Prompts, notifications and options"""

    def test_prompt_uses_ui_input(self, host, nvim):
        """TC-NVIM-010: prompt goes through vim.ui.input and answers by handler id"""
        answers = []
        host.prompt_text_input("Edit Macro [a]:", "dd", answers.append)

        args = nvim.exec_lua.call_args.args
        assert "vim.ui.input" in args[0]
        assert args[1:] == ("Edit Macro [a]: ", "dd", 7, DISPATCH_METHOD, "input:1")
        assert answers == []

        host._on_notification(DISPATCH_METHOD, ["input:1", "ihi<Esc>"])
        host._on_notification(DISPATCH_METHOD, ["input:1", "again"])
        assert answers == ["ihi<Esc>"]

    def test_prompt_cancelled(self, host, nvim):
        """TC-NVIM-014: a nil answer (or none at all) means cancelled"""
        answers = []
        host.prompt_text_input("Edit Macro [a]:", "", answers.append)
        host.prompt_text_input("Edit Macro [a]:", "", answers.append)

        host._on_notification(DISPATCH_METHOD, ["input:1", None])
        host._on_notification(DISPATCH_METHOD, ["input:2"])
        assert answers == [None, None]

    def test_notify(self, host, nvim):
        """TC-NVIM-011: vim.notify with title"""
        host.notify("hello", 3, "slotmacro")
        nvim.exec_lua.assert_called_with("vim.notify(...)", "hello", 3, {"title": "slotmacro"})

    def test_list_options_joined(self, host, nvim):
        """TC-NVIM-012: list values become comma-separated strings"""
        host.set_option("eventignore", ["TextChanged", "InsertEnter"])
        host.set_option("clipboard", [])
        host.set_option("lazyredraw", True)
        assert nvim.options["eventignore"] == "TextChanged,InsertEnter"
        assert nvim.options["clipboard"] == ""
        assert nvim.options["lazyredraw"] is True

    def test_clipboard_copy(self, host, nvim):
        """TC-NVIM-013: copy writes the target register"""
        host.copy_to_clipboard_target("+", "abc")
        nvim.funcs.setreg.assert_called_with("+", "abc")


class TestNvimDispatch:
    """Callbacks coming back over RPC"""

    def test_keymap_dispatch(self, host, nvim):
        """TC-NVIM-020: mapped keys call back by handler id"""
        callback = MagicMock()
        host.set_keymap("q", callback, "Start/Stop Recording")

        args = nvim.exec_lua.call_args.args
        assert args[1:] == ("q", "Start/Stop Recording", 7, DISPATCH_METHOD, "keymap:1", "n")

        host._on_request(DISPATCH_METHOD, ["keymap:1"])
        host._on_notification(DISPATCH_METHOD, ["keymap:1"])
        assert callback.call_count == 2

    def test_defer_runs_once(self, host, nvim):
        """TC-NVIM-021: deferred callbacks are dropped after running"""
        callback = MagicMock()
        host.defer(callback, 500)

        args = nvim.exec_lua.call_args.args
        assert args[1:] == (500, 7, DISPATCH_METHOD, "defer:1")

        host.dispatch("defer:1")
        host.dispatch("defer:1")
        callback.assert_called_once()

    def test_unknown_handler(self, host):
        """TC-NVIM-022: unknown ids are ignored"""
        host.dispatch("keymap:99")
        host._on_request("other_method", ["keymap:1"])


class TestNvimAttach:
    """Connecting to Neovim"""

    def test_attach_socket(self):
        """TC-NVIM-030: paths attach over a unix socket"""
        fake = MagicMock()
        with patch.dict(sys.modules, {"pynvim": fake}):
            host = NvimEditorHost.attach("/tmp/nvim.sock")
        fake.attach.assert_called_once_with("socket", path="/tmp/nvim.sock")
        assert host.nvim is fake.attach.return_value

    def test_attach_tcp(self):
        """TC-NVIM-031: host:port attaches over tcp"""
        fake = MagicMock()
        with patch.dict(sys.modules, {"pynvim": fake}):
            NvimEditorHost.attach("127.0.0.1:6666")
        fake.attach.assert_called_once_with("tcp", address="127.0.0.1", port=6666)


if __name__ == "__main__":
    # Run with: python -m pytest tests/test_nvim_host.py -v
    pytest.main([__file__, "-v", "-s"])
