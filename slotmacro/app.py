"""
slotmacro entry point
Attaches to a running Neovim and serves the macro slot key bindings
"""

import argparse
import os
import sys

from slotmacro.macro.config import load_config
from slotmacro.macro.models import ConfigError
from slotmacro.macro.manager import MacroManager
from slotmacro.macro.nvim_host import NvimEditorHost
from slotmacro.utils.logger import log


def build_parser():
    parser = argparse.ArgumentParser(prog="slotmacro", description="Macro slots for Neovim")
    parser.add_argument("--address", default=os.environ.get("NVIM"),
                        help="Neovim socket path or host:port (default: $NVIM)")
    parser.add_argument("--config", help="YAML or JSON config file")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    if not args.address:
        print("[APP] No Neovim address given (use --address or set $NVIM)", file=sys.stderr)
        return 2

    config = None
    if args.config:
        try:
            config = load_config(args.config)
        except ConfigError as e:
            print(f"[APP] {e}", file=sys.stderr)
            return 1

    host = NvimEditorHost.attach(args.address)
    manager = MacroManager(host)
    if not manager.setup(config):
        return 1

    log(f"[APP] Serving slots {''.join(manager.slots.slots)}")
    host.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
