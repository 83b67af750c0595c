#!/usr/bin/env python3
"""
entrypoint.py
- Command router for node-pool-shifter.
- Usage:
    node-pool-shifter run   [flags]   Run the shift loop until SIGINT/SIGTERM
    node-pool-shifter once  [flags]   Run a single shift cycle and exit
    node-pool-shifter check [flags]   Report pool sizes and the shift decision, no resize
"""

import dataclasses
import sys

from loguru import logger

from node_pool_shifter import main as app
from node_pool_shifter.core.config import load_config
from node_pool_shifter.core.errors import ConfigurationError

COMMANDS = ("run", "once", "check")


def usage():
    print("Usage: node-pool-shifter <command> [flags]")
    print("Available commands:")
    print("  run     Run the shift loop")
    print("  once    Run a single shift cycle")
    print("  check   Show what the next cycle would do, without resizing")
    print("Run `node-pool-shifter run --help` for the list of flags.")
    return 2


def main(argv=None):
    argv = sys.argv[1:] if argv is None else list(argv)
    if not argv or argv[0] not in COMMANDS:
        if argv:
            print(f"❌ Unknown command: {argv[0]}")
        return usage()

    command, flags = argv[0], argv[1:]

    try:
        config = load_config(flags)
    except ConfigurationError as e:
        app.configure_logging()
        logger.critical(f"[config] {e}")
        return 2

    if command == "once":
        config = dataclasses.replace(config, run_once=True)
    elif command == "check":
        config = dataclasses.replace(config, run_once=True, dry_run=True)

    return app.run(config)


if __name__ == "__main__":
    sys.exit(main())
