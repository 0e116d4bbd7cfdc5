# src/taskboard/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import CommandEmitter, cmd_add, registry as command_registry
from ..core.notifications import Notification
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def print_notice(notice: Notification) -> None:
    """Toast-style feedback for store events."""
    marker = "!" if notice.destructive else "*"
    _print_ts(f"{marker} {notice.title}: {notice.message}")


def dispatch_line(state: AppState, user_input: str, emit: CommandEmitter | None = None) -> str | None:
    """Route one console line: slash commands go to the registry, bare text is a quick add."""
    if not user_input.startswith("/"):
        # Plain whitespace split so apostrophes in titles are not read as shell quotes.
        return cmd_add(state, user_input.split())
    return command_registry.handle(state, user_input, emit=emit)


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (tasks=%d).", len(state.task_store))

    unsubscribe = state.notifications.subscribe(print_notice)
    _print_ts(command_registry.handle(state, "/hello") or "")
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        # Immediate user-visible feedback for long operations (e.g. imports)
        print(f"[{_ts_local()}] {text}", flush=True)

    try:
        while True:
            try:
                user_input = input(">>> ").strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                response = dispatch_line(state, user_input, emit=emit)
            except Exception:
                logger.exception("Command handler crashed.")
                response = "Internal error while handling a command."

            if response is not None:
                print(response)
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
