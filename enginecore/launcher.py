"""Launcher entry point: sets up logging and prepares the engine command line."""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from enum import Enum

from enginecore.commandline import command_line
from enginecore.logging_system import LOG_DEVELOPER, get_global_logging_system, log_msg
from enginecore.logtypes import (
    LoggingChannelFlags,
    LoggingContext,
    LoggingListener,
    LoggingSeverity,
)
from enginecore.strtools import fix_slashes

MAX_PATH = 260 if sys.platform == "win32" else 4096
"""Longest path, terminator included, that the launcher keeps for the base directory."""

LOG_ENGINE_INITIALIZATION = get_global_logging_system().register_logging_channel(
    "EngineInitialization"
)

# Switches that must not reach the engine from the launcher's command line.
_STRIPPED_PARMS = (
    "-w",
    "-h",
    "-width",
    "-height",
    "-sw",
    "-startwindowed",
    "-windowed",
    "-window",
    "-full",
    "-fullscreen",
    "-autoconfig",
    "-mat_hdr_level",
)

basedir = ""
"""Base directory given with ``-basedir`` on the last launch, with slashes fixed."""


class MessageBoxKind(Enum):
    """The kind of notice the launcher shows to the user."""

    WARNING = "warning"
    ERROR = "error"


Notifier = Callable[[MessageBoxKind, str, str], None]


def _notify_stderr(kind: MessageBoxKind, title: str, message: str) -> None:
    sys.stderr.write(f"{title}: {message}")
    if not message.endswith("\n"):
        sys.stderr.write("\n")


class LauncherLoggingListener(LoggingListener):
    """Shows asserts, errors and engine-initialisation messages to the user.

    ``notify`` receives the kind, title and text of each notice; by default
    notices are written to standard error.
    """

    def __init__(self, notify: Notifier | None = None) -> None:
        self.notify: Notifier = notify if notify is not None else _notify_stderr

    def log(self, context: LoggingContext, message: str) -> None:
        if context.flags == LoggingChannelFlags.CONSOLE_ONLY:
            return
        if context.severity == LoggingSeverity.ASSERT:
            self.notify(MessageBoxKind.WARNING, "Assert", message)
        elif context.severity == LoggingSeverity.ERROR:
            self.notify(MessageBoxKind.ERROR, "Error", message)
        elif context.channel_id == LOG_ENGINE_INITIALIZATION:
            self.notify(MessageBoxKind.WARNING, "Warning", message)


_launcher_listener = LauncherLoggingListener()


def main(argv: Sequence[str] | None = None) -> int:
    """Start the launcher with ``argv`` (the arguments after the program name)."""
    global basedir

    system = get_global_logging_system()
    if not system.is_listener_registered(_launcher_listener):
        system.register_logging_listener(_launcher_listener)

    program = sys.argv[0] if sys.argv else "enginecore"
    args = sys.argv[1:] if argv is None else list(argv)
    cmdline = command_line()
    cmdline.create_cmd_line([program, *args])

    found = cmdline.check_parm("-basedir")
    value = found[1] if found is not None and found[1] is not None else ""
    basedir = fix_slashes(value[: MAX_PATH - 1])

    if cmdline.check_parm("-tslist"):
        log_msg(LOG_DEVELOPER, "Running TSList tests\n")
        log_msg(LOG_DEVELOPER, "Running TSQueue tests\n")
        log_msg(LOG_DEVELOPER, "Running Thread Pool tests\n")

    if cmdline.check_parm("-buildcubemaps"):
        cmdline.append_parm("-nosound", None)
        cmdline.append_parm("-noasync", None)

    for parm in _STRIPPED_PARMS:
        cmdline.remove_parm(parm)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())