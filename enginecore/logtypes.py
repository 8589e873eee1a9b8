"""Core types of the logging system: severities, responses, contexts, listeners and policies."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum, IntFlag

from enginecore.commandline import CommandLine, command_line

MAX_LOGGING_MESSAGE_LENGTH = 2048
"""Maximum length of a formatted logging message."""

MAX_LOGGING_IDENTIFIER_LENGTH = 32
"""Maximum length of a channel or tag name."""

MAX_LOGGING_TAG_COUNT = 1024
"""Maximum number of logging tags across all channels."""

MAX_LOGGING_TAG_CHARACTER_COUNT = 8192
"""Maximum number of characters across all logging tags."""

MAX_LOGGING_LISTENER_COUNT = 16
"""Maximum number of concurrent listeners in one logging state."""

INVALID_LOGGING_CHANNEL_ID = -1
"""Channel ID meaning "no such channel"."""


class LoggingSeverity(IntEnum):
    """How serious a logged event is."""

    MESSAGE = 0
    WARNING = 1
    ASSERT = 2
    ERROR = 3
    HIGHEST_SEVERITY = 4  # placeholder above every real severity


class LoggingResponse(IntEnum):
    """What the logging system should do after a message has been logged."""

    CONTINUE = 0
    DEBUGGER = 1
    ABORT = 2


class LoggingChannelFlags(IntFlag):
    """Behaviour flags set on a channel when it is created."""

    DEFAULT = 0x0
    CONSOLE_ONLY = 0x1
    DO_NOT_ECHO = 0x2


@dataclass(frozen=True)
class LoggingContext:
    """Information handed to listeners and response policies for one log event."""

    channel_id: int
    flags: LoggingChannelFlags
    severity: LoggingSeverity


class LoggingListener(ABC):
    """Receives every message logged while it is registered."""

    @abstractmethod
    def log(self, context: LoggingContext, message: str) -> None:
        """Handle one logged message."""


class LoggingResponsePolicy(ABC):
    """Decides how the logging system reacts to a logged message."""

    @abstractmethod
    def on_log(self, context: LoggingContext) -> LoggingResponse:
        """Return the response for the event described by ``context``."""


class SimpleLoggingListener(LoggingListener):
    """Writes every message to standard output unless told to stay quiet."""

    def __init__(self, quiet_printf: bool = False) -> None:
        self.quiet_printf = quiet_printf

    def log(self, context: LoggingContext, message: str) -> None:
        if not self.quiet_printf:
            sys.stdout.write(message)


class _CommandLinePolicy(LoggingResponsePolicy):
    """A policy that consults a command line, the process-wide one by default."""

    def __init__(self, cmdline: CommandLine | None = None) -> None:
        self._cmdline = cmdline

    def _asserts_enabled(self) -> bool:
        cmdline = self._cmdline if self._cmdline is not None else command_line()
        return not cmdline.find_parm("-noassert")


class DefaultLoggingResponsePolicy(_CommandLinePolicy):
    """Break into the debugger on asserts (unless ``-noassert``) and abort on errors."""

    def on_log(self, context: LoggingContext) -> LoggingResponse:
        if context.severity == LoggingSeverity.ASSERT and self._asserts_enabled():
            return LoggingResponse.DEBUGGER
        if context.severity == LoggingSeverity.ERROR:
            return LoggingResponse.ABORT
        return LoggingResponse.CONTINUE


class NonFatalLoggingResponsePolicy(_CommandLinePolicy):
    """Never abort: asserts (unless ``-noassert``) and errors go to the debugger."""

    def on_log(self, context: LoggingContext) -> LoggingResponse:
        if (
            context.severity == LoggingSeverity.ASSERT and self._asserts_enabled()
        ) or context.severity == LoggingSeverity.ERROR:
            return LoggingResponse.DEBUGGER
        return LoggingResponse.CONTINUE