"""The central, channel-based logging system and its process-wide instance."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from enginecore.logtypes import (
    INVALID_LOGGING_CHANNEL_ID,
    MAX_LOGGING_IDENTIFIER_LENGTH,
    MAX_LOGGING_LISTENER_COUNT,
    MAX_LOGGING_MESSAGE_LENGTH,
    MAX_LOGGING_TAG_CHARACTER_COUNT,
    MAX_LOGGING_TAG_COUNT,
    DefaultLoggingResponsePolicy,
    LoggingChannelFlags,
    LoggingContext,
    LoggingListener,
    LoggingResponse,
    LoggingResponsePolicy,
    LoggingSeverity,
    SimpleLoggingListener,
)

MAX_LOGGING_STATE_COUNT = 16
"""Number of logging states available for the push/pop stacks."""

_ABORT_MESSAGE = "Exiting due to logging LR_ABORT request.\n"


@dataclass
class LoggingChannel:
    """A registered channel: its ID, flags, spew level, name and tags."""

    id: int
    flags: LoggingChannelFlags
    minimum_severity: LoggingSeverity
    name: str
    tags: list[str] = field(default_factory=list)

    def has_tag(self, tag: str) -> bool:
        """Return True if the channel carries ``tag`` (case-insensitive)."""
        wanted = tag.lower()
        return any(existing.lower() == wanted for existing in self.tags)

    def is_enabled(self, severity: LoggingSeverity) -> bool:
        """Return True if messages of ``severity`` pass this channel."""
        return severity >= self.minimum_severity

    def set_spew_level(self, severity: LoggingSeverity) -> None:
        """Set the minimum severity this channel lets through."""
        self.minimum_severity = LoggingSeverity(severity)


@dataclass
class _LoggingState:
    previous: int = 0
    listeners: list[LoggingListener] | None = None  # None: slot not in use
    policy: LoggingResponsePolicy | None = None


class LoggingSystem:
    """Channels, listeners and response policies, with stackable logging states.

    ``on_abort`` is called when a response policy asks for an abort and
    ``on_debugger`` when it asks for the debugger on a non-message severity;
    without them those responses are only returned.
    """

    def __init__(
        self,
        on_abort: Callable[[], None] | None = None,
        on_debugger: Callable[[], None] | None = None,
    ) -> None:
        self.on_abort = on_abort
        self.on_debugger = on_debugger
        self._channels: list[LoggingChannel] = []
        self._current_channel: int | None = None
        self._tag_count = 0
        self._tag_characters = 0
        self._lock = threading.RLock()
        self._thread = threading.local()
        self._global_state_index = 0
        self._default_policy = DefaultLoggingResponsePolicy()
        self._default_listener = SimpleLoggingListener()
        self._states = [_LoggingState() for _ in range(MAX_LOGGING_STATE_COUNT)]
        self._states[0].listeners = [self._default_listener]
        self._states[0].policy = self._default_policy

    # -- channels -----------------------------------------------------------

    def register_logging_channel(
        self,
        name: str,
        register_tags: Callable[[], None] | None = None,
        flags: LoggingChannelFlags = LoggingChannelFlags.DEFAULT,
        minimum_severity: LoggingSeverity = LoggingSeverity.MESSAGE,
    ) -> int:
        """Register a channel, or return the ID of an existing one of that name.

        A channel registered again with default settings takes the flags and
        severity of the later registration.
        """
        index = self.find_channel(name)
        if index != INVALID_LOGGING_CHANNEL_ID:
            channel = self._channels[index]
            self._run_tag_registration(index, register_tags)
            if (
                channel.flags == LoggingChannelFlags.DEFAULT
                and channel.minimum_severity == LoggingSeverity.MESSAGE
            ):
                channel.flags = LoggingChannelFlags(flags)
                channel.minimum_severity = LoggingSeverity(minimum_severity)
            return channel.id

        channel = LoggingChannel(
            id=len(self._channels),
            flags=LoggingChannelFlags(flags),
            minimum_severity=LoggingSeverity(minimum_severity),
            name=name[: MAX_LOGGING_IDENTIFIER_LENGTH - 1],
        )
        self._channels.append(channel)
        self._run_tag_registration(channel.id, register_tags)
        return channel.id

    def _run_tag_registration(
        self, index: int, register_tags: Callable[[], None] | None
    ) -> None:
        if register_tags is None:
            return
        previous = self._current_channel
        self._current_channel = index
        try:
            register_tags()
        finally:
            self._current_channel = previous

    def find_channel(self, name: str) -> int:
        """Return the ID of the channel called ``name``, or INVALID_LOGGING_CHANNEL_ID."""
        wanted = name.lower()
        for channel in self._channels:
            if channel.name.lower() == wanted:
                return channel.id
        return INVALID_LOGGING_CHANNEL_ID

    @property
    def channel_count(self) -> int:
        return len(self._channels)

    def get_channel(self, channel_id: int) -> LoggingChannel:
        """Return the channel with ``channel_id``; IndexError if there is none."""
        if not 0 <= channel_id < len(self._channels):
            raise IndexError(f"no logging channel with ID {channel_id}")
        return self._channels[channel_id]

    def has_tag(self, channel_id: int, tag: str) -> bool:
        return self.get_channel(channel_id).has_tag(tag)

    def is_channel_enabled(self, channel_id: int, severity: LoggingSeverity) -> bool:
        return self.get_channel(channel_id).is_enabled(severity)

    def set_channel_spew_level(
        self, channel_id: int, minimum_severity: LoggingSeverity
    ) -> None:
        self.get_channel(channel_id).set_spew_level(minimum_severity)

    def set_channel_spew_level_by_name(
        self, name: str, minimum_severity: LoggingSeverity
    ) -> None:
        """Set the spew level of every channel called ``name`` (case-insensitive)."""
        wanted = name.lower()
        for channel in self._channels:
            if channel.name.lower() == wanted:
                channel.set_spew_level(minimum_severity)

    def set_channel_spew_level_by_tag(
        self, tag: str, minimum_severity: LoggingSeverity
    ) -> None:
        """Set the spew level of every channel carrying ``tag``."""
        for channel in self._channels:
            if channel.has_tag(tag):
                channel.set_spew_level(minimum_severity)

    def get_channel_flags(self, channel_id: int) -> LoggingChannelFlags:
        return self.get_channel(channel_id).flags

    def set_channel_flags(self, channel_id: int, flags: LoggingChannelFlags) -> None:
        self.get_channel(channel_id).flags = LoggingChannelFlags(flags)

    def add_tag_to_current_channel(self, tag: str) -> None:
        """Add ``tag`` to the channel being registered (or the last one registered)."""
        if self._current_channel is not None:
            channel = self._channels[self._current_channel]
        elif self._channels:
            channel = self._channels[-1]
        else:
            raise RuntimeError("no logging channel to add a tag to")
        if channel.has_tag(tag):
            return
        if self._tag_count >= MAX_LOGGING_TAG_COUNT:
            raise RuntimeError("too many logging tags")
        needed = len(tag) + 1
        if self._tag_characters + needed > MAX_LOGGING_TAG_CHARACTER_COUNT:
            raise RuntimeError("logging tag name pool exhausted")
        self._tag_count += 1
        self._tag_characters += needed
        channel.tags.insert(0, tag)

    # -- logging states -----------------------------------------------------

    @property
    def _thread_state_index(self) -> int:
        return getattr(self._thread, "index", 0)

    @_thread_state_index.setter
    def _thread_state_index(self, value: int) -> None:
        self._thread.index = value

    def _current_state(self) -> _LoggingState:
        index = self._thread_state_index or self._global_state_index
        return self._states[index]

    def push_logging_state(
        self, thread_local: bool = False, clear_state: bool = True
    ) -> None:
        """Save the current logging state and start a new one.

        The new state is empty unless ``clear_state`` is False, in which case
        it starts as a copy of the current one. RuntimeError when every state
        slot is taken.
        """
        with self._lock:
            current = (
                self._thread_state_index if thread_local else self._global_state_index
            )
            unused = next(
                (i for i, state in enumerate(self._states) if state.listeners is None),
                None,
            )
            if unused is None:
                raise RuntimeError("no free logging state")
            state = self._states[unused]
            if clear_state:
                state.listeners = []
                state.policy = self._default_policy
            else:
                source = self._states[current]
                state.listeners = list(source.listeners or [])
                state.policy = source.policy
            state.previous = current
            if thread_local:
                self._thread_state_index = unused
            else:
                self._global_state_index = unused

    def pop_logging_state(self, thread_local: bool = False) -> None:
        """Restore the logging state saved by the matching push."""
        with self._lock:
            index = (
                self._thread_state_index if thread_local else self._global_state_index
            )
            state = self._states[index]
            previous = state.previous
            if index != 0:
                state.listeners = None
                state.policy = None
                state.previous = 0
            if thread_local:
                self._thread_state_index = previous
            else:
                self._global_state_index = previous

    def register_logging_listener(self, listener: LoggingListener) -> None:
        """Add ``listener`` to the current state; RuntimeError when it is full."""
        with self._lock:
            state = self._current_state()
            if len(state.listeners) >= MAX_LOGGING_LISTENER_COUNT:
                raise RuntimeError("too many logging listeners")
            state.listeners.append(listener)

    def is_listener_registered(self, listener: LoggingListener) -> bool:
        with self._lock:
            return any(existing is listener for existing in self._current_state().listeners)

    def reset_current_logging_state(self) -> None:
        """Remove all listeners and restore the default response policy."""
        with self._lock:
            state = self._current_state()
            state.listeners = []
            state.policy = self._default_policy

    def set_logging_response_policy(self, policy: LoggingResponsePolicy | None) -> None:
        """Use ``policy`` for the current state, or the default policy if None."""
        with self._lock:
            self._current_state().policy = policy if policy is not None else self._default_policy

    # -- logging ------------------------------------------------------------

    def log_direct(
        self, channel_id: int, severity: LoggingSeverity, message: str
    ) -> LoggingResponse:
        """Send ``message`` to every listener and return the policy's response.

        An unknown channel logs nothing and yields LoggingResponse.ABORT.
        """
        if not 0 <= channel_id < len(self._channels):
            return LoggingResponse.ABORT
        context = LoggingContext(
            channel_id=channel_id,
            flags=self._channels[channel_id].flags,
            severity=LoggingSeverity(severity),
        )
        with self._lock:
            state = self._current_state()
            for listener in list(state.listeners):
                listener.log(context, message)
            response = LoggingResponse(state.policy.on_log(context))

        if response == LoggingResponse.ABORT:
            verbose = self.find_channel("DeveloperVerbose")
            if verbose != INVALID_LOGGING_CHANNEL_ID:
                self.log_direct(verbose, LoggingSeverity.MESSAGE, _ABORT_MESSAGE)
            if self.on_abort is not None:
                self.on_abort()
        if response == LoggingResponse.DEBUGGER and severity != LoggingSeverity.MESSAGE:
            if self.on_debugger is not None:
                self.on_debugger()
        return response


_global_logging_system = LoggingSystem()


def get_global_logging_system() -> LoggingSystem:
    """Return the process-wide logging system."""
    return _global_logging_system


def _define_channel(
    name: str,
    tags: tuple[str, ...] = (),
    flags: LoggingChannelFlags = LoggingChannelFlags.DEFAULT,
    minimum_severity: LoggingSeverity = LoggingSeverity.MESSAGE,
) -> int:
    system = _global_logging_system

    def register_tags() -> None:
        for tag in tags:
            system.add_tag_to_current_channel(tag)

    return system.register_logging_channel(
        name, register_tags if tags else None, flags, minimum_severity
    )


LOG_GENERAL = _define_channel("General")
LOG_ASSERT = _define_channel("Assert")
LOG_CONSOLE = _define_channel("Console", ("Console",), LoggingChannelFlags.CONSOLE_ONLY)
LOG_DEVELOPER = _define_channel("Developer", ("Developer",))
LOG_DEVELOPER_VERBOSE = _define_channel("DeveloperVerbose", ("DeveloperVerbose",))
LOG_DEVELOPER_CONSOLE = _define_channel(
    "DeveloperConsole",
    ("DeveloperVerbose", "Console"),
    LoggingChannelFlags.CONSOLE_ONLY,
)


def _format(message_format: str, args: tuple) -> str:
    message = message_format % args if args else message_format
    return message[: MAX_LOGGING_MESSAGE_LENGTH - 1]


def log(
    channel_id: int, severity: LoggingSeverity, message_format: str, *args: object
) -> LoggingResponse:
    """Format a printf-style message and log it on the global system."""
    return _global_logging_system.log_direct(
        channel_id, severity, _format(message_format, args)
    )


def log_direct(channel_id: int, severity: LoggingSeverity, message: str) -> LoggingResponse:
    """Log an already formatted message on the global system."""
    return _global_logging_system.log_direct(channel_id, severity, message)


def log_assert(message_format: str, *args: object) -> LoggingResponse:
    """Log an assertion message on the assert channel."""
    return _global_logging_system.log_direct(
        LOG_ASSERT, LoggingSeverity.ASSERT, _format(message_format, args)
    )


def _log_if_enabled(
    channel_id: int, severity: LoggingSeverity, message_format: str, args: tuple
) -> LoggingResponse | None:
    if not _global_logging_system.is_channel_enabled(channel_id, severity):
        return None
    return log(channel_id, severity, message_format, *args)


def log_msg(channel_id: int, message_format: str, *args: object) -> LoggingResponse | None:
    """Log a message if the channel is enabled for messages; None otherwise."""
    return _log_if_enabled(channel_id, LoggingSeverity.MESSAGE, message_format, args)


def log_warning(
    channel_id: int, message_format: str, *args: object
) -> LoggingResponse | None:
    """Log a warning if the channel is enabled for warnings; None otherwise."""
    return _log_if_enabled(channel_id, LoggingSeverity.WARNING, message_format, args)


def log_error(channel_id: int, message_format: str, *args: object) -> LoggingResponse | None:
    """Log an error if the channel is enabled for errors; None otherwise."""
    return _log_if_enabled(channel_id, LoggingSeverity.ERROR, message_format, args)