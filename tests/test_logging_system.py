import threading

import pytest

from enginecore import logging_system as ls
from enginecore.logging_system import LoggingSystem, get_global_logging_system
from enginecore.logtypes import (
    INVALID_LOGGING_CHANNEL_ID,
    MAX_LOGGING_IDENTIFIER_LENGTH,
    MAX_LOGGING_LISTENER_COUNT,
    MAX_LOGGING_MESSAGE_LENGTH,
    LoggingChannelFlags,
    LoggingListener,
    LoggingResponse,
    LoggingResponsePolicy,
    LoggingSeverity,
    NonFatalLoggingResponsePolicy,
)


class Recorder(LoggingListener):
    def __init__(self):
        self.events = []

    def log(self, context, message):
        self.events.append((context, message))


class FixedPolicy(LoggingResponsePolicy):
    def __init__(self, response):
        self.response = response

    def on_log(self, context):
        return self.response


@pytest.fixture
def system():
    return LoggingSystem()


@pytest.fixture
def global_recorder():
    system = get_global_logging_system()
    recorder = Recorder()
    system.push_logging_state()
    system.register_logging_listener(recorder)
    yield recorder
    system.pop_logging_state()


def test_register_and_find_channel(system):
    first = system.register_logging_channel("Alpha")
    second = system.register_logging_channel("Beta")
    assert first != second
    assert system.find_channel("alpha") == first
    assert system.find_channel("BETA") == second
    assert system.get_channel(second).name == "Beta"
    assert system.channel_count == 2


def test_find_missing_channel(system):
    assert system.find_channel("Nope") == INVALID_LOGGING_CHANNEL_ID


def test_reregister_returns_same_id_and_updates_defaults(system):
    cid = system.register_logging_channel("Alpha")
    again = system.register_logging_channel(
        "ALPHA", None, LoggingChannelFlags.CONSOLE_ONLY, LoggingSeverity.WARNING
    )
    assert again == cid
    assert system.get_channel_flags(cid) == LoggingChannelFlags.CONSOLE_ONLY
    assert system.get_channel(cid).minimum_severity == LoggingSeverity.WARNING
    system.register_logging_channel("Alpha", None, LoggingChannelFlags.DO_NOT_ECHO)
    assert system.get_channel_flags(cid) == LoggingChannelFlags.CONSOLE_ONLY


def test_name_truncated(system):
    cid = system.register_logging_channel("x" * 100)
    assert len(system.get_channel(cid).name) == MAX_LOGGING_IDENTIFIER_LENGTH - 1


def test_register_tags_callback(system):
    system.register_logging_channel("Other")

    def tags():
        system.add_tag_to_current_channel("Developer")
        system.add_tag_to_current_channel("Developer")
        system.add_tag_to_current_channel("Console")

    cid = system.register_logging_channel("Tagged", tags)
    assert system.has_tag(cid, "developer")
    assert system.has_tag(cid, "Console")
    assert system.get_channel(cid).tags.count("Developer") == 1
    assert not system.has_tag(system.find_channel("Other"), "Console")


def test_add_tag_without_channels(system):
    with pytest.raises(RuntimeError):
        system.add_tag_to_current_channel("Console")


def test_spew_levels(system):
    a = system.register_logging_channel("A", lambda: system.add_tag_to_current_channel("T"))
    b = system.register_logging_channel("B")
    assert system.is_channel_enabled(a, LoggingSeverity.MESSAGE)
    system.set_channel_spew_level(b, LoggingSeverity.ERROR)
    assert not system.is_channel_enabled(b, LoggingSeverity.WARNING)
    assert system.is_channel_enabled(b, LoggingSeverity.ERROR)
    system.set_channel_spew_level_by_tag("t", LoggingSeverity.ASSERT)
    assert not system.is_channel_enabled(a, LoggingSeverity.WARNING)
    system.set_channel_spew_level_by_name("b", LoggingSeverity.MESSAGE)
    assert system.is_channel_enabled(b, LoggingSeverity.MESSAGE)


def test_channel_flags_set(system):
    cid = system.register_logging_channel("A")
    system.set_channel_flags(cid, LoggingChannelFlags.DO_NOT_ECHO)
    assert system.get_channel_flags(cid) == LoggingChannelFlags.DO_NOT_ECHO


def test_get_channel_bad_id(system):
    with pytest.raises(IndexError):
        system.get_channel(-1)


def test_default_listener_prints(system, capsys):
    cid = system.register_logging_channel("A")
    response = system.log_direct(cid, LoggingSeverity.MESSAGE, "hello\n")
    assert response == LoggingResponse.CONTINUE
    assert capsys.readouterr().out == "hello\n"


def test_reset_removes_listeners(system, capsys):
    cid = system.register_logging_channel("A")
    system.reset_current_logging_state()
    system.log_direct(cid, LoggingSeverity.MESSAGE, "hello\n")
    assert capsys.readouterr().out == ""


def test_listener_receives_context(system):
    cid = system.register_logging_channel("A", None, LoggingChannelFlags.CONSOLE_ONLY)
    system.reset_current_logging_state()
    recorder = Recorder()
    system.register_logging_listener(recorder)
    assert system.is_listener_registered(recorder)
    system.log_direct(cid, LoggingSeverity.WARNING, "warn")
    context, message = recorder.events[0]
    assert message == "warn"
    assert context.channel_id == cid
    assert context.flags == LoggingChannelFlags.CONSOLE_ONLY
    assert context.severity == LoggingSeverity.WARNING


def test_listener_limit(system):
    system.reset_current_logging_state()
    for _ in range(MAX_LOGGING_LISTENER_COUNT):
        system.register_logging_listener(Recorder())
    with pytest.raises(RuntimeError):
        system.register_logging_listener(Recorder())


def test_push_clear_and_pop(system):
    recorder = Recorder()
    system.register_logging_listener(recorder)
    system.push_logging_state()
    assert not system.is_listener_registered(recorder)
    system.pop_logging_state()
    assert system.is_listener_registered(recorder)


def test_push_copy_state(system):
    recorder = Recorder()
    system.register_logging_listener(recorder)
    system.push_logging_state(clear_state=False)
    assert system.is_listener_registered(recorder)
    other = Recorder()
    system.register_logging_listener(other)
    system.pop_logging_state()
    assert not system.is_listener_registered(other)


def test_push_exhausts_pool(system):
    for _ in range(ls.MAX_LOGGING_STATE_COUNT - 1):
        system.push_logging_state()
    with pytest.raises(RuntimeError):
        system.push_logging_state()
    system.pop_logging_state()
    system.push_logging_state()
    assert not system.is_listener_registered(Recorder())


def test_thread_local_state(system):
    recorder = Recorder()
    system.push_logging_state(thread_local=True)
    system.register_logging_listener(recorder)
    seen = []
    worker = threading.Thread(target=lambda: seen.append(system.is_listener_registered(recorder)))
    worker.start()
    worker.join()
    assert seen == [False]
    assert system.is_listener_registered(recorder)
    system.pop_logging_state(thread_local=True)
    assert not system.is_listener_registered(recorder)


def test_debugger_hook(system):
    calls = []
    system.on_debugger = lambda: calls.append("debugger")
    cid = system.register_logging_channel("A")
    system.reset_current_logging_state()
    system.set_logging_response_policy(FixedPolicy(LoggingResponse.DEBUGGER))
    assert system.log_direct(cid, LoggingSeverity.MESSAGE, "m") == LoggingResponse.DEBUGGER
    assert calls == []
    system.log_direct(cid, LoggingSeverity.WARNING, "w")
    assert calls == ["debugger"]


def test_abort_on_error_logs_exit_message(system):
    calls = []
    system.on_abort = lambda: calls.append("abort")
    cid = system.register_logging_channel("A")
    verbose = system.register_logging_channel("DeveloperVerbose")
    system.reset_current_logging_state()
    recorder = Recorder()
    system.register_logging_listener(recorder)
    assert system.log_direct(cid, LoggingSeverity.ERROR, "bad") == LoggingResponse.ABORT
    assert calls == ["abort"]
    assert recorder.events[-1][1] == "Exiting due to logging LR_ABORT request.\n"
    assert recorder.events[-1][0].channel_id == verbose


def test_reset_policy_to_default(system):
    cid = system.register_logging_channel("A")
    system.reset_current_logging_state()
    system.set_logging_response_policy(NonFatalLoggingResponsePolicy())
    assert system.log_direct(cid, LoggingSeverity.ERROR, "e") == LoggingResponse.DEBUGGER
    system.set_logging_response_policy(None)
    assert system.log_direct(cid, LoggingSeverity.ERROR, "e") == LoggingResponse.ABORT


def test_invalid_channel_logs_nothing(system):
    recorder = Recorder()
    system.reset_current_logging_state()
    system.register_logging_listener(recorder)
    assert system.log_direct(7, LoggingSeverity.MESSAGE, "x") == LoggingResponse.ABORT
    assert recorder.events == []


def test_global_channels():
    system = get_global_logging_system()
    assert system.find_channel("General") == ls.LOG_GENERAL
    assert system.find_channel("Assert") == ls.LOG_ASSERT
    assert system.get_channel_flags(ls.LOG_CONSOLE) == LoggingChannelFlags.CONSOLE_ONLY
    assert system.has_tag(ls.LOG_DEVELOPER_CONSOLE, "DeveloperVerbose")
    assert system.has_tag(ls.LOG_DEVELOPER_CONSOLE, "Console")
    assert not system.has_tag(ls.LOG_DEVELOPER, "Console")


def test_global_log_formats(global_recorder):
    response = ls.log(ls.LOG_GENERAL, LoggingSeverity.MESSAGE, "%s=%d", "a", 5)
    assert response == LoggingResponse.CONTINUE
    assert global_recorder.events[-1][1] == "a=5"


def test_global_log_truncates(global_recorder):
    ls.log_direct(ls.LOG_GENERAL, LoggingSeverity.MESSAGE, "raw")
    ls.log(ls.LOG_GENERAL, LoggingSeverity.MESSAGE, "y" * 5000)
    assert global_recorder.events[0][1] == "raw"
    assert len(global_recorder.events[1][1]) == MAX_LOGGING_MESSAGE_LENGTH - 1


def test_global_log_assert(global_recorder):
    ls.log_assert("failed %s", "x")
    context, message = global_recorder.events[-1]
    assert message == "failed x"
    assert context.channel_id == ls.LOG_ASSERT
    assert context.severity == LoggingSeverity.ASSERT


def test_log_msg_respects_spew_level(global_recorder):
    system = get_global_logging_system()
    cid = system.register_logging_channel("SpewLevelTestChannel")
    system.set_channel_spew_level(cid, LoggingSeverity.WARNING)
    assert ls.log_msg(cid, "hidden") is None
    assert ls.log_warning(cid, "shown") == LoggingResponse.CONTINUE
    assert [m for _, m in global_recorder.events] == ["shown"]
    assert ls.log_error(cid, "boom") == LoggingResponse.ABORT
    assert global_recorder.events[1][0].severity == LoggingSeverity.ERROR