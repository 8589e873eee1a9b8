# enginecore

The core pieces of a game-engine launcher:

- **Command-line parameters** (`enginecore.commandline`): a parameter list in
  which `-flag` and `+flag` entries may be followed by a value. You can look
  up entries by name, ignoring case, and remove, append or replace them.
- **Channel-based logging** (`enginecore.logging_system`, `enginecore.logtypes`):
  - named channels, each with tags and a minimum severity;
  - listeners that receive every message;
  - a stack of logging states that you push and pop, either globally or for one thread;
  - response policies that decide whether a message continues, asks for the
    debugger or asks for an abort.
- **Colours** (`enginecore.color`): an RGBA colour packed into four bytes.
- **Path helpers** (`enginecore.strtools`): `fix_slashes` swaps path separators.

## Installation

```
pip install .
```

## Running the launcher

```
enginecore-launch -basedir some\\game\\dir -buildcubemaps
```

`enginecore.launcher.main(argv=None)` does the following, then returns 0:

1. Registers a `LauncherLoggingListener` with the global logging system.
2. Loads the arguments into the process-wide command line. The program name
   is stored at index 0.
3. Stores the value after `-basedir`, with slashes fixed, in
   `enginecore.launcher.basedir`.
4. With `-tslist`, logs three notices on the `Developer` channel.
5. With `-buildcubemaps`, appends `-nosound` and `-noasync`.
6. Removes these window-size and window-mode switches, together with their
   values: `-w`, `-h`, `-width`, `-height`, `-sw`, `-startwindowed`,
   `-windowed`, `-window`, `-full`, `-fullscreen`, `-autoconfig` and
   `-mat_hdr_level`.

`LauncherLoggingListener` reports three kinds of message:

- asserts, titled "Assert";
- errors, titled "Error";
- messages on the `EngineInitialization` channel, titled "Warning".

It skips console-only channels. By default it writes these notices to standard
error. To handle them yourself, pass a `notify(kind, title, message)` callable,
where `kind` is a `MessageBoxKind`.

## Command line

```python
from enginecore.commandline import CommandLine

cmd = CommandLine()
cmd.create_cmd_line(["game", "-width", "1024", "+map", "de_dust"])

cmd.find_parm("-WIDTH")                   # 1 (0 when absent)
cmd.check_parm("-width")                  # ("-width", "1024"); None when absent
cmd.parm_value_int("-width", 800)         # 1024
cmd.parm_value_float("-width", 1.0)       # 1024.0
cmd.parm_value("-missing", "fallback")    # "fallback"
cmd.remove_parm("-width")                 # drops the flag and its value
cmd.append_parm("-nosound", None)
cmd.set_parm(1, "+map")
len(cmd), cmd[0]
```

The `parm_value*` methods fall back to the default in two cases: when the
switch is missing, or when it is followed by another switch. Integer and float
values are read from the leading digits of the argument. When the argument has
no leading digits, they give 0.

`command_line()` returns the process-wide instance.

## Logging

```python
from enginecore.logtypes import LoggingListener, LoggingSeverity
from enginecore.logging_system import get_global_logging_system, log_msg, log_warning


class Collector(LoggingListener):
    def __init__(self):
        self.messages = []

    def log(self, context, message):
        self.messages.append((context.severity, message))


system = get_global_logging_system()
channel = system.register_logging_channel("Physics")
collector = Collector()
system.register_logging_listener(collector)

log_msg(channel, "stepped %d bodies\n", 42)
log_warning(channel, "slow frame\n")
```

The global system comes with these channels: `LOG_GENERAL`, `LOG_ASSERT`,
`LOG_CONSOLE`, `LOG_DEVELOPER`, `LOG_DEVELOPER_VERBOSE` and
`LOG_DEVELOPER_CONSOLE`. Its default listener, `SimpleLoggingListener`, writes
messages to standard output.

The message helpers behave as follows:

- `log_msg`, `log_warning` and `log_error` log only when the channel is
  enabled for that severity. Otherwise they return `None`.
- `log`, `log_direct` and `log_assert` always log.

Channels can be silenced or opened up:

- by id, with `set_channel_spew_level`;
- by name, with `set_channel_spew_level_by_name`;
- by tag, with `set_channel_spew_level_by_tag`.

`push_logging_state` and `pop_logging_state` save and restore the listeners
and the response policy. `set_logging_response_policy` chooses the policy for
the current state:

- `DefaultLoggingResponsePolicy` asks for the debugger on asserts, unless
  `-noassert` is on the command line, and for an abort on errors.
- `NonFatalLoggingResponsePolicy` never asks for an abort.

## Colours and paths

```python
from enginecore.color import Color
from enginecore.strtools import fix_slashes

c = Color(255, 128, 0, 255)
c.as_tuple()                 # (255, 128, 0, 255)
Color.from_raw(c.to_raw()) == c

fix_slashes("a\\b\\c", "\\")  # "a/b/c"
```

## What it does not do

- The launcher prepares the command line and logging and then returns. It does
  not start an engine, open a window or play sound.
- `-tslist` only logs its notices. No thread or queue tests are run.
- Abort and debugger responses are only returned from `log_direct`. To act on
  them, give `LoggingSystem(on_abort=..., on_debugger=...)` callables. The
  process is never ended, and no debugger is ever entered, on its own.
- The launcher shows no dialog boxes. Its notices go to standard error or to
  the `notify` callable you supply.

## Tests

```
pip install .[test]
pytest
```