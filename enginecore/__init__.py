"""Engine launcher core: command line, channel-based logging, colours and path helpers."""

__version__ = "0.1.0"
__all__ = ["color", "commandline", "launcher", "logging_system", "logtypes", "strtools"]