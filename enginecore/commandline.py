"""Engine command line: a list of arguments with lookup by switch name."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


def _parse_int_prefix(text: str) -> int:
    """Parse a leading integer the way ``atoi`` does; 0 when there is none."""
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _parse_float_prefix(text: str) -> float:
    """Parse a leading number the way ``atof`` does; 0.0 when there is none."""
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


class CommandLine:
    """The process arguments, with the program name at index 0."""

    def __init__(self, argv: Iterable[str] = ()) -> None:
        self._parms: list[str] = list(argv)

    def create_cmd_line(self, argv: Iterable[str]) -> None:
        """Replace the stored arguments with ``argv``."""
        self._parms = list(argv)

    def check_parm(self, parm: str) -> tuple[str, str | None] | None:
        """Look up ``parm``.

        Returns ``None`` when absent, otherwise the stored argument and the
        argument following it (``None`` if it is the last one).
        """
        index = self.find_parm(parm)
        if not index:
            return None
        value = self._parms[index + 1] if index + 1 < len(self._parms) else None
        return self._parms[index], value

    def remove_parm(self, parm: str) -> None:
        """Remove ``parm`` and the value following it, if that is not a switch."""
        index = self.find_parm(parm)
        if not index:
            return
        del self._parms[index]
        if index < len(self._parms) and not self.is_parm(self._parms[index]):
            del self._parms[index]

    def append_parm(self, parm: str, values: str | None = None) -> None:
        """Append ``parm`` and, if given, its value."""
        self._parms.append(parm)
        if values is not None:
            self._parms.append(values)

    def _value_after(self, parm: str) -> str | None:
        index = self.find_parm(parm)
        if index and index + 1 < len(self._parms):
            candidate = self._parms[index + 1]
            if not self.is_parm(candidate):
                return candidate
        return None

    def parm_value(self, parm: str, default: str | None = None) -> str | None:
        """Return the argument after ``parm``, or ``default`` if there is none."""
        value = self._value_after(parm)
        return default if value is None else value

    def parm_value_int(self, parm: str, default: int) -> int:
        """Return the argument after ``parm`` parsed as an integer, or ``default``."""
        value = self._value_after(parm)
        return default if value is None else _parse_int_prefix(value)

    def parm_value_float(self, parm: str, default: float) -> float:
        """Return the argument after ``parm`` parsed as a float, or ``default``."""
        value = self._value_after(parm)
        return default if value is None else _parse_float_prefix(value)

    def find_parm(self, parm: str) -> int:
        """Return the index of ``parm`` (case-insensitive), or 0 if not found.

        The program name at index 0 is never matched.
        """
        wanted = parm.lower()
        for index, arg in enumerate(self._parms[1:], start=1):
            if arg.lower() == wanted:
                return index
        return 0

    def set_parm(self, index: int, value: str) -> None:
        """Replace the argument at ``index``; the program name and bad indices are ignored."""
        if 0 < index < len(self._parms):
            self._parms[index] = value

    @staticmethod
    def is_parm(value: str) -> bool:
        """Return True if ``value`` looks like a switch (starts with '-' or '+')."""
        return value[:1] in ("-", "+")

    def __len__(self) -> int:
        return len(self._parms)

    def __getitem__(self, index: int) -> str:
        return self._parms[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self._parms)

    def __repr__(self) -> str:
        return f"CommandLine({self._parms!r})"


_command_line = CommandLine()


def command_line() -> CommandLine:
    """Return the process-wide command line."""
    return _command_line