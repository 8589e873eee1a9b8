"""An RGBA colour packed into four unsigned bytes."""

from __future__ import annotations


class Color:
    """Red, green, blue and alpha components, each stored as an unsigned byte."""

    __slots__ = ("_channels",)

    def __init__(self, r: int = 0, g: int = 0, b: int = 0, a: int = 0) -> None:
        self._channels = bytearray(4)
        self.set_color(r, g, b, a)

    def set_color(self, r: int, g: int, b: int, a: int = 0) -> None:
        """Set all components; each value is truncated to its low byte."""
        self._channels[:] = bytes((r & 0xFF, g & 0xFF, b & 0xFF, a & 0xFF))

    def as_tuple(self) -> tuple[int, int, int, int]:
        """Return the components as ``(r, g, b, a)``."""
        r, g, b, a = self._channels
        return r, g, b, a

    def to_raw(self) -> int:
        """Return the four bytes read as a signed little-endian 32-bit integer."""
        return int.from_bytes(self._channels, "little", signed=True)

    @classmethod
    def from_raw(cls, value: int) -> Color:
        """Build a colour from a 32-bit integer with red in the lowest byte."""
        color = cls()
        color._channels[:] = (value & 0xFFFFFFFF).to_bytes(4, "little")
        return color

    @property
    def r(self) -> int:
        return self._channels[0]

    @property
    def g(self) -> int:
        return self._channels[1]

    @property
    def b(self) -> int:
        return self._channels[2]

    @property
    def a(self) -> int:
        return self._channels[3]

    def __getitem__(self, index: int) -> int:
        if not 0 <= index < 4:
            raise IndexError(f"color component index out of range: {index}")
        return self._channels[index]

    def __setitem__(self, index: int, value: int) -> None:
        if not 0 <= index < 4:
            raise IndexError(f"color component index out of range: {index}")
        self._channels[index] = value & 0xFF

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return self._channels == other._channels

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Color(r={self.r}, g={self.g}, b={self.b}, a={self.a})"