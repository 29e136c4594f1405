"""
Fundamental pulse-network event classes.

Pulse is the two-valued signal carried on every wire of a network.

A PulseEvent describes one pulse in flight : sent by a source module, to a destination
module (which may not exist, in which case the pulse is simply absorbed).

A PressTally counts the low and high pulses seen, usually over one button press.

A Connection is a client callback registered with a per-connection context, as used by
module hooks and network tracing.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, TypeAlias

__all__ = ["Connection", "Pulse", "PulseEvent", "PressTally", "as_pulse"]


class Pulse(Enum):
    """A binary signal : low or high.  Prints as plain 'low' / 'high'."""

    LOW = "low"
    HIGH = "high"

    def __str__(self):
        return self.value


PulseTypes: TypeAlias = Pulse | bool | str


def as_pulse(value: PulseTypes) -> Pulse:
    """Convert a Pulse, bool (True == high) or 'low'/'high' string into a Pulse."""
    match value:
        case Pulse():
            result = value
        case bool():
            result = Pulse.HIGH if value else Pulse.LOW
        case str():
            try:
                result = Pulse(value.strip().lower())
            except ValueError:
                msg = f"Pulse string {value!r} is not one of 'low' or 'high'."
                raise ValueError(msg) from None
        case _:
            raise TypeError(f"Argument 'value', {value!r} has unsupported type.")
    return result


@dataclass(frozen=True)
class PulseEvent:
    """One pulse travelling along a wire, from 'source' to 'destination'."""

    source: str
    destination: str
    pulse: Pulse

    def __post_init__(self):
        # Normalise in place : the dataclass is frozen, so bypass __setattr__.
        object.__setattr__(self, "pulse", as_pulse(self.pulse))

    def __str__(self):
        return f"{self.source} -{self.pulse}-> {self.destination}"


@dataclass(frozen=True)
class PressTally:
    """Counts of low and high pulses.

    Tallies add to each other, or to a single Pulse (counting it), and scale by a
    non-negative integer.  Python ints are unbounded, so scaling by a huge number of
    repeats cannot overflow.
    """

    low: int = 0
    high: int = 0

    def __add__(self, other):
        match other:
            case PressTally():
                result = PressTally(self.low + other.low, self.high + other.high)
            case Pulse.LOW:
                result = PressTally(self.low + 1, self.high)
            case Pulse.HIGH:
                result = PressTally(self.low, self.high + 1)
            case _:
                result = NotImplemented
        return result

    __radd__ = __add__

    def __mul__(self, other):
        if isinstance(other, bool) or not isinstance(other, int):
            return NotImplemented
        if other < 0:
            raise ValueError(f"Cannot scale a PressTally by negative count {other}.")
        return PressTally(self.low * other, self.high * other)

    __rmul__ = __mul__

    def __str__(self):
        return f"low={self.low}, high={self.high}"

    @property
    def total(self) -> int:
        return self.low + self.high

    @property
    def product(self) -> int:
        return self.low * self.high

    def as_tuple(self) -> tuple[int, int]:
        return self.low, self.high

    @staticmethod
    def sum(tallies: Iterable[PressTally]) -> PressTally:
        result = PressTally()
        for tally in tallies:
            result += tally
        return result


ConnectionClient = Callable[..., None]


@dataclass
class Connection:
    """
    A client callback associated with a specific per-connection context.

    Having a distinct object for each connection means that a given callback can be
    connected more than once, and that any one connection can be removed again.
    """

    call: ConnectionClient
    call_context: Any
