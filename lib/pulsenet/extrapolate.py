"""
Pulse counts over many button presses.

The state of a network can only take finitely many values, so the sequence of states
seen before each press must eventually repeat.  Once the state before press 'i' is found
to equal that before an earlier press 'j', presses [j, i) form a cycle which repeats
forever, and the count for any number of presses follows by arithmetic.
"""

from dataclasses import dataclass

from pulsenet.event import PressTally
from pulsenet.network import Network, SystemState
from pulsenet.sequencer import Sequencer

__all__ = ["Cycle", "Extrapolator", "simulate_pulses", "total_pulses"]


@dataclass(frozen=True)
class Cycle:
    """Presses [start, start + length) repeat for ever after."""

    start: int
    length: int

    def __str__(self):
        return f"presses [{self.start}, {self.start + self.length})"


class Extrapolator:
    """
    Count pulses over a number of presses, simulating only until the states repeat.

    The network is reset on creation, so the results depend only on its definition.
    Presses are simulated lazily, as needed, and the history of states and tallies is
    kept, so that further totals can re-use it.
    """

    def __init__(self, network: Network, verbose: bool = False):
        self.network = network
        self.network.reset()
        self.sequencer = Sequencer(network)
        self.verbose = verbose
        # One (pre-press state, tally) entry per press simulated, in press order.
        self.history: list[tuple[SystemState, PressTally]] = []
        self._press_indices: dict[SystemState, int] = {}
        self.cycle: Cycle | None = None

    def advance(self) -> Cycle | None:
        """Simulate one more press, unless the current state has been seen before.

        Returns the cycle, once found : after that, nothing more is simulated.
        """
        if self.cycle is None:
            i_press = len(self.history)
            state = self.network.state()
            i_previous = self._press_indices.get(state, None)
            if i_previous is not None:
                self.cycle = Cycle(i_previous, i_press - i_previous)
                if self.verbose:
                    print(f"Found cycle at press {i_press}: {self.cycle}.")
            else:
                tally = self.sequencer.press()
                self._press_indices[state] = i_press
                self.history.append((state, tally))
                if self.verbose:
                    print(f"Press {i_press}: {tally}")
        return self.cycle

    def find_cycle(self, limit: int | None = None) -> Cycle | None:
        """Advance until a cycle is found, or 'limit' presses have been simulated."""
        while self.cycle is None:
            if limit is not None and len(self.history) >= limit:
                if self.verbose:
                    print(f"No cycle found within {limit} presses.")
                break
            self.advance()
        return self.cycle

    def _sum(self, i_start: int, i_end: int) -> PressTally:
        return PressTally.sum(tally for _, tally in self.history[i_start:i_end])

    def total(self, press_count: int) -> PressTally:
        """Return the total pulse tally after exactly 'press_count' presses."""
        press_count = int(press_count)
        if press_count < 0:
            raise ValueError(f"Press count must not be negative, got {press_count}.")
        while len(self.history) < press_count and self.advance() is None:
            pass

        if len(self.history) >= press_count:
            # Enough presses were simulated : no need to extrapolate.
            result = self._sum(0, press_count)
        else:
            cycle = self.cycle
            assert cycle is not None
            start, length = cycle.start, cycle.length
            full_cycles, n_remainder = divmod(press_count - start, length)
            leading = self._sum(0, start)
            cycle_sum = self._sum(start, start + length)
            trailing = self._sum(start, start + n_remainder)
            result = leading + cycle_sum * full_cycles + trailing
            if self.verbose:
                print(
                    f"Extrapolated {press_count} presses : {start} leading, "
                    f"{full_cycles} cycles of {length}, {n_remainder} trailing."
                )
        return result


def total_pulses(network: Network, press_count: int) -> tuple[int, int]:
    """Return the (low, high) pulse counts after 'press_count' button presses."""
    # Check before creating the Extrapolator, which resets the network.
    if press_count < 0:
        raise ValueError(f"Press count must not be negative, got {press_count}.")
    if press_count == 0:
        return PressTally().as_tuple()
    return Extrapolator(network).total(press_count).as_tuple()


def simulate_pulses(network: Network, press_count: int) -> tuple[int, int]:
    """Return the (low, high) pulse counts by simulating every one of the presses."""
    if press_count < 0:
        raise ValueError(f"Press count must not be negative, got {press_count}.")
    network.reset()
    sequencer = Sequencer(network)
    result = PressTally()
    for _ in range(press_count):
        result += sequencer.press()
    return result.as_tuple()
