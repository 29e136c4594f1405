from collections import deque

from pulsenet.event import Pulse, PulseEvent, PressTally
from pulsenet.network import Network


__all__ = ["BUTTON_NAME", "Sequencer"]


#: Source name of the pulse which a button press sends to the network entry.
BUTTON_NAME = "button"


class Sequencer:
    """
    Process pulse events through a network, strictly in the order they are sent.

    Events are handled first-in first-out : all the results of one event go to the back
    of the queue, behind anything already waiting.  Since conjunctions decide their
    output from whatever inputs they have seen *so far*, this order determines the
    results, so it must never change.
    """

    def __init__(self, network: Network, events: list[PulseEvent] | None = None):
        self.network = network
        self._events: deque[PulseEvent] = deque(events or [])
        self.tally = PressTally()
        self.steps = 0
        self.verbose = False

    @property
    def events(self) -> list[PulseEvent]:
        return list(self._events)

    def add(self, event_or_events: PulseEvent | list[PulseEvent]):
        match event_or_events:
            case PulseEvent():
                events = [event_or_events]
            case _:
                events = event_or_events
        self._events.extend(events)

    def run(self, steps: int | None = None, *, verbose=False) -> PressTally:
        """Process events until none remain, or a given number have been processed.

        Every processed event is counted into self.tally, including those sent to sink
        destinations.  Returns the tally.
        """
        verbose |= self.verbose
        if steps is None:
            halt_steps = -1
        else:
            halt_steps = int(steps)
        while self._events:
            if halt_steps >= 0:
                halt_steps -= 1
                if halt_steps < 0:
                    if verbose:
                        print(f"Halted after {steps} steps.")
                    break
            event = self._events.popleft()
            if verbose:
                print("\nNEXT:", event)

            self.tally += event.pulse
            self.steps += 1
            new_events = self.network.deliver(event)

            if new_events:
                self._events.extend(new_events)
                if verbose:
                    print("resulting: ")
                    for new_event in new_events:
                        print("  - ", new_event)

            if not self._events and verbose:
                print("Halted with no more events.")
        return self.tally

    def step(self, steps: int = 1, verbose: bool = False) -> PressTally:
        return self.run(steps=steps, verbose=verbose)

    def press(self, verbose: bool = False) -> PressTally:
        """Push the button once, and run until all the resulting pulses are done.

        Returns the tally of pulses for this press only, including the button pulse.
        """
        if self._events:
            msg = (
                f"Cannot press the button with {len(self._events)} events still "
                "pending : the previous press is not complete."
            )
            raise ValueError(msg)
        self.tally = PressTally()
        self.add(PulseEvent(BUTTON_NAME, self.network.entry, Pulse.LOW))
        return self.run(verbose=verbose)
