"""
Network modules.

A Module is a named node with an ordered list of destination module names, and a single
transition, Module.receive(pulse, source), which updates any internal state and returns
the resulting outputs as a list of (destination, pulse) pairs, in destination order.

There are exactly three kinds of module :
  * Broadcaster : stateless, re-sends each pulse to all its destinations.
  * FlipFlop : ignores high pulses, toggles on a low pulse and then sends high if now
    on, or low if now off.
  * Conjunction : remembers the last pulse from each of its inputs, and sends low if
    these are all high, otherwise high.

Module.create(kind, name, destinations) makes a module from a kind tag.

The receive call of any module can be "hooked", to call extra clients before or after
the transition takes place.  Module tracing is implemented with a standard hook, which
passes details to TRACE_HANDLER_CLIENT : by default, that prints to the terminal.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Iterable, Literal

from pulsenet.event import Connection, Pulse, PulseTypes, as_pulse

__all__ = ["Broadcaster", "Conjunction", "FlipFlop", "Module", "ModuleKind"]


ModuleKind = Literal["broadcaster", "flip-flop", "conjunction"]

Outputs = list[tuple[str, Pulse]]

ReceiveCallType = Callable[["Module", Pulse, str], Outputs | None]


def default_trace_action(
    module: Module, pulse: Pulse, source: str, outputs: Outputs | None = None
):
    """The default module trace operation = print receive details to the terminal."""
    msg = f"TRACE {module.__class__.__name__}({module.name}).receive : "
    msg += f"{pulse} <-- {source}"
    if outputs is not None:
        sent = ", ".join(f"{dest}={out_pulse}" for dest, out_pulse in outputs)
        msg += f" ==> [{sent}]"
    print(msg)


# : A single common definition for what module trace actions do.
TRACE_HANDLER_CLIENT: Callable[..., None] = default_trace_action


class Module(ABC):
    """
    A named network node, with state, behaviour and outgoing connections.

    Module.destinations is the ordered list of names to which outputs are sent.
    Module.receive is the (only) state transition : subclasses define it, wrapped with
        @Module.receiver for common behaviour.
    Module.state is a read-only, hashable snapshot of the internal state.
    """

    KIND: str = ""

    def __init__(self, name: str, destinations: Iterable[str] = ()):
        if isinstance(destinations, str):
            msg = (
                f"Destinations of module {name!r} should be a list of names, "
                f"not the string {destinations!r}."
            )
            raise TypeError(msg)
        self.name = name
        self.destinations: list[str] = list(destinations)
        self._prehooks: list[Connection] = []
        self._posthooks: list[Connection] = []
        # This is a placeholder for the (unique) trace hook
        self._trace_hook: Connection | None = None

    def __repr__(self):
        dests = ", ".join(self.destinations)
        return f"{self.__class__.__name__}<{self.name} -> {dests}>"

    @staticmethod
    def create(
        kind: ModuleKind, name: str, destinations: Iterable[str] = ()
    ) -> Module:
        """Make a module of the given kind."""
        match kind:
            case "broadcaster":
                module = Broadcaster(name, destinations)
            case "flip-flop":
                module = FlipFlop(name, destinations)
            case "conjunction":
                module = Conjunction(name, destinations)
            case _:
                msg = (
                    f"Unknown kind {kind!r} for module {name!r} : "
                    "expected 'broadcaster', 'flip-flop' or 'conjunction'."
                )
                raise ValueError(msg)
        return module

    @staticmethod
    def receiver(inner_func: ReceiveCallType) -> Callable[..., Outputs]:
        """
        Decorator to make a module receive function.

        Provides common behaviours : normalising the pulse, calling hooks, and always
        returning a (possibly empty) list of outputs.
        """

        @wraps(inner_func)
        def wrapper_call(self, pulse: PulseTypes, source: str) -> Outputs:
            pulse = as_pulse(pulse)
            outputs: Outputs = []
            with self._run_with_hooks(pulse, source, outputs):
                results = inner_func(self, pulse, source)
                if results:
                    outputs.extend(results)
            return outputs

        return wrapper_call

    @abstractmethod
    def receive(self, pulse: PulseTypes, source: str) -> Outputs:
        """Take one pulse from 'source', returning the (destination, pulse) outputs."""
        ...

    def send(self, pulse: Pulse) -> Outputs:
        """Make outputs sending one pulse to every destination, in order."""
        return [(destination, pulse) for destination in self.destinations]

    @property
    def state(self) -> Any:
        """A hashable snapshot of the module state.  None when there is no state."""
        return None

    def state_text(self) -> str:
        return ""

    def reset(self):
        """Return to the initial state."""
        pass

    # Module hooks + tracing.

    def hook(
        self, call: Callable[..., None], context=None, call_after: bool = False
    ) -> Connection:
        """Hook the receive operation of the module.

        This installs a callback that gets called when a pulse is received, either
        *before* (default) or *after* (alternatively) the state transition.

        The hook is called as call(module, pulse, source, context), where the context
        is of the form {'call_context': <outputs>, 'hook_context': <context>}.
        The 'call_context' part is None for pre-hooks, and the list of outputs for
        post-hooks.
        Hooks cannot alter the outputs.
        """
        hook = Connection(call, context)
        hooklist = self._posthooks if call_after else self._prehooks
        hooklist.append(hook)
        return hook

    def unhook(self, hook: Connection):
        for hooklist in (self._prehooks, self._posthooks):
            while hook in hooklist:
                hooklist.remove(hook)

    @contextmanager
    def _run_with_hooks(self, pulse: Pulse, source: str, outputs: Outputs):
        """Call pre/posthooks before/after a code block."""

        def call_hooks(hooklist: list[Connection], call_context):
            for hook in hooklist:
                context = {"call_context": call_context, "hook_context": hook.call_context}
                hook.call(self, pulse, source, context)

        call_hooks(self._prehooks, None)
        yield
        call_hooks(self._posthooks, outputs)

    @staticmethod
    def _call_trace(module: Module, pulse: Pulse, source: str, context):
        """The client callback for trace hooks.

        All traces call this, which then calls TRACE_HANDLER_CLIENT.
        This enables you to modify **all** trace operations by setting
        TRACE_HANDLER_CLIENT.
        """
        TRACE_HANDLER_CLIENT(module, pulse, source, context["call_context"])

    def trace(self):
        """Start tracing this module : reports each pulse received, with its outputs."""
        if self._trace_hook is None:
            self._trace_hook = self.hook(self._call_trace, call_after=True)

    def untrace(self):
        """Stop tracing this module."""
        if self._trace_hook is not None:
            self.unhook(self._trace_hook)
        self._trace_hook = None


class Broadcaster(Module):
    KIND = "broadcaster"

    @Module.receiver
    def receive(self, pulse: Pulse, source: str) -> Outputs:
        return self.send(pulse)


class FlipFlop(Module):
    KIND = "flip-flop"

    def __init__(self, name: str, destinations: Iterable[str] = ()):
        super().__init__(name, destinations)
        self.on = False

    @Module.receiver
    def receive(self, pulse: Pulse, source: str) -> Outputs | None:
        if pulse == Pulse.HIGH:
            return None
        self.on = not self.on
        return self.send(Pulse.HIGH if self.on else Pulse.LOW)

    @property
    def state(self) -> bool:
        return self.on

    def state_text(self) -> str:
        return "on" if self.on else "off"

    def reset(self):
        self.on = False


class Conjunction(Module):
    """
    Remembers the latest pulse from each input, and sends low only when all are high.

    The set of inputs is fixed, once only, by Conjunction.connect_inputs.  This is
    normally done by the owning Network, which knows which modules send to this one.
    """

    KIND = "conjunction"

    def __init__(self, name: str, destinations: Iterable[str] = ()):
        super().__init__(name, destinations)
        self.inputs: dict[str, Pulse] = {}
        self._connected = False

    def connect_inputs(self, input_names: Iterable[str]):
        if self._connected:
            msg = f"Inputs of conjunction {self.name!r} are already connected."
            raise ValueError(msg)
        self.inputs = {name: Pulse.LOW for name in input_names}
        self._connected = True

    @property
    def connected(self) -> bool:
        return self._connected

    @Module.receiver
    def receive(self, pulse: Pulse, source: str) -> Outputs:
        if source not in self.inputs:
            msg = (
                f"Conjunction {self.name!r} received a pulse from {source!r}, "
                f"which is not one of its inputs: {sorted(self.inputs)!r}."
            )
            raise ValueError(msg)
        self.inputs[source] = pulse
        all_high = all(value == Pulse.HIGH for value in self.inputs.values())
        return self.send(Pulse.LOW if all_high else Pulse.HIGH)

    @property
    def state(self) -> tuple[tuple[str, Pulse], ...]:
        return tuple(sorted(self.inputs.items(), key=lambda item: item[0]))

    def state_text(self) -> str:
        return ",".join(f"{name}={pulse}" for name, pulse in self.state)

    def reset(self):
        self.inputs = {name: Pulse.LOW for name in self.inputs}
