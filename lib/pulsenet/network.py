"""
Network support.

A Network owns a fixed set of named Modules, built once from a list of
ModuleDefinitions, and routes pulses between them with Network.deliver(event).

Wiring is completed in the constructor : every Conjunction is given, as its inputs,
exactly the set of modules which list it as a destination.  After construction the
topology never changes, only the module states.

Destinations which name no module are "sinks" : pulses sent to them are absorbed, and
deliver() returns no further events.  This is not an error.

Network.state() gives a canonical, hashable snapshot of all the module states, suitable
as a dictionary key for detecting repeats.

We also provide Network.connect/disconnect and Network.trace/untrace.
A connected client is called after every deliver() with the event and its results.
Tracing connects a standard client, which calls TRACE_HANDLER_CLIENT : its default is
the 'default_trace_action' function, which prints to the terminal.
"""

from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterable, Iterator, Mapping, TypeAlias

from pulsenet.event import Connection, PulseEvent
from pulsenet.module import Conjunction, Module, ModuleKind

__all__ = ["BROADCASTER_NAME", "ModuleDefinition", "Network", "SystemState"]


#: Conventional name of the entry module, which receives the button pulses.
BROADCASTER_NAME = "broadcaster"

SystemState: TypeAlias = tuple[tuple[str, object], ...]


@dataclass(frozen=True)
class ModuleDefinition:
    """A module, as supplied by whatever reads the network description."""

    name: str
    kind: ModuleKind
    destinations: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "destinations", tuple(self.destinations))


DefinitionTypes = ModuleDefinition | tuple[str, ModuleKind, Iterable[str]]


def default_trace_action(
    event: PulseEvent, new_events: list[PulseEvent], network: Network | None = None
):
    """The default trace operation = print each delivered pulse to the terminal.

    N.B. the passed 'context' argument is **always the network which this is a trace
    of**.
    """
    msg = str(event)
    if network is not None and event.destination not in network:
        msg += "  (sink)"
    print(msg)


# : A single common definition for what network trace actions do.
TRACE_HANDLER_CLIENT: Callable[..., None] = default_trace_action


class Network:
    def __init__(
        self, definitions: Iterable[DefinitionTypes], entry: str = BROADCASTER_NAME
    ):
        self.entry = entry
        self._modules: dict[str, Module] = {}
        for definition in definitions:
            if not isinstance(definition, ModuleDefinition):
                definition = ModuleDefinition(*definition)
            name = definition.name
            if name in self._modules:
                raise ValueError(f"Module name {name!r} is defined more than once.")
            module = Module.create(definition.kind, name, definition.destinations)
            self._modules[name] = module

        if not self._modules:
            raise ValueError("Cannot build a network with no modules.")
        if entry not in self._modules:
            msg = (
                f"Network has no entry module {entry!r} : "
                f"modules are {sorted(self._modules)!r}."
            )
            raise ValueError(msg)
        if isinstance(self._modules[entry], Conjunction):
            # The button is never one of a conjunction's inputs.
            msg = (
                f"Entry module {entry!r} is a conjunction : "
                "it cannot receive button pulses."
            )
            raise ValueError(msg)

        # Wire all the conjunctions, before any pulse can be delivered.
        # A conjunction which nothing sends to gets no inputs, and is never reached.
        for name, module in self._modules.items():
            if isinstance(module, Conjunction):
                module.connect_inputs(self.inputs_of(name))

        self.connected_clients: list[Connection] = []
        # This is a placeholder for the (unique) trace connection
        self._trace_connection: Connection | None = None

    def __repr__(self):
        return f"Network<{len(self)} modules, entry={self.entry!r}>"

    # Read-only mapping-style access to the modules.

    def __getitem__(self, name: str) -> Module:
        return self._modules[name]

    def __contains__(self, name: object) -> bool:
        return name in self._modules

    def __iter__(self) -> Iterator[str]:
        return iter(self._modules)

    def __len__(self) -> int:
        return len(self._modules)

    @property
    def modules(self) -> Mapping[str, Module]:
        return MappingProxyType(self._modules)

    def inputs_of(self, name: str) -> list[str]:
        """Return the names of all modules that send to the named one."""
        return [
            module.name
            for module in self._modules.values()
            if name in module.destinations
        ]

    def deliver(self, event: PulseEvent) -> list[PulseEvent]:
        """Deliver one pulse, returning the new pulse events which it causes.

        The destination module, if any, receives the pulse, and each of its outputs
        becomes a new event sent from it.  A pulse to an unknown destination causes
        nothing further.
        N.B. counting the pulse itself is up to the caller.
        """
        module = self._modules.get(event.destination, None)
        if module is None:
            new_events = []
        else:
            outputs = module.receive(event.pulse, event.source)
            new_events = [
                PulseEvent(module.name, destination, pulse)
                for destination, pulse in outputs
            ]
        for connection in self.connected_clients:
            connection.call(event, new_events, connection.call_context)
        return new_events

    def state(self) -> SystemState:
        """Return a canonical snapshot of the states of all the stateful modules.

        This is a tuple of (name, state) pairs, sorted by name, so that equal states
        always compare and hash equal.  Stateless modules are omitted.
        """
        return tuple(
            (name, module.state)
            for name, module in sorted(self._modules.items())
            if module.KIND != "broadcaster"
        )

    def state_text(self) -> str:
        """Printable form of the network state, like 'a:on;inv:a=high,b=low'."""
        return ";".join(
            f"{name}:{module.state_text()}"
            for name, module in sorted(self._modules.items())
            if module.KIND != "broadcaster"
        )

    def reset(self):
        """Return every module to its initial state."""
        for module in self._modules.values():
            module.reset()

    # Connections + tracing

    def connect(
        self, call: Callable[..., None], call_context=None, index: int = -1
    ) -> Connection:
        """Create a connection, called after each deliver().

        The client is called as call(event, new_events, call_context).
        The index governs where the connection is installed in the (current) connections
        list, for ordering control: -1[default] --> last; 0 --> first.
        """
        connection = Connection(call, call_context)
        if index == -1:
            self.connected_clients.append(connection)
        else:
            self.connected_clients[index:index] = [connection]
        return connection  # this enables us to remove it

    def disconnect(self, connection: Connection):
        """Remove a given connection."""
        while connection in self.connected_clients:
            self.connected_clients.remove(connection)

    @staticmethod
    def _call_trace(event: PulseEvent, new_events: list[PulseEvent], network: Network):
        """The client callback for trace connections.

        All traces call this, which then calls TRACE_HANDLER_CLIENT.
        """
        TRACE_HANDLER_CLIENT(event, new_events, network)  # N.B. the network is the context

    def trace(self):
        """Start tracing the network : reports every delivered pulse."""
        if self._trace_connection is None:
            self._trace_connection = self.connect(
                self._call_trace,
                call_context=self,
                # N.B. always insert trace at **start** of connections, so it happens
                # before other clients.
                index=0,
            )

    def untrace(self):
        """Stop tracing the network."""
        if self._trace_connection is not None:
            self.disconnect(self._trace_connection)
        self._trace_connection = None
