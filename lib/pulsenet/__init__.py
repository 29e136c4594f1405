"""
Pulse Network Simulation

Provides a Network of named Modules, which send binary Pulses (low or high) to each
other over fixed, directed wires.

A Module has an ordered list of destination names, and a single transition,
"receive(pulse, source)", which returns the (destination, pulse) outputs it sends in
response.  There are three kinds :
  * a Broadcaster re-sends every pulse to all its destinations.
  * a FlipFlop ignores high pulses, and toggles on low ones, sending high when it
    switches on and low when it switches off.
  * a Conjunction remembers the latest pulse from each of its inputs, and sends low only
    when they are all high.

A Network is built once from ModuleDefinitions, and it works out the inputs of each
Conjunction.  It delivers one PulseEvent at a time to the addressed module.

A Sequencer processes events through a Network strictly first-in first-out.  A button
press sends one low pulse to the entry module ("broadcaster") and runs until no events
remain, giving a PressTally of the low and high pulses seen.

An Extrapolator counts pulses over any number of presses : it watches the network state
before each press, and as soon as one repeats it computes the rest arithmetically.
"total_pulses(network, press_count)" is the usual entry point.

Modules and networks can be traced : modules report each pulse they receive, and
networks report each pulse delivered.
"""

# Import the major commonly used definitions into the root module.
from .event import Connection, Pulse, PulseEvent, PressTally, as_pulse
from .module import Broadcaster, Conjunction, FlipFlop, Module
from .network import BROADCASTER_NAME, ModuleDefinition, Network
from .sequencer import BUTTON_NAME, Sequencer
from .extrapolate import Cycle, Extrapolator, simulate_pulses, total_pulses

__all__ = [
    "BROADCASTER_NAME",
    "BUTTON_NAME",
    "Broadcaster",
    "Conjunction",
    "Connection",
    "Cycle",
    "Extrapolator",
    "FlipFlop",
    "Module",
    "ModuleDefinition",
    "Network",
    "PressTally",
    "Pulse",
    "PulseEvent",
    "Sequencer",
    "as_pulse",
    "simulate_pulses",
    "total_pulses",
]
