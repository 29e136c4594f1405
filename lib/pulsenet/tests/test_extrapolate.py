import pytest

from ex_network import OUTPUT_DEFS, SIMPLE_DEFS
from pulsenet import (
    Cycle,
    Extrapolator,
    Network,
    PressTally,
    PulseEvent,
    Pulse,
    simulate_pulses,
    total_pulses,
)

# The memory of 'y' goes high on the first press and stays high : the initial state
# never recurs.
TRANSIENT_DEFS = [
    ("broadcaster", "broadcaster", ["x"]),
    ("x", "conjunction", ["y"]),
    ("y", "conjunction", ["f"]),
    ("f", "flip-flop", ["sink"]),
]

# A ripple counter, with conjunctions watching it.
COUNTER_DEFS = [
    ("broadcaster", "broadcaster", ["a"]),
    ("a", "flip-flop", ["b", "con"]),
    ("b", "flip-flop", ["c", "con"]),
    ("c", "flip-flop", ["con"]),
    ("con", "conjunction", ["inv"]),
    ("inv", "conjunction", ["sink"]),
]

ALL_DEFS = {
    "simple": SIMPLE_DEFS,
    "output": OUTPUT_DEFS,
    "transient": TRANSIENT_DEFS,
    "counter": COUNTER_DEFS,
}


class TestScenarios:
    def test_simple(self):
        assert total_pulses(Network(SIMPLE_DEFS), 1000) == (8000, 4000)

    def test_output(self):
        assert total_pulses(Network(OUTPUT_DEFS), 1000) == (4250, 2750)

    def test_huge_count(self):
        count = 10**18
        result = total_pulses(Network(SIMPLE_DEFS), count)
        assert result == (8 * count, 4 * count)


class TestCycle:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("simple", Cycle(0, 1)),
            ("output", Cycle(0, 4)),
            ("transient", Cycle(1, 2)),
        ],
    )
    def test_find(self, name, expected):
        extrap = Extrapolator(Network(ALL_DEFS[name]))
        assert extrap.find_cycle() == expected
        assert len(extrap.history) == expected.start + expected.length

    def test_str(self):
        assert str(Cycle(1, 2)) == "presses [1, 3)"

    def test_limit(self):
        extrap = Extrapolator(Network(OUTPUT_DEFS))
        assert extrap.find_cycle(limit=2) is None
        assert len(extrap.history) == 2
        assert extrap.find_cycle() == Cycle(0, 4)

    def test_advance_stops(self):
        extrap = Extrapolator(Network(SIMPLE_DEFS))
        assert extrap.advance() is None
        assert extrap.advance() == Cycle(0, 1)
        assert extrap.advance() == Cycle(0, 1)
        assert len(extrap.history) == 1

    def test_history(self):
        network = Network(OUTPUT_DEFS)
        initial = network.state()
        extrap = Extrapolator(network)
        extrap.find_cycle()
        states = [state for state, _ in extrap.history]
        tallies = [tally for _, tally in extrap.history]
        assert states[0] == initial
        assert len(set(states)) == 4
        assert tallies == [
            PressTally(4, 4),
            PressTally(4, 2),
            PressTally(5, 3),
            PressTally(4, 2),
        ]


class TestTotal:
    def test_transient_leading_and_trailing(self):
        extrap = Extrapolator(Network(TRANSIENT_DEFS))
        # Per-press tallies go (3, 2), then alternate (4, 1), (3, 2) ...
        assert extrap.total(5) == PressTally(17, 8)
        assert extrap.total(6) == PressTally(21, 9)
        assert extrap.total(1001) == PressTally(3 + 500 * 7, 2 + 500 * 3)
        assert extrap.cycle == Cycle(1, 2)

    def test_reuse_below_cycle(self):
        extrap = Extrapolator(Network(OUTPUT_DEFS))
        assert extrap.total(1000) == PressTally(4250, 2750)
        assert extrap.total(2) == PressTally(8, 6)
        assert extrap.total(3) == PressTally(13, 9)

    def test_lazy(self):
        extrap = Extrapolator(Network(OUTPUT_DEFS))
        assert extrap.total(2) == PressTally(8, 6)
        assert len(extrap.history) == 2
        assert extrap.cycle is None

    def test_zero(self):
        extrap = Extrapolator(Network(OUTPUT_DEFS))
        assert extrap.total(0) == PressTally()
        assert extrap.history == []

    def test_negative_fail(self):
        msg = "Press count must not be negative, got -1"
        with pytest.raises(ValueError, match=msg):
            Extrapolator(Network(OUTPUT_DEFS)).total(-1)
        with pytest.raises(ValueError, match=msg):
            total_pulses(Network(OUTPUT_DEFS), -1)
        with pytest.raises(ValueError, match=msg):
            simulate_pulses(Network(OUTPUT_DEFS), -1)

    def test_verbose(self, capsys):
        extrap = Extrapolator(Network(OUTPUT_DEFS), verbose=True)
        extrap.total(10)
        out = capsys.readouterr().out
        assert "Press 0: low=4, high=4" in out
        assert "Found cycle at press 4: presses [0, 4)." in out
        assert "Extrapolated 10 presses : 0 leading, 2 cycles of 4, 2 trailing." in out


class TestTotalPulses:
    def test_zero_presses_nothing_simulated(self):
        network = Network(OUTPUT_DEFS)
        records = []
        network.connect(lambda *args: records.append(args))
        assert total_pulses(network, 0) == (0, 0)
        assert records == []

    def test_negative_keeps_state(self):
        network = Network(OUTPUT_DEFS)
        network.deliver(PulseEvent("broadcaster", "a", Pulse.LOW))
        state = network.state()
        msg = "Press count must not be negative, got -1"
        with pytest.raises(ValueError, match=msg):
            total_pulses(network, -1)
        assert network.state() == state
        assert network["a"].on

    def test_repeatable_same_network(self):
        network = Network(OUTPUT_DEFS)
        first = total_pulses(network, 1000)
        second = total_pulses(network, 1000)
        assert first == second == (4250, 2750)

    def test_fresh_networks_agree(self):
        results = [total_pulses(Network(COUNTER_DEFS), 777) for _ in range(3)]
        assert results[0] == results[1] == results[2]


class TestAgainstBruteForce:
    @pytest.mark.parametrize("name", list(ALL_DEFS))
    @pytest.mark.parametrize("press_count", [1, 2, 3, 4, 5, 7, 8, 9, 16, 17, 50, 123])
    def test_match(self, name, press_count):
        defs = ALL_DEFS[name]
        expected = simulate_pulses(Network(defs), press_count)
        assert total_pulses(Network(defs), press_count) == expected

    def test_counter_has_cycle(self):
        extrap = Extrapolator(Network(COUNTER_DEFS))
        cycle = extrap.find_cycle(limit=1000)
        assert cycle is not None
        assert cycle.length > 1

    def test_simulate_known(self):
        assert simulate_pulses(Network(OUTPUT_DEFS), 4) == (17, 11)
        assert simulate_pulses(Network(SIMPLE_DEFS), 3) == (24, 12)
