from pulsenet import Extrapolator, ModuleDefinition, Network, Sequencer

# broadcaster -> a, b, c; %a -> b; %b -> c; %c -> inv; &inv -> a
SIMPLE_DEFS = [
    ModuleDefinition("broadcaster", "broadcaster", ("a", "b", "c")),
    ModuleDefinition("a", "flip-flop", ("b",)),
    ModuleDefinition("b", "flip-flop", ("c",)),
    ModuleDefinition("c", "flip-flop", ("inv",)),
    ModuleDefinition("inv", "conjunction", ("a",)),
]

# broadcaster -> a; %a -> inv, con; &inv -> b; %b -> con; &con -> output
OUTPUT_DEFS = [
    ModuleDefinition("broadcaster", "broadcaster", ("a",)),
    ModuleDefinition("a", "flip-flop", ("inv", "con")),
    ModuleDefinition("inv", "conjunction", ("b",)),
    ModuleDefinition("b", "flip-flop", ("con",)),
    ModuleDefinition("con", "conjunction", ("output",)),
]


def run():
    network = Network(OUTPUT_DEFS)
    print(f"\nstate : {network.state_text()}")

    network.trace()
    network["con"].trace()
    # network["a"].trace()
    # network["inv"].trace()

    seq = Sequencer(network)
    for i_press in range(2):
        print(f"\nPRESS {i_press}:")
        tally = seq.press()
        print(f"tally : {tally}")
        print(f"state : {network.state_text()}")

    network.untrace()
    network["con"].untrace()

    extrap = Extrapolator(network, verbose=True)
    total = extrap.total(1000)
    print(f"\nAfter 1000 presses : {total}, product = {total.product}")

    print("Done")


if __name__ == "__main__":
    run()
