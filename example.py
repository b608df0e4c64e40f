#!/usr/bin/env python3
"""
Example usage of the prng30 package.
"""

import time

from prng30 import BatchRule30Automaton, Rule30Automaton


def main():
    """Demonstrate programmatic usage of the prng30 package."""
    # Basic generation
    with Rule30Automaton(12345, 64) as automaton:
        print("Generating 10 random 32-bit numbers:")
        for i in range(10):
            value = automaton.generate(32)
            print(f"{i + 1:2d}: {value:10d} (0x{value:08X})")
    print()

    # Different bit widths
    with Rule30Automaton(99999, 64) as automaton:
        for bits in [8, 16, 32, 64]:
            value = automaton.generate(bits)
            print(f"{bits:2d}-bit random: {value:20d} (0x{value:0{bits // 4}X})")
    print()

    # Dice rolls from a time-based seed
    seed = int(time.time())
    with Rule30Automaton(seed, 64) as automaton:
        rolls = [automaton.generate(8) % 6 + 1 for _ in range(20)]
    print(f"Rolling 20 dice (seed: {seed}):")
    print(" ".join(str(roll) for roll in rolls))
    print()

    # Different automaton sizes
    for size in [32, 64, 128]:
        with Rule30Automaton(777, size) as automaton:
            values = [automaton.generate(32) for _ in range(5)]
        print(f"Size {size:3d}: " + " ".join(f"{value:10d}" for value in values))
    print()

    # Several independent streams computed as one batch
    batch = BatchRule30Automaton([1, 2, 3, 4], 64)
    for round_index in range(3):
        print(f"Round {round_index + 1}: {batch.generate(32)}")
    print()

    # Distribution across 10 bins
    with Rule30Automaton(54321, 64) as automaton:
        bins = [0] * 10
        for _ in range(10000):
            bins[automaton.generate(32) % 10] += 1

    print("Distribution across 10 bins (expected ~1000 per bin):")
    for i, count in enumerate(bins):
        print(f"Bin {i}: {count:4d} " + "#" * (count // 50))


if __name__ == "__main__":
    main()
