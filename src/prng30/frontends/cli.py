"""Command-line interface for the Rule 30 generator."""

import argparse
import logging
import sys
import time
from typing import List, Optional

from ..core.automaton import MAX_BITS, MAX_SEED, Rule30Automaton
from ..core.batch_automaton import BatchRule30Automaton
from ..core.runner import GeneratorConfig, SampleRunner
from ..core.statistics import StatisticsExporter, StatisticsReport
from .terminal import AutomatonVisualizer, TerminalDriver

MIN_SIZE = 1
MAX_SIZE = 1024
DICE_BITS = 8

logger = logging.getLogger(__name__)


def resolve_seed(seed: int) -> int:
    """Return seed, or a value derived from the current time when seed is 0."""
    if seed != 0:
        return seed
    now = int(time.time())
    return ((now << 30) + now) & MAX_SEED


def format_value(value: int, bits: int) -> str:
    """Format a value in decimal and zero-padded hexadecimal."""
    hex_width = max(1, (bits + 3) // 4)
    return f"{value} (0x{value:0{hex_width}X})"


class CLIGenerator:
    """Command-line interface for drawing values from Rule 30 automata."""

    def __init__(self, driver: Optional[TerminalDriver] = None):
        """Initialize CLI interface.

        Args:
            driver: Terminal driver used by visualize() (default: ANSI on stdout)
        """
        self.driver = driver

    def generate_values(
        self,
        seed: int,
        size: int,
        bits: int,
        count: int,
        streams: int = 1,
        device: str = "cpu",
        verbose: bool = False,
    ) -> List[List[int]]:
        """Draw count values from each of streams generators.

        Args:
            seed: Seed of the first stream; stream k uses seed + k
            size: Automaton width
            bits: Bit width per value
            count: Values per stream
            streams: Number of independent streams
            device: Device for the batch engine
            verbose: Print progress information

        Returns:
            One list of values per stream
        """
        if verbose:
            print(f"Initializing {streams} automaton stream(s) of width {size} (seed: {seed})")

        if streams == 1:
            automaton = Rule30Automaton(seed, size)
            try:
                return [[automaton.generate(bits) for _ in range(count)]]
            finally:
                automaton.release()

        config = GeneratorConfig(seed=seed, size=size, bits=bits, streams=streams, device=device)
        batch = BatchRule30Automaton(config.stream_seeds(), size, device=device)
        rounds = [batch.generate(bits) for _ in range(count)]
        return [[values[k] for values in rounds] for k in range(streams)]

    def roll_dice(self, seed: int, size: int, sides: int, count: int) -> List[int]:
        """Roll a die with the given number of sides using 8-bit draws.

        Returns:
            List of rolls in [1, sides]
        """
        automaton = Rule30Automaton(seed, size)
        try:
            return [automaton.generate(DICE_BITS) % sides + 1 for _ in range(count)]
        finally:
            automaton.release()

    def run_statistics(self, config: GeneratorConfig, verbose: bool = False) -> StatisticsReport:
        """Run the statistics battery for a configuration."""
        runner = SampleRunner(config, verbose=verbose)
        return runner.run()

    def visualize(self, seed: int, size: int, delay: float) -> int:
        """Animate an automaton in the terminal.

        Returns:
            Number of generations shown
        """
        automaton = Rule30Automaton(seed, size)
        try:
            visualizer = AutomatonVisualizer(automaton, driver=self.driver, delay=delay)
            return visualizer.animate()
        finally:
            automaton.release()


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Generate pseudo-random numbers from a Rule 30 cellular automaton",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # One 32-bit value seeded from the current time
  prng30-cli

  # Five 64-bit values from a fixed seed
  prng30-cli --seed 777 --bits 64 --count 5

  # Wider automaton
  prng30-cli -s 12345 -w 128 -b 16 -c 10

  # Four independent streams computed as one batch
  prng30-cli --seed 42 --streams 4 --count 3

  # Twenty rolls of a six-sided die
  prng30-cli --dice 6 --count 20

  # Statistics battery exported to JSON
  prng30-cli --seed 777 --stats --samples 10000 --export report.json

  # Animate the automaton
  prng30-cli --seed 12345 --size 40 --visualize
        """,
    )

    # Generator configuration
    parser.add_argument(
        "-s",
        "--seed",
        type=int,
        default=0,
        help="Seed value; 0 derives a seed from the current time (default: 0)",
    )

    parser.add_argument(
        "-w",
        "--size",
        type=int,
        default=64,
        help=f"Automaton width, {MIN_SIZE}-{MAX_SIZE} (default: 64)",
    )

    parser.add_argument(
        "-b",
        "--bits",
        type=int,
        default=32,
        help=f"Bit width of each value, 1-{MAX_BITS} (default: 32)",
    )

    parser.add_argument(
        "-c",
        "--count",
        type=int,
        default=1,
        help="Number of values to generate (default: 1)",
    )

    parser.add_argument(
        "--streams",
        type=int,
        default=1,
        help="Number of independent streams; stream k uses seed + k (default: 1)",
    )

    parser.add_argument(
        "--device",
        type=str,
        default="cpu",
        choices=["cpu", "cuda"],
        help="Device for batched streams (default: cpu)",
    )

    parser.add_argument(
        "--dice",
        type=int,
        metavar="SIDES",
        help="Print dice rolls with this many sides instead of raw values",
    )

    # Statistics configuration
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Run the statistics battery and print a report",
    )

    parser.add_argument(
        "--samples",
        type=int,
        default=10000,
        help="Number of values drawn for --stats (default: 10000)",
    )

    parser.add_argument(
        "--export",
        type=str,
        metavar="PATH",
        help="Write the --stats report to a .json or .csv file",
    )

    # Visualization
    parser.add_argument(
        "--visualize",
        action="store_true",
        help="Animate the automaton in the terminal",
    )

    parser.add_argument(
        "--delay",
        type=float,
        default=0.08,
        help="Seconds between animation frames (default: 0.08)",
    )

    # Output configuration
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print detailed progress information and debug logging",
    )

    return parser


def validate_args(args: argparse.Namespace) -> bool:
    """Validate command-line arguments.

    Args:
        args: Parsed arguments

    Returns:
        True if arguments are valid
    """
    errors = []

    if not MIN_SIZE <= args.size <= MAX_SIZE:
        errors.append(f"Size must be between {MIN_SIZE} and {MAX_SIZE}")

    if not 1 <= args.bits <= MAX_BITS:
        errors.append(f"Bit width must be between 1 and {MAX_BITS}")

    if not 0 <= args.seed <= MAX_SEED:
        errors.append(f"Seed must be between 0 and {MAX_SEED}")

    if args.count <= 0:
        errors.append("Count must be positive")

    if args.streams <= 0:
        errors.append("Streams must be positive")

    if args.samples <= 0:
        errors.append("Samples must be positive")
    elif args.stats and args.samples < 3:
        errors.append("Statistics need at least 3 samples")

    if args.dice is not None and not 2 <= args.dice <= 2**DICE_BITS:
        errors.append(f"Dice sides must be between 2 and {2**DICE_BITS}")

    if args.delay < 0:
        errors.append("Delay must be non-negative")

    if args.export and not args.stats:
        errors.append("--export requires --stats")

    if errors:
        print("Error: Invalid arguments:")
        for error in errors:
            print(f"  - {error}")
        return False

    return True


def print_values(streams: List[List[int]], bits: int, verbose: bool) -> None:
    """Print generated values, one per line.

    Args:
        streams: One list of values per stream
        bits: Bit width used to pad the hexadecimal form
        verbose: Number the values and label streams
    """
    for index, values in enumerate(streams):
        if len(streams) > 1:
            print(f"Stream {index}:")
        for i, value in enumerate(values):
            if verbose:
                print(f"{i + 1:3d}: {format_value(value, bits)}")
            else:
                print(format_value(value, bits))


def print_dice(rolls: List[int], sides: int) -> None:
    """Print dice rolls, ten per line."""
    print(f"Rolling {len(rolls)} {sides}-sided dice:")
    for start in range(0, len(rolls), 10):
        print(" ".join(str(roll) for roll in rolls[start : start + 10]))


def main() -> int:
    """Main entry point for CLI interface.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(asctime)s] %(levelname)s: %(message)s",
    )
    logger.debug(f"Arguments: {vars(args)}")

    if not validate_args(args):
        return 1

    cli = CLIGenerator()

    try:
        seed = resolve_seed(args.seed)
        if args.verbose and args.seed == 0:
            print(f"Using seed from current time: {seed}")

        if args.visualize:
            cli.visualize(seed, args.size, args.delay)
            return 0

        if args.stats:
            config = GeneratorConfig(
                seed=seed,
                size=args.size,
                bits=args.bits,
                samples=args.samples,
                streams=args.streams,
                device=args.device,
            )
            report = cli.run_statistics(config, verbose=args.verbose)
            SampleRunner.print_summary(report)

            if args.export:
                StatisticsExporter.export(report, args.export)
                print(f"\nReport written to {args.export}")

            return 0

        if args.dice is not None:
            rolls = cli.roll_dice(seed, args.size, args.dice, args.count)
            print_dice(rolls, args.dice)
            return 0

        streams = cli.generate_values(
            seed,
            args.size,
            args.bits,
            args.count,
            streams=args.streams,
            device=args.device,
            verbose=args.verbose,
        )
        print_values(streams, args.bits, args.verbose)
        return 0

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 1
    except Exception as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
