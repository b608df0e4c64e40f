"""Sample runner drawing values from one or many generators and scoring them."""

import logging
import time
from dataclasses import dataclass
from typing import List

from .automaton import MAX_SEED, Rule30Automaton
from .batch_automaton import BatchRule30Automaton
from .statistics import StatisticsReport, run_battery

logger = logging.getLogger(__name__)


@dataclass
class GeneratorConfig:
    """Configuration for a sampling run."""

    seed: int = 777
    size: int = 64
    bits: int = 32
    samples: int = 10000
    streams: int = 1
    device: str = "cpu"

    def stream_seeds(self) -> List[int]:
        """Seeds for each stream: seed, seed + 1, ... wrapped to 64 bits."""
        return [(self.seed + k) & MAX_SEED for k in range(self.streams)]


class SampleRunner:
    """Draws samples according to a GeneratorConfig and runs the statistics battery."""

    def __init__(self, config: GeneratorConfig, verbose: bool = False) -> None:
        """Initialize the runner.

        Args:
            config: Sampling configuration
            verbose: Whether to print progress updates
        """
        if config.samples <= 0:
            raise ValueError(f"Samples must be positive, got {config.samples}")
        if config.streams <= 0:
            raise ValueError(f"Streams must be positive, got {config.streams}")

        self.config = config
        self.verbose = verbose

    def draw(self) -> List[int]:
        """Generate config.samples values.

        With several streams, values are taken round by round: the first
        value of every stream, then the second value of every stream, and
        so on, truncated to the requested sample count.
        """
        config = self.config

        if config.streams == 1:
            automaton = Rule30Automaton(config.seed, config.size)
            try:
                return [automaton.generate(config.bits) for _ in range(config.samples)]
            finally:
                automaton.release()

        batch = BatchRule30Automaton(config.stream_seeds(), config.size, device=config.device)
        rounds = -(-config.samples // config.streams)

        values: List[int] = []
        for _ in range(rounds):
            values.extend(batch.generate(config.bits))
        return values[: config.samples]

    def run(self) -> StatisticsReport:
        """Draw a sample and score it.

        Returns:
            StatisticsReport with timing information
        """
        config = self.config

        if self.verbose:
            print(
                f"Drawing {config.samples} {config.bits}-bit values "
                f"(seed {config.seed}, width {config.size}, streams {config.streams})"
            )

        start_time = time.time()
        values = self.draw()
        duration = time.time() - start_time

        logger.debug(f"Drew {len(values)} values in {duration:.3f}s")

        report = StatisticsReport(
            seed=config.seed,
            size=config.size,
            bits=config.bits,
            samples=len(values),
            streams=config.streams,
            results=run_battery(values, bits=config.bits),
            duration=duration,
            values_per_second=len(values) / duration if duration > 0 else 0.0,
        )
        return report

    @staticmethod
    def print_summary(report: StatisticsReport) -> None:
        """Print a human-readable summary of a report."""
        print("\n" + "=" * 60)
        print("STATISTICS SUMMARY")
        print("=" * 60)
        print(f"Seed: {report.seed}  Width: {report.size}  Bits: {report.bits}  Streams: {report.streams}")
        print(f"Samples: {report.samples}  Duration: {report.duration:.3f}s  Speed: {report.values_per_second:.0f} values/s")
        print()

        for result in report.results:
            status = "PASS" if result.passed else "FAIL"
            print(f"  [{status}] {result.name:<18} statistic={result.statistic:.4f} threshold={result.threshold:.4f}")

            if result.name == "chi_squared":
                counts = result.details["counts"]
                total = sum(counts)
                for i, count in enumerate(counts):
                    print(f"           Bin {i}: {count:5d} ({100.0 * count / total:.1f}%)")

        print()
        print(f"Overall: {'all checks passed' if report.passed else 'some checks failed'}")
