"""Statistical checks for generated value streams."""

import csv
import json
import math
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

# Chi-squared critical values at 95% confidence, keyed by degrees of freedom
CHI_SQUARED_CRITICAL_95 = {
    1: 3.84,
    2: 5.99,
    3: 7.81,
    4: 9.49,
    5: 11.07,
    6: 12.59,
    7: 14.07,
    8: 15.51,
    9: 16.92,
    10: 18.31,
    15: 25.00,
    20: 31.41,
}


@dataclass
class CheckResult:
    """Outcome of a single statistical check."""

    name: str
    statistic: float
    threshold: float
    passed: bool
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        return asdict(self)


@dataclass
class StatisticsReport:
    """Results of a full battery run over one sample."""

    seed: int
    size: int
    bits: int
    samples: int
    streams: int = 1
    results: List[CheckResult] = field(default_factory=list)
    duration: float = 0.0
    values_per_second: float = 0.0

    @property
    def passed(self) -> bool:
        """Whether every check passed."""
        return all(result.passed for result in self.results)

    def get_result(self, name: str) -> Optional[CheckResult]:
        """Look up a check by name."""
        for result in self.results:
            if result.name == name:
                return result
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert report to dictionary."""
        data = asdict(self)
        data["passed"] = self.passed
        return data


def _as_array(values: Sequence[int]) -> np.ndarray:
    if len(values) == 0:
        raise ValueError("At least one value is required")
    return np.asarray(values, dtype=np.uint64)


def chi_squared_uniformity(
    values: Sequence[int], bins: int = 10, critical_value: Optional[float] = None
) -> CheckResult:
    """Chi-squared goodness of fit of values modulo bins against a uniform distribution.

    Args:
        values: Generated values
        bins: Number of residue classes
        critical_value: Rejection threshold; defaults to the tabulated 95%
            value for bins - 1 degrees of freedom

    Returns:
        CheckResult with the per-bin counts in details

    Raises:
        ValueError: If values is empty, bins < 2, or no critical value is known
    """
    if bins < 2:
        raise ValueError(f"At least two bins are required, got {bins}")

    if critical_value is None:
        degrees_of_freedom = bins - 1
        if degrees_of_freedom not in CHI_SQUARED_CRITICAL_95:
            raise ValueError(
                f"No tabulated critical value for {degrees_of_freedom} degrees of freedom; "
                "pass critical_value explicitly"
            )
        critical_value = CHI_SQUARED_CRITICAL_95[degrees_of_freedom]

    arr = _as_array(values)
    residues = (arr % np.uint64(bins)).astype(np.int64)
    counts = np.bincount(residues, minlength=bins)
    expected = len(arr) / bins
    statistic = float(np.sum((counts - expected) ** 2 / expected))

    return CheckResult(
        name="chi_squared",
        statistic=statistic,
        threshold=critical_value,
        passed=bool(statistic < critical_value),
        details={"bins": bins, "counts": counts.tolist(), "expected": expected},
    )


def bit_distribution(
    values: Sequence[int],
    nbits: int = 64,
    low: float = 0.4,
    high: float = 0.6,
    min_good: Optional[int] = None,
) -> CheckResult:
    """Count bit positions whose frequency of ones falls within [low, high].

    Args:
        values: Generated values
        nbits: Bit positions to inspect
        low: Lower bound on the frequency of ones
        high: Upper bound on the frequency of ones
        min_good: Positions required in range to pass (default: 15/16 of nbits)

    Returns:
        CheckResult whose statistic is the number of good positions
    """
    arr = _as_array(values)
    if min_good is None:
        min_good = int(nbits * 15 / 16)

    frequencies = []
    for bit in range(nbits):
        ones = int(np.count_nonzero((arr >> np.uint64(bit)) & np.uint64(1)))
        frequencies.append(ones / len(arr))

    good = sum(1 for freq in frequencies if low <= freq <= high)

    return CheckResult(
        name="bit_distribution",
        statistic=float(good),
        threshold=float(min_good),
        passed=bool(good >= min_good),
        details={"nbits": nbits, "frequencies": frequencies},
    )


def runs_test(values: Sequence[int], z_threshold: float = 2.0) -> CheckResult:
    """Runs up-and-down test for sequence independence.

    A run ends whenever the direction between consecutive values changes.
    Equal neighbours keep the current direction.

    Args:
        values: Generated values (at least 3)
        z_threshold: Maximum accepted absolute z-score

    Returns:
        CheckResult whose statistic is the absolute z-score
    """
    if len(values) < 3:
        raise ValueError(f"Runs test needs at least 3 values, got {len(values)}")

    runs = 1
    direction = None
    previous = values[0]
    for current in values[1:]:
        if current != previous:
            rising = current > previous
            if direction is not None and rising != direction:
                runs += 1
            direction = rising
        previous = current

    n = len(values)
    expected = (2 * n - 1) / 3
    variance = (16 * n - 29) / 90
    z_score = abs(runs - expected) / math.sqrt(variance)

    return CheckResult(
        name="runs",
        statistic=float(z_score),
        threshold=z_threshold,
        passed=bool(z_score < z_threshold),
        details={"runs": runs, "expected": expected},
    )


def autocorrelation(values: Sequence[int], lag: int = 1, threshold: float = 0.1) -> CheckResult:
    """Pearson correlation between the sequence and itself shifted by lag."""
    if lag < 1:
        raise ValueError(f"Lag must be positive, got {lag}")
    if len(values) <= lag + 1:
        raise ValueError(f"Need more than {lag + 1} values for lag {lag}")

    arr = np.asarray(values, dtype=np.float64)
    correlation = float(np.corrcoef(arr[:-lag], arr[lag:])[0, 1])

    return CheckResult(
        name="autocorrelation",
        statistic=correlation,
        threshold=threshold,
        passed=bool(abs(correlation) < threshold),
        details={"lag": lag},
    )


def birthday_collisions(values: Sequence[int], max_collisions: int = 5) -> CheckResult:
    """Count pairs of equal values."""
    if len(values) == 0:
        raise ValueError("At least one value is required")

    counts = Counter(values)
    collisions = sum(count * (count - 1) // 2 for count in counts.values())

    return CheckResult(
        name="collisions",
        statistic=float(collisions),
        threshold=float(max_collisions),
        passed=bool(collisions < max_collisions),
    )


def zero_fraction(values: Sequence[int], max_fraction: float = 0.01) -> CheckResult:
    """Fraction of values equal to zero."""
    arr = _as_array(values)
    fraction = float(np.count_nonzero(arr == 0)) / len(arr)

    return CheckResult(
        name="zero_fraction",
        statistic=fraction,
        threshold=max_fraction,
        passed=bool(fraction < max_fraction),
    )


def run_battery(values: Sequence[int], bits: int = 32) -> List[CheckResult]:
    """Run every check over one sample of bits-wide values."""
    return [
        chi_squared_uniformity(values),
        bit_distribution(values, nbits=bits),
        runs_test(values),
        autocorrelation(values),
        birthday_collisions(values),
        zero_fraction(values),
    ]


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy types."""

    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, np.bool_):
            return bool(obj)
        return super().default(obj)


class StatisticsExporter:
    """Export statistics reports to various formats."""

    @staticmethod
    def to_json(report: StatisticsReport, filepath: str) -> None:
        """Export a report to JSON format."""
        data = {
            "report": report.to_dict(),
            "metadata": {
                "export_time": datetime.now().isoformat(),
                "seed": report.seed,
                "size": report.size,
                "bits": report.bits,
                "samples": report.samples,
            },
        }

        with open(filepath, "w") as f:
            json.dump(data, f, indent=2, cls=NumpyEncoder)

    @staticmethod
    def to_csv(report: StatisticsReport, filepath: str) -> None:
        """Export one row per check to CSV format."""
        rows = [
            {
                "test": result.name,
                "statistic": result.statistic,
                "threshold": result.threshold,
                "passed": result.passed,
            }
            for result in report.results
        ]

        with open(filepath, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=["test", "statistic", "threshold", "passed"])
            writer.writeheader()
            writer.writerows(rows)

    @staticmethod
    def export(report: StatisticsReport, filepath: str) -> None:
        """Export a report, choosing the format from the file extension.

        Raises:
            ValueError: If the extension is neither .json nor .csv
        """
        suffix = Path(filepath).suffix.lower()
        if suffix == ".json":
            StatisticsExporter.to_json(report, filepath)
        elif suffix == ".csv":
            StatisticsExporter.to_csv(report, filepath)
        else:
            raise ValueError(f"Unsupported export format '{suffix}' (use .json or .csv)")
