"""Tests for the statistics battery."""

import csv
import json

import pytest

from prng30.core.automaton import Rule30Automaton
from prng30.core.statistics import (
    CheckResult,
    StatisticsExporter,
    StatisticsReport,
    autocorrelation,
    birthday_collisions,
    bit_distribution,
    chi_squared_uniformity,
    run_battery,
    runs_test,
    zero_fraction,
)


def draw(seed: int, count: int, bits: int = 32, size: int = 64) -> list:
    """Draw count values from a fresh automaton."""
    automaton = Rule30Automaton(seed, size)
    return [automaton.generate(bits) for _ in range(count)]


class TestChiSquared:
    """Test cases for the chi-squared uniformity check."""

    def test_perfectly_uniform(self):
        """Test an exactly uniform sample has statistic 0."""
        result = chi_squared_uniformity(list(range(1000)), bins=10)
        assert result.statistic == 0.0
        assert result.passed is True
        assert result.threshold == 16.92
        assert result.details["counts"] == [100] * 10

    def test_skewed_sample_fails(self):
        """Test a constant sample fails."""
        result = chi_squared_uniformity([3] * 500, bins=10)
        assert result.passed is False
        assert result.details["counts"][3] == 500

    def test_large_values(self):
        """Test values near 2**64 are reduced correctly."""
        result = chi_squared_uniformity([2**64 - 1, 2**64 - 2], bins=10)
        assert result.details["counts"][5] == 1
        assert result.details["counts"][4] == 1

    def test_generator_sample(self):
        """Test the reference sample passes."""
        result = chi_squared_uniformity(draw(777, 10000))
        assert result.statistic == pytest.approx(7.038)
        assert result.passed is True

    def test_invalid_arguments(self):
        """Test empty samples, too few bins and untabulated bins are rejected."""
        with pytest.raises(ValueError):
            chi_squared_uniformity([])

        with pytest.raises(ValueError):
            chi_squared_uniformity([1, 2, 3], bins=1)

        with pytest.raises(ValueError):
            chi_squared_uniformity([1, 2, 3], bins=14)

    def test_explicit_critical_value(self):
        """Test an explicit critical value overrides the table."""
        result = chi_squared_uniformity(list(range(140)), bins=14, critical_value=22.36)
        assert result.threshold == 22.36
        assert result.passed is True


class TestOtherChecks:
    """Test cases for the remaining checks."""

    def test_bit_distribution_generator(self):
        """Test every bit of 64-bit values is set 40-60% of the time."""
        result = bit_distribution(draw(42, 1000, bits=64), nbits=64)
        assert result.statistic == 64
        assert result.threshold == 60
        assert result.passed is True
        assert len(result.details["frequencies"]) == 64

    def test_bit_distribution_constant(self):
        """Test a constant sample has no good bits."""
        result = bit_distribution([0xFF] * 100, nbits=16)
        assert result.statistic == 0
        assert result.passed is False
        assert result.details["frequencies"][:8] == [1.0] * 8
        assert result.details["frequencies"][8:] == [0.0] * 8

    def test_runs_generator(self):
        """Test the runs test on a reference sample."""
        result = runs_test(draw(888, 1000))
        assert result.details["runs"] == 662
        assert result.statistic == pytest.approx(0.3253, abs=1e-3)
        assert result.passed is True

    def test_runs_monotonic_sequence(self):
        """Test a strictly increasing sequence has a single run and fails."""
        result = runs_test(list(range(100)))
        assert result.details["runs"] == 1
        assert result.passed is False

    def test_runs_alternating_sequence(self):
        """Test an alternating sequence has a run per step."""
        result = runs_test([0, 1] * 50)
        assert result.details["runs"] == 99

    def test_runs_needs_three_values(self):
        """Test the runs test rejects short samples."""
        with pytest.raises(ValueError):
            runs_test([1, 2])

    def test_autocorrelation_generator(self):
        """Test lag-1 autocorrelation of a reference sample is small."""
        result = autocorrelation(draw(1234, 500))
        assert result.statistic == pytest.approx(-0.0093, abs=1e-3)
        assert result.passed is True

    def test_autocorrelation_linear(self):
        """Test a linear ramp is perfectly correlated."""
        result = autocorrelation(list(range(50)))
        assert result.statistic == pytest.approx(1.0)
        assert result.passed is False

    def test_autocorrelation_invalid(self):
        """Test invalid lag and too-short samples are rejected."""
        with pytest.raises(ValueError):
            autocorrelation([1, 2, 3], lag=0)

        with pytest.raises(ValueError):
            autocorrelation([1, 2], lag=1)

    def test_collisions(self):
        """Test pair counting of repeated values."""
        assert birthday_collisions([1, 2, 3]).statistic == 0
        assert birthday_collisions([1, 1, 1, 2, 2]).statistic == 4
        assert birthday_collisions(draw(2468, 500)).statistic == 0

    def test_zero_fraction(self):
        """Test the fraction of zero values."""
        assert zero_fraction([0, 0, 1, 2]).statistic == 0.5
        result = zero_fraction(draw(111, 1000))
        assert result.statistic == 0.0
        assert result.passed is True


class TestReport:
    """Test cases for reports and export."""

    @pytest.fixture
    def report(self):
        """Build a report from a small reference sample."""
        values = draw(777, 2000)
        return StatisticsReport(
            seed=777,
            size=64,
            bits=32,
            samples=len(values),
            results=run_battery(values, bits=32),
            duration=0.5,
            values_per_second=4000.0,
        )

    def test_run_battery(self, report):
        """Test the battery covers every check."""
        names = [result.name for result in report.results]
        assert names == [
            "chi_squared",
            "bit_distribution",
            "runs",
            "autocorrelation",
            "collisions",
            "zero_fraction",
        ]
        assert all(isinstance(result, CheckResult) for result in report.results)
        assert all(type(result.passed) is bool for result in report.results)

    def test_passed_is_plain_bool(self):
        """Test check outcomes are Python bools, not numpy scalars."""
        assert type(runs_test(draw(888, 100)).passed) is bool
        assert type(runs_test(list(range(100))).passed) is bool
        assert type(chi_squared_uniformity([3] * 50).passed) is bool
        assert type(bit_distribution([0xFF] * 10, nbits=16).passed) is bool

    def test_get_result(self, report):
        """Test looking up checks by name."""
        assert report.get_result("runs").name == "runs"
        assert report.get_result("missing") is None

    def test_passed_reflects_results(self):
        """Test the report passes only if every check passes."""
        report = StatisticsReport(seed=1, size=64, bits=32, samples=10)
        report.results.append(CheckResult("a", 0.0, 1.0, True))
        assert report.passed is True

        report.results.append(CheckResult("b", 2.0, 1.0, False))
        assert report.passed is False
        assert report.to_dict()["passed"] is False

    def test_export_json(self, report, tmp_path):
        """Test JSON export."""
        path = tmp_path / "report.json"
        StatisticsExporter.export(report, str(path))

        with open(path) as f:
            data = json.load(f)

        assert data["metadata"]["seed"] == 777
        assert data["metadata"]["samples"] == 2000
        assert len(data["report"]["results"]) == 6
        assert data["report"]["results"][0]["name"] == "chi_squared"

    def test_export_csv(self, report, tmp_path):
        """Test CSV export."""
        path = tmp_path / "report.csv"
        StatisticsExporter.export(report, str(path))

        with open(path, newline="") as f:
            rows = list(csv.DictReader(f))

        assert len(rows) == 6
        assert rows[0]["test"] == "chi_squared"
        assert set(rows[0].keys()) == {"test", "statistic", "threshold", "passed"}

    def test_export_unknown_format(self, report, tmp_path):
        """Test unsupported extensions are rejected."""
        with pytest.raises(ValueError):
            StatisticsExporter.export(report, str(tmp_path / "report.txt"))
