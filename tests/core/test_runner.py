"""Tests for the sample runner."""

from io import StringIO
from unittest.mock import patch

import pytest

from prng30.core.automaton import Rule30Automaton
from prng30.core.runner import GeneratorConfig, SampleRunner


class TestGeneratorConfig:
    """Test cases for GeneratorConfig."""

    def test_defaults(self):
        """Test default configuration values."""
        config = GeneratorConfig()
        assert config.seed == 777
        assert config.size == 64
        assert config.bits == 32
        assert config.samples == 10000
        assert config.streams == 1
        assert config.device == "cpu"

    def test_stream_seeds(self):
        """Test consecutive seeds per stream, wrapping at 64 bits."""
        assert GeneratorConfig(seed=10, streams=3).stream_seeds() == [10, 11, 12]
        assert GeneratorConfig(seed=2**64 - 1, streams=2).stream_seeds() == [2**64 - 1, 0]


class TestSampleRunner:
    """Test cases for SampleRunner."""

    def test_invalid_config(self):
        """Test non-positive samples or streams are rejected."""
        with pytest.raises(ValueError):
            SampleRunner(GeneratorConfig(samples=0))

        with pytest.raises(ValueError):
            SampleRunner(GeneratorConfig(streams=0))

    def test_draw_single_stream(self):
        """Test a single stream matches a plain automaton."""
        runner = SampleRunner(GeneratorConfig(seed=777, samples=5))
        assert runner.draw() == [3287382806, 4261388766, 2080293923, 951638523, 1811464902]

    def test_draw_multiple_streams(self):
        """Test values interleave round by round and are truncated."""
        config = GeneratorConfig(seed=100, size=32, bits=16, samples=7, streams=3)
        values = SampleRunner(config).draw()

        automata = [Rule30Automaton(seed, 32) for seed in [100, 101, 102]]
        expected = []
        for _ in range(3):
            expected.extend(automaton.generate(16) for automaton in automata)

        assert len(values) == 7
        assert values == expected[:7]

    def test_run(self):
        """Test a run produces a full report."""
        config = GeneratorConfig(seed=777, samples=2000)
        report = SampleRunner(config).run()

        assert report.seed == 777
        assert report.samples == 2000
        assert report.streams == 1
        assert len(report.results) == 6
        assert report.duration >= 0
        assert report.get_result("chi_squared") is not None

    @patch("sys.stdout", new_callable=StringIO)
    def test_run_verbose(self, mock_stdout):
        """Test verbose runs announce what they draw."""
        SampleRunner(GeneratorConfig(seed=5, samples=100), verbose=True).run()
        assert "Drawing 100 32-bit values" in mock_stdout.getvalue()

    @patch("sys.stdout", new_callable=StringIO)
    def test_print_summary(self, mock_stdout):
        """Test the printed summary lists every check."""
        report = SampleRunner(GeneratorConfig(seed=777, samples=1000)).run()
        SampleRunner.print_summary(report)

        output = mock_stdout.getvalue()
        assert "STATISTICS SUMMARY" in output
        assert "chi_squared" in output
        assert "Bin 9:" in output
        assert "Overall:" in output
