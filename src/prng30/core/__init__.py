"""Core Rule 30 generator logic."""

from .automaton import Rule30Automaton, initialize, step, generate, release
from .batch_automaton import BatchRule30Automaton
from .runner import GeneratorConfig, SampleRunner
from .statistics import CheckResult, StatisticsReport, StatisticsExporter

__all__ = [
    "Rule30Automaton",
    "BatchRule30Automaton",
    "initialize",
    "step",
    "generate",
    "release",
    "GeneratorConfig",
    "SampleRunner",
    "CheckResult",
    "StatisticsReport",
    "StatisticsExporter",
]
