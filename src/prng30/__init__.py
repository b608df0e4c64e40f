"""Pseudo-random number generation from a Rule 30 cellular automaton."""

__version__ = "0.1.0"

from .core.automaton import Rule30Automaton, initialize, step, generate, release
from .core.batch_automaton import BatchRule30Automaton

__all__ = ["Rule30Automaton", "BatchRule30Automaton", "initialize", "step", "generate", "release"]
