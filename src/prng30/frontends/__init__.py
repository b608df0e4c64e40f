"""Frontend interfaces for the Rule 30 generator."""

from .cli import CLIGenerator
from .terminal import AnsiTerminalDriver, AutomatonVisualizer, TerminalDriver

__all__ = ["CLIGenerator", "AnsiTerminalDriver", "AutomatonVisualizer", "TerminalDriver"]
