"""Terminal animation of a Rule 30 automaton."""

import sys
import time
from abc import ABC, abstractmethod
from typing import List, Optional, TextIO

from ..core.automaton import Rule30Automaton

HIGHLIGHT_COLOR = "\033[31m"
ONE_COLOR = "\033[34m"
ZERO_COLOR = "\033[90m"
RESET = "\033[0m"


class TerminalDriver(ABC):
    """Minimal terminal capabilities the visualizer depends on."""

    @abstractmethod
    def clear_screen(self) -> None:
        """Clear the screen and move the cursor home."""

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Pause between frames."""

    @abstractmethod
    def write_line(self, text: str) -> None:
        """Write one line of output."""


class AnsiTerminalDriver(TerminalDriver):
    """Terminal driver using ANSI escape sequences on a text stream."""

    CLEAR = "\033[2J\033[H"

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def clear_screen(self) -> None:
        self.stream.write(self.CLEAR)
        self.stream.flush()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)

    def write_line(self, text: str) -> None:
        self.stream.write(text + "\n")
        self.stream.flush()


class AutomatonVisualizer:
    """Animates an automaton row by row through a TerminalDriver.

    The center column is highlighted over a window of size // 2 rows
    starting at row `start`, marking the cells a bit reader would sample.
    """

    def __init__(
        self,
        automaton: Rule30Automaton,
        driver: Optional[TerminalDriver] = None,
        delay: float = 0.08,
        color: bool = True,
        start: Optional[int] = None,
    ) -> None:
        """Initialize the visualizer.

        Args:
            automaton: Automaton to animate; it is stepped during animate()
            driver: Terminal driver (default: ANSI on stdout)
            delay: Seconds between frames
            color: Whether to emit ANSI colors
            start: First highlighted row (default: derived from the clock)
        """
        if automaton.released:
            raise RuntimeError("Automaton has been released")

        self.automaton = automaton
        self.driver = driver if driver is not None else AnsiTerminalDriver()
        self.delay = delay
        self.color = color

        size = automaton.size
        self.start = (start if start is not None else int(time.time())) % size

    def in_highlight_window(self, row: int) -> bool:
        """Check whether a row falls in the highlighted window, wrapping circularly."""
        size = self.automaton.size
        if size <= 0:
            return False

        end = (self.start + size // 2) % size
        if self.start < end:
            return self.start <= row < end
        return row >= self.start or row < end

    def format_row(self, row: int) -> str:
        """Render one grid row as space-separated cells."""
        automaton = self.automaton
        mid = automaton.center_column
        highlight_row = self.in_highlight_window(row)

        cells = []
        for col in range(automaton.size):
            bit = automaton.get_cell(row, col)
            if not self.color:
                cells.append(str(bit))
            elif highlight_row and col == mid:
                cells.append(f"{HIGHLIGHT_COLOR}{bit}{RESET}")
            elif bit:
                cells.append(f"{ONE_COLOR}{bit}{RESET}")
            else:
                cells.append(f"{ZERO_COLOR}{bit}{RESET}")
        return " ".join(cells)

    def render(self, start_row: int, count: int) -> List[str]:
        """Render count rows beginning at start_row, wrapping circularly."""
        size = self.automaton.size
        return [self.format_row((start_row + i) % size) for i in range(min(count, size))]

    def animate(self) -> int:
        """Step the automaton size - 1 times, redrawing after each step.

        Returns:
            Number of steps performed
        """
        automaton = self.automaton
        size = automaton.size
        total = max(size - 1, 0)
        start_row = automaton.current_row

        for generation in range(total):
            self.driver.clear_screen()
            self.driver.write_line(f"Generation {generation + 1}/{total}")
            for line in self.render(start_row, generation + 1):
                self.driver.write_line(line)

            automaton.step()
            self.driver.sleep(self.delay)

        self.driver.clear_screen()
        self.driver.write_line(f"Generation {total}/{total} (final)")
        for line in self.render(start_row, total):
            self.driver.write_line(line)

        return total
