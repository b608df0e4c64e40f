"""Rule 30 cellular automaton engine and bit extractor."""

import logging
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)

MAX_SEED = (1 << 64) - 1
DEFAULT_SEED = 0x0123456789ABCDEF
SEED_BITS = 64
MAX_BITS = 64

# Multiplier used to spread seed entropy over columns beyond the 64th
LCG_MULTIPLIER = 6364136223846793005
HASH_BIT = 32

ENTROPY_STRIDE = 7
SMALL_GRID_LIMIT = 128
SMALL_GRID_WARMUP = 30
LARGE_GRID_WARMUP = 50


def check_size(size: int) -> int:
    """Validate an automaton width.

    Args:
        size: Number of columns (and stored rows)

    Returns:
        The size as a plain int

    Raises:
        TypeError: If size is not an integer
        ValueError: If size is not positive
    """
    if not isinstance(size, (int, np.integer)):
        raise TypeError(f"Size must be an integer, got {type(size).__name__}")
    if size <= 0:
        raise ValueError(f"Size must be positive, got {size}")
    return int(size)


def check_seed(seed: int) -> int:
    """Validate a 64-bit unsigned seed.

    Raises:
        TypeError: If seed is not an integer
        ValueError: If seed does not fit in 64 unsigned bits
    """
    if not isinstance(seed, (int, np.integer)):
        raise TypeError(f"Seed must be an integer, got {type(seed).__name__}")
    if not 0 <= seed <= MAX_SEED:
        raise ValueError(f"Seed must be between 0 and {MAX_SEED}, got {seed}")
    return int(seed)


def normalize_seed(seed: int) -> int:
    """Replace the two degenerate seeds (all zeros, all ones) with DEFAULT_SEED."""
    if seed == 0 or seed == MAX_SEED:
        return DEFAULT_SEED
    return seed


def warmup_rounds(size: int) -> int:
    """Number of discarded steps performed after seeding."""
    return SMALL_GRID_WARMUP if size <= SMALL_GRID_LIMIT else LARGE_GRID_WARMUP


def seed_row(seed: int, size: int) -> np.ndarray:
    """Derive the first automaton row from a seed.

    Columns below 64 take the matching seed bit directly. Wider grids fill
    the remaining columns from bit 32 of a multiplicative hash of the seed
    and the column index, computed modulo 2**64. If fewer than a fifth of
    the cells end up set, every 7th cell is flipped.

    Args:
        seed: 64-bit unsigned seed (degenerate values are substituted)
        size: Row width

    Returns:
        uint8 array of length size holding 0/1 cells
    """
    size = check_size(size)
    seed = normalize_seed(check_seed(seed))

    row = np.zeros(size, dtype=np.uint8)
    for i in range(size):
        if i < SEED_BITS:
            row[i] = (seed >> i) & 1
        else:
            hashed = (seed * LCG_MULTIPLIER + i) & MAX_SEED
            row[i] = (hashed >> HASH_BIT) & 1

    if int(row.sum()) < size // 5:
        row[::ENTROPY_STRIDE] ^= 1

    return row


class Rule30Automaton:
    """A seeded Rule 30 automaton used as a pseudo-random bit source.

    The grid holds size x size cells in a single flat buffer addressed as
    row * size + column. Rows are overwritten circularly, and every row
    wraps around at its edges, so the automaton has no boundary.
    """

    def __init__(self, seed: int, size: int) -> None:
        """Seed the automaton and run the warm-up steps.

        Args:
            seed: 64-bit unsigned seed
            size: Number of columns; the grid stores the same number of rows

        Raises:
            TypeError: If seed or size is not an integer
            ValueError: If size is not positive or seed is out of range
        """
        size = check_size(size)
        requested = check_seed(seed)

        self._seed = normalize_seed(requested)
        self._size = size
        self._current_row = 0
        self._cells: Optional[np.ndarray] = np.zeros(size * size, dtype=np.uint8)

        columns = np.arange(size)
        self._left_index = (columns - 1) % size
        self._right_index = (columns + 1) % size
        self._mid = size // 2

        if self._seed != requested:
            logger.debug(f"Degenerate seed {requested:#x} replaced by {self._seed:#x}")

        self._cells[:size] = seed_row(self._seed, size)

        rounds = warmup_rounds(size)
        for _ in range(rounds):
            self.step()

        logger.debug(
            f"Initialized {size}-column automaton (seed {self._seed:#x}, "
            f"{rounds} warm-up steps, current row {self._current_row})"
        )

    @property
    def seed(self) -> int:
        """Effective seed after degenerate-seed substitution."""
        return self._seed

    @property
    def size(self) -> int:
        """Grid width (0 once released)."""
        return self._size

    @property
    def current_row(self) -> int:
        """Index of the most recently computed row."""
        return self._current_row

    @property
    def center_column(self) -> int:
        """Column the output bits are read from."""
        return self._mid

    @property
    def released(self) -> bool:
        """Whether release() has been called."""
        return self._cells is None

    @property
    def rows(self) -> np.ndarray:
        """Copy of the grid as a (size, size) array, one automaton row per line."""
        cells = self._require_cells()
        return cells.reshape(self._size, self._size).copy()

    @property
    def current(self) -> np.ndarray:
        """Copy of the current row."""
        cells = self._require_cells()
        start = self._current_row * self._size
        return cells[start : start + self._size].copy()

    @property
    def population(self) -> int:
        """Number of set cells in the current row."""
        return int(self.current.sum())

    def get_cell(self, row: int, col: int) -> int:
        """Get a cell value, wrapping both coordinates.

        Args:
            row: Row index
            col: Column index

        Returns:
            0 or 1
        """
        cells = self._require_cells()
        row = row % self._size
        col = col % self._size
        return int(cells[row * self._size + col])

    def step(self) -> None:
        """Compute the next row from the current one and advance to it."""
        cells = self._require_cells()
        n = self._size

        start = self._current_row * n
        current = cells[start : start + n]

        next_row = (self._current_row + 1) % n
        target = cells[next_row * n : next_row * n + n]

        # Neighbour reads are copies, so a single-row grid can update in place
        left = current[self._left_index]
        right = current[self._right_index]
        np.bitwise_or(current, right, out=target)
        np.bitwise_xor(left, target, out=target)

        self._current_row = next_row

    def generate(self, nbits: int) -> int:
        """Produce an unsigned integer from the next nbits rows.

        Each bit is center XOR (left AND right), read from the center column
        and its two neighbours of a freshly computed row. Bits are
        accumulated most significant first.

        Args:
            nbits: Requested bit width; clamped to 64, and values <= 0 return
                0 without advancing the automaton

        Returns:
            Integer in [0, 2**nbits)
        """
        cells = self._require_cells()
        if nbits > MAX_BITS:
            nbits = MAX_BITS
        if nbits <= 0:
            return 0

        n = self._size
        mid = self._mid
        left_col = self._left_index[mid]
        right_col = self._right_index[mid]

        out = 0
        for _ in range(nbits):
            self.step()
            start = self._current_row * n
            center = cells[start + mid]
            left = cells[start + left_col]
            right = cells[start + right_col]
            out = (out << 1) | int(center ^ (left & right))

        return out

    def release(self) -> None:
        """Drop the grid buffer. Further use of the automaton raises RuntimeError."""
        if self._cells is None:
            return
        self._cells = None
        self._size = 0
        self._current_row = 0
        logger.debug("Released automaton buffer")

    def _require_cells(self) -> np.ndarray:
        if self._cells is None:
            raise RuntimeError("Automaton has been released")
        return self._cells

    def __enter__(self) -> "Rule30Automaton":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __eq__(self, other: object) -> bool:
        """Check if two automata hold the same grid at the same position."""
        if not isinstance(other, Rule30Automaton):
            return False
        if self.released or other.released:
            return self.released and other.released
        return (
            self._size == other._size
            and self._current_row == other._current_row
            and np.array_equal(self._cells, other._cells)
        )

    def __repr__(self) -> str:
        if self.released:
            return "Rule30Automaton(released)"
        return f"Rule30Automaton(seed={self._seed:#x}, size={self._size}, current_row={self._current_row})"

    def __str__(self) -> str:
        """Rows rendered as '1'/'0' characters, one line per row."""
        grid = self.rows
        return "\n".join("".join("1" if cell else "0" for cell in row) for row in grid)


def initialize(seed: int, size: int) -> Rule30Automaton:
    """Create a warmed-up automaton for the given seed and width."""
    return Rule30Automaton(seed, size)


def step(state: Rule30Automaton) -> None:
    """Advance the automaton by one generation."""
    state.step()


def generate(state: Rule30Automaton, nbits: int) -> int:
    """Extract an nbits-wide unsigned integer, advancing the automaton nbits steps."""
    return state.generate(nbits)


def release(state: Rule30Automaton) -> None:
    """Release the automaton's grid buffer."""
    state.release()
