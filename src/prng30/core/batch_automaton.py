"""Batch Rule 30 engine running many independently seeded automata as one 3D tensor."""

import logging
from typing import List, Sequence, Tuple

import numpy as np
import torch

from .automaton import MAX_BITS, check_seed, check_size, normalize_seed, seed_row, warmup_rounds

logger = logging.getLogger(__name__)


class BatchRule30Automaton:
    """Multiple Rule 30 automata of the same width stepped in lockstep.

    All grids live in a single (batch_size, size, size) tensor and share the
    current row index. Stream k is bit-identical to a Rule30Automaton built
    from seeds[k]; the batch only vectorises the transition.
    """

    def __init__(self, seeds: Sequence[int], size: int, device: str = "cpu") -> None:
        """Seed and warm up every stream.

        Args:
            seeds: One 64-bit unsigned seed per stream
            size: Number of columns in each grid
            device: Device to place tensors on ('cpu' or 'cuda')

        Raises:
            ValueError: If no seeds are given, a seed is out of range or size is not positive
        """
        if len(seeds) == 0:
            raise ValueError("At least one seed is required")

        size = check_size(size)
        self.seeds = [normalize_seed(check_seed(seed)) for seed in seeds]
        self.batch_size = len(self.seeds)
        self.size = size

        if device == "cuda" and not torch.cuda.is_available():
            logger.warning("CUDA not available, falling back to CPU")
            device = "cpu"
        self.device = torch.device(device)

        # Single-threaded to avoid conflicts with multiprocessing
        torch.set_num_threads(1)

        self._current_row = 0
        self._cells = torch.zeros(self.batch_size, size, size, dtype=torch.uint8, device=self.device)

        initial = np.stack([seed_row(seed, size) for seed in self.seeds])
        self._cells[:, 0, :] = torch.from_numpy(initial).to(self.device)

        self._mid = size // 2
        self._left_col = (self._mid - 1) % size
        self._right_col = (self._mid + 1) % size

        for _ in range(warmup_rounds(size)):
            self.step()

        logger.debug(f"Initialized batch of {self.batch_size} automata ({size} columns) on {self.device}")

    @property
    def cells(self) -> torch.Tensor:
        """Get the grid tensor of shape (batch_size, size, size)."""
        return self._cells

    @property
    def shape(self) -> Tuple[int, int, int]:
        """Get dimensions as (batch_size, size, size)."""
        return (self.batch_size, self.size, self.size)

    @property
    def current_row(self) -> int:
        """Index of the most recently computed row, shared by all streams."""
        return self._current_row

    @property
    def populations(self) -> torch.Tensor:
        """Number of set cells in the current row of each stream.

        Returns:
            Tensor of shape (batch_size,)
        """
        return self._cells[:, self._current_row, :].sum(dim=1)

    def step(self) -> None:
        """Advance every stream by one generation."""
        current = self._cells[:, self._current_row, :]
        left = torch.roll(current, shifts=1, dims=1)
        right = torch.roll(current, shifts=-1, dims=1)

        next_row = (self._current_row + 1) % self.size
        self._cells[:, next_row, :] = left ^ (current | right)
        self._current_row = next_row

    def generate(self, nbits: int) -> List[int]:
        """Extract one nbits-wide unsigned integer per stream.

        Uses the same clamping and bit mixing as Rule30Automaton.generate.

        Args:
            nbits: Requested bit width

        Returns:
            List of batch_size integers in [0, 2**nbits)
        """
        if nbits > MAX_BITS:
            nbits = MAX_BITS
        if nbits <= 0:
            return [0] * self.batch_size

        values = [0] * self.batch_size
        for _ in range(nbits):
            self.step()
            row = self._cells[:, self._current_row, :]
            mixed = row[:, self._mid] ^ (row[:, self._left_col] & row[:, self._right_col])
            values = [(value << 1) | bit for value, bit in zip(values, mixed.tolist())]

        return values

    def extract_single(self, index: int) -> np.ndarray:
        """Extract one stream's grid.

        Args:
            index: Stream index

        Returns:
            uint8 array of shape (size, size)
        """
        return self._cells[index].cpu().numpy().copy()
