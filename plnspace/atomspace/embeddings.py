"""Embedding buffer backing an AtomSpace.

Each atom owns one row of a single contiguous float32 block of shape
(capacity, width). Reasoning never reads or writes these rows; they are
reserved for learned representations.

Example:
    rng = np.random.default_rng(42)
    with EmbeddingBuffer(capacity=100, width=32, rng=rng) as buffer:
        row = buffer.view(0)  # shape (32,), a view into the block
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

__all__ = ["EmbeddingBuffer"]

logger = logging.getLogger(__name__)


class EmbeddingBuffer:
    """Contiguous float32 storage for atom embeddings.

    The buffer is allocated once for the full capacity and released as a
    whole. It can be used as a context manager to scope the allocation.

    Attributes:
        name: Name of the block (used in views and logs)
        capacity: Number of rows
        width: Row width (embedding dimension)
    """

    def __init__(
        self,
        capacity: int,
        width: int,
        name: str = "atom_embeddings",
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """Allocate the block.

        Args:
            capacity: Number of rows (one per atom)
            width: Embedding dimension
            name: Block name
            rng: Random generator; rows are drawn uniformly from [-1, 1]
                when given, zero-filled otherwise

        Raises:
            ValueError: If capacity or width is negative
        """
        if capacity < 0 or width < 0:
            raise ValueError(
                f"Embedding buffer shape must be non-negative, got ({capacity}, {width})"
            )

        self.name = name
        self.capacity = capacity
        self.width = width

        if rng is None:
            self._data: Optional[np.ndarray] = np.zeros((capacity, width), dtype=np.float32)
        else:
            self._data = rng.uniform(-1.0, 1.0, size=(capacity, width)).astype(np.float32)

        logger.debug(f"Allocated {name}: {capacity}x{width} float32 ({self.nbytes} bytes)")

    def __enter__(self) -> "EmbeddingBuffer":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @property
    def allocated(self) -> bool:
        """Whether the block is still allocated."""
        return self._data is not None

    @property
    def nbytes(self) -> int:
        """Size of the block in bytes (0 once released)."""
        return 0 if self._data is None else int(self._data.nbytes)

    def view(self, row: int) -> np.ndarray:
        """Return a view of one row of the block.

        Args:
            row: Row index (atom handle)

        Returns:
            1-D float32 array sharing memory with the block

        Raises:
            RuntimeError: If the buffer has been released
            IndexError: If row is out of range
        """
        if self._data is None:
            raise RuntimeError(f"{self.name} has been released")
        if not 0 <= row < self.capacity:
            raise IndexError(f"Row {row} out of range for {self.name} ({self.capacity} rows)")
        return self._data[row]

    def close(self) -> None:
        """Release the block. Safe to call more than once."""
        if self._data is not None:
            logger.debug(f"Released {self.name}")
        self._data = None
