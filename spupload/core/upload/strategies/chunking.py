"""
Chunking strategies for file uploads.

SharePoint accepts arbitrary chunk sizes, so only a fixed-size strategy is
needed; the base class keeps the door open for adaptive ones.
"""
from abc import ABC, abstractmethod
from typing import List, Tuple


class BaseChunkingStrategy(ABC):
    """Abstract base class for chunking strategies."""

    @property
    @abstractmethod
    def chunk_size(self) -> int:
        """Maximum bytes per chunk."""

    @abstractmethod
    def calculate_chunks(self, file_size: int) -> List[Tuple[int, int]]:
        """Calculate chunk boundaries."""

    def fits_single_request(self, file_size: int) -> bool:
        """True when the whole file goes in one request (empty files included)."""
        return file_size <= self.chunk_size


class FixedSizeChunkingStrategy(BaseChunkingStrategy):
    """
    Fixed-size chunking strategy.

    Every chunk is ``chunk_size`` bytes except possibly the last.
    """

    DEFAULT_CHUNK_SIZE = 16 * 1024 * 1024  # 16 MiB

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize with chunk size.

        Args:
            chunk_size: Size of each chunk in bytes
        """
        if chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        self._chunk_size = chunk_size

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def calculate_chunks(self, file_size: int) -> List[Tuple[int, int]]:
        """
        Calculate fixed-size chunk boundaries.

        Args:
            file_size: Total file size in bytes

        Returns:
            List of (start, end) tuples
        """
        if file_size == 0:
            return []

        chunks = []
        position = 0

        while position < file_size:
            end = min(position + self._chunk_size, file_size)
            chunks.append((position, end))
            position = end

        return chunks
