"""
File validation and chunked reading services.

Single Responsibility: Each class handles one specific task.
"""
from pathlib import Path
from typing import AsyncIterator, Optional, Tuple, Union
import aiofiles

from ...logging import get_logger


class FileValidator:
    """
    Validates files before upload.

    Responsibilities:
    - Check file existence
    - Verify file is not a directory
    - Get file size
    """

    def validate(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Validate a file for upload.

        Args:
            file_path: Path to the file

        Returns:
            Tuple of (validated Path, file size in bytes)

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If path is not a regular file
        """
        path = Path(file_path) if isinstance(file_path, str) else file_path

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        if not path.is_file():
            raise ValueError(f"Path is not a file: {path}")

        return path, path.stat().st_size


class ChunkSource:
    """
    Lazy, ordered, single-pass chunk reader over a local file.

    The file size is read once up front and treated as authoritative; the
    file must not change while it is being uploaded. The handle is opened
    on first iteration and released when the file is exhausted or the
    source is closed, whichever comes first.

    Example:
        >>> async with ChunkSource(path, 16 * 1024 * 1024) as source:
        ...     async for data in source:
        ...         ...
    """

    def __init__(
        self,
        file_path: Union[str, Path],
        max_chunk_size: int,
        total_size: Optional[int] = None
    ):
        """
        Initialize chunk source.

        Args:
            file_path: Path to the file
            max_chunk_size: Maximum bytes per chunk
            total_size: Known file size (queried from the file if omitted)
        """
        if max_chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        self._path = Path(file_path)
        self._chunk_size = max_chunk_size
        self._total_size = self._path.stat().st_size if total_size is None else total_size
        self._handle = None
        self._started = False
        self._logger = get_logger('spupload.upload.file')

    @property
    def total_size(self) -> int:
        return self._total_size

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    async def __aenter__(self) -> 'ChunkSource':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __aiter__(self) -> AsyncIterator[bytes]:
        if self._started:
            raise RuntimeError(f"Chunk source for {self._path} can only be read once")
        self._started = True
        return self._read_chunks()

    async def _read_chunks(self) -> AsyncIterator[bytes]:
        self._handle = await aiofiles.open(self._path, 'rb')
        position = 0
        try:
            while True:
                data = await self._handle.read(self._chunk_size)
                if not data:
                    break
                self._logger.debug(f"Read chunk: {position}-{position + len(data)} ({len(data)} bytes)")
                position += len(data)
                yield data
        finally:
            await self.close()

    async def close(self) -> None:
        """Release the file handle if it is open."""
        if self._handle is not None:
            await self._handle.close()
            self._handle = None


def open_chunk_source(file_path: Union[str, Path], max_chunk_size: int) -> ChunkSource:
    """Open ``file_path`` as a chunk source; see :class:`ChunkSource`."""
    return ChunkSource(file_path, max_chunk_size)
