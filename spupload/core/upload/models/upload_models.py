"""
Data models for upload module.

Uses dataclasses for type-safe data structures.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from pathlib import Path
import uuid

from ...utils import percentage


class SessionStatus(str, Enum):
    """Lifecycle of an upload session. Transitions only move forward."""
    CREATED = 'created'
    TRANSFERRING = 'transferring'
    FINISHED = 'finished'
    FAILED = 'failed'

    @property
    def is_terminal(self) -> bool:
        return self in (SessionStatus.FINISHED, SessionStatus.FAILED)


@dataclass(frozen=True)
class Chunk:
    """
    A contiguous slice of the source file.

    Attributes:
        data: Chunk bytes
        offset: Position of the first byte in the file
        is_first: True for the chunk at offset 0
        is_last: True iff ``offset + size == total_size``
    """
    data: bytes
    offset: int
    is_first: bool
    is_last: bool

    @property
    def size(self) -> int:
        """Returns chunk size."""
        return len(self.data)

    @property
    def end(self) -> int:
        """Offset right after the chunk."""
        return self.offset + len(self.data)


@dataclass
class UploadSession:
    """
    State of one start/continue/finish sequence.

    The id is generated fresh for every session and never reused. ``offset``
    counts the bytes acknowledged by the server and only moves through
    :meth:`advance`.

    Attributes:
        total_size: Declared size of the source file
        id: Upload id sent as ``uploadId=guid'...'``
        offset: Bytes acknowledged so far
        status: Current status
    """
    total_size: int
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    offset: int = 0
    status: SessionStatus = SessionStatus.CREATED

    def chunk(self, data: bytes, is_first: bool) -> Chunk:
        """Wrap bytes read from the source as the next chunk."""
        return Chunk(
            data=data,
            offset=self.offset,
            is_first=is_first,
            is_last=self.offset + len(data) == self.total_size
        )

    def advance(self, size: int) -> None:
        """Record ``size`` more bytes as acknowledged."""
        self._ensure_active()
        if size < 0:
            raise ValueError("Offset can only move forward")
        self.status = SessionStatus.TRANSFERRING
        self.offset += size

    def finish(self) -> None:
        self._ensure_active()
        self.status = SessionStatus.FINISHED

    def fail(self) -> None:
        if not self.status.is_terminal:
            self.status = SessionStatus.FAILED

    def _ensure_active(self) -> None:
        if self.status.is_terminal:
            raise RuntimeError(f"Upload session {self.id} is already {self.status.value}")


@dataclass(frozen=True)
class UploadProgress:
    """
    Upload progress information, emitted after each acknowledged chunk.

    Attributes:
        bytes_transferred: Bytes acknowledged so far
        total_size: Declared file size
    """
    bytes_transferred: int
    total_size: int

    @property
    def percent(self) -> float:
        """Returns upload progress as percentage, rounded to 2 decimals."""
        return percentage(self.bytes_transferred, self.total_size)

    @property
    def is_complete(self) -> bool:
        """Returns True if upload is complete."""
        return self.bytes_transferred >= self.total_size


@dataclass
class UploadConfig:
    """
    Configuration for a single upload.

    Attributes:
        file_path: Path to file to upload
        file_name: Name of the file in SharePoint (defaults to the local name)
        folder: Optional folder override, relative to the site root
    """
    file_path: Path
    file_name: Optional[str] = None
    folder: Optional[str] = None

    def __post_init__(self):
        """Validate and normalize config."""
        if isinstance(self.file_path, str):
            self.file_path = Path(self.file_path)

        if not self.file_name:
            self.file_name = self.file_path.name


@dataclass(frozen=True)
class UploadResult:
    """
    Result of a successful upload.

    Attributes:
        file_name: Name of the uploaded file
        server_relative_url: Server-relative path of the file
        size: Bytes transferred
        upload_id: Session id used for the transfer
        chunks: Number of data-carrying calls issued
    """
    file_name: str
    server_relative_url: str
    size: int
    upload_id: str
    chunks: int

    @property
    def size_mb(self) -> float:
        return self.size / (1024 * 1024)

