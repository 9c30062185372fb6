"""
Protocol definitions for upload module.

Defines the seams of the upload pipeline so every collaborator can be
replaced, in tests or by callers with special needs.
"""
from typing import AsyncIterator, Callable, Protocol

from ..auth.digest import AuthContext
from ..destination import Destination
from .models import UploadProgress

# Receives human-readable status lines
MessageSink = Callable[[str], None]

# Receives structured progress after every acknowledged chunk
ProgressCallback = Callable[[UploadProgress], None]


class ChunkSourceProtocol(Protocol):
    """Protocol for the lazy, ordered byte source of an upload."""

    @property
    def total_size(self) -> int:
        """Size of the file, queried once before reading."""
        ...

    def __aiter__(self) -> AsyncIterator[bytes]:
        """Yield chunks of at most the configured size, in file order."""
        ...


class FileCreatorProtocol(Protocol):
    """Protocol for creating the target file object."""

    async def create_or_overwrite(
        self,
        destination: Destination,
        file_name: str,
        auth: AuthContext
    ) -> None:
        """
        Create the file, replacing any file of the same name.

        Raises:
            FileCreationFailed: If the server rejects the call
        """
        ...


class SessionCallsProtocol(Protocol):
    """Protocol for the three upload session calls."""

    async def start_upload(self, upload_id: str, data: bytes) -> None:
        """Issue ``startupload`` with the first bytes of the file."""
        ...

    async def continue_upload(self, upload_id: str, offset: int, data: bytes) -> None:
        """Issue ``continueupload`` at ``offset``."""
        ...

    async def finish_upload(self, upload_id: str, offset: int, data: bytes = b'') -> None:
        """Issue ``finishupload`` at ``offset``."""
        ...
