"""
Upload facade.

Runs the whole pipeline of one upload: validate the file, authenticate,
fetch the digest, create the file object, then hand over to the
coordinator. Follows Facade Pattern - hides the subsystem wiring.
"""
from typing import Any, Mapping, Optional

from ..api.config import DEFAULT_CHUNK_SIZE
from ..api.http import HttpTransport
from ..auth import CredentialProvider, DigestGate
from ..destination import Destination
from ..logging import get_logger
from .coordinator import UploadCoordinator
from .models import UploadConfig, UploadResult
from .protocols import FileCreatorProtocol, MessageSink, ProgressCallback
from .services import ChunkSource, FileCreator, FileValidator
from .strategies import FixedSizeChunkingStrategy


class UploadFacade:
    """
    Simplified interface for SharePoint uploads.

    Each :meth:`upload` builds its own destination, auth context and
    session, so concurrent uploads through one facade are independent.

    Example:
        >>> facade = UploadFacade(transport, provider)
        >>> result = await facade.upload(destination, credentials, UploadConfig("report.pdf"))
    """

    def __init__(
        self,
        transport: HttpTransport,
        credential_provider: CredentialProvider,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        sink: Optional[MessageSink] = None,
        verbose: bool = False,
        file_creator: Optional[FileCreatorProtocol] = None
    ):
        """
        Initialize upload facade.

        Args:
            transport: HTTP transport shared by all calls
            credential_provider: Produces auth headers for the site
            chunk_size: Maximum bytes per upload call
            sink: Optional receiver of human-readable status lines
            verbose: Send a status line per chunk to the sink
            file_creator: Creates the target file object (``files/add`` by default)
        """
        self._transport = transport
        self._gate = DigestGate(transport, credential_provider)
        self._creator = file_creator or FileCreator(transport)
        self._validator = FileValidator()
        self._chunking = FixedSizeChunkingStrategy(chunk_size)
        self._sink = sink
        self._verbose = verbose
        self._logger = get_logger('spupload.upload')

    async def upload(
        self,
        destination: Destination,
        credentials: Mapping[str, Any],
        config: UploadConfig,
        progress_callback: Optional[ProgressCallback] = None
    ) -> UploadResult:
        """
        Upload a file.

        Args:
            destination: Destination resolved from the client URL
            credentials: Credential material for the provider
            config: What to upload and where
            progress_callback: Optional callback for progress updates

        Returns:
            UploadResult of the transfer

        Raises:
            FileNotFoundError: If the file doesn't exist
            SharePointUploadError: If any remote step fails
        """
        path, file_size = self._validator.validate(config.file_path)
        target = destination.with_folder(config.folder)
        self._logger.debug(f"Uploading {path} to {target.file_path(config.file_name)}")

        auth = await self._gate.acquire(target, credentials)
        await self._creator.create_or_overwrite(target, config.file_name, auth)

        coordinator = UploadCoordinator(
            transport=self._transport,
            chunking_strategy=self._chunking,
            progress_callback=progress_callback,
            sink=self._sink,
            verbose=self._verbose
        )
        async with ChunkSource(path, self._chunking.chunk_size, total_size=file_size) as source:
            return await coordinator.run(target, config.file_name, source, auth)
