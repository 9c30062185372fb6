"""
SharePointUploader - High-level async client for SharePoint uploads.

Example:
    >>> async with SharePointUploader(
    ...     "https://contoso.sharepoint.com/sites/team/Shared Documents/Reports",
    ...     {"client_id": "...", "client_secret": "..."},
    ... ) as sp:
    ...     await sp.upload("q3.xlsx")
"""
import asyncio
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .core.api import AiohttpTransport, ClientConfig, HttpTransport
from .core.auth import CredentialProvider, DefaultCredentialProvider
from .core.destination import Destination, resolve_destination
from .core.logging import get_logger
from .core.upload import (
    MessageSink,
    ProgressCallback,
    UploadConfig,
    UploadFacade,
    UploadResult
)
from .core.utils import require


class SharePointUploader:
    """
    Uploads local files into a SharePoint document library folder.

    The destination folder is given once as a URL; each :meth:`upload`
    authenticates afresh, gets a new form digest, creates (or overwrites)
    the file and transfers it in chunks. Uploads on one instance share
    only the HTTP connection pool.

    Status lines go to ``logger`` (any callable taking a string) when one
    is given: one per chunk with ``verbose=True`` and one on completion.
    Without it nothing is printed. Diagnostics go through the standard
    ``logging`` module under the ``spupload`` logger names.
    """

    def __init__(
        self,
        url: str,
        credentials: Mapping[str, Any],
        verbose: bool = False,
        logger: Optional[MessageSink] = None,
        config: Optional[ClientConfig] = None,
        credential_provider: Optional[CredentialProvider] = None,
        transport: Optional[HttpTransport] = None
    ):
        """
        Initialize the uploader.

        Args:
            url: URL of the destination folder
                (``https://host/sites/<site>/<library>/<folder...>``)
            credentials: Credential material for the credential provider
            verbose: Report every chunk to ``logger``
            logger: Optional receiver of status lines
            config: Transport and chunk size settings
            credential_provider: Custom credential provider
            transport: Custom HTTP transport (not closed by this client)

        Raises:
            ValueError: If url or credentials are missing
            InvalidDestination: If the URL does not identify a site
        """
        require(url=url, credentials=credentials)

        self._destination = resolve_destination(url)
        self._credentials = credentials
        self._config = config or ClientConfig.default()
        self._owns_transport = transport is None
        self._transport = transport or AiohttpTransport(self._config)
        self._provider = credential_provider or DefaultCredentialProvider(self._transport)
        self._facade = UploadFacade(
            transport=self._transport,
            credential_provider=self._provider,
            chunk_size=self._config.chunk_size,
            sink=logger,
            verbose=verbose
        )
        self._logger = get_logger('spupload.client')

    @property
    def destination(self) -> Destination:
        """Destination resolved from the URL."""
        return self._destination

    @property
    def site_url(self) -> str:
        """Absolute URL of the site root."""
        return self._destination.root_address

    @property
    def folder(self) -> str:
        """Server-relative path of the default folder."""
        return self._destination.folder

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def __aenter__(self) -> 'SharePointUploader':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Release the HTTP session if this client created it."""
        if self._owns_transport:
            await self._transport.close()

    async def upload(
        self,
        file_path: Union[str, Path],
        file_name: Optional[str] = None,
        folder: Optional[str] = None,
        progress_callback: Optional[ProgressCallback] = None,
        timeout: Optional[float] = None
    ) -> UploadResult:
        """
        Upload a file to SharePoint.

        An existing file with the same name is overwritten.

        Args:
            file_path: Local file path
            file_name: Name in SharePoint (defaults to the local name)
            folder: Folder relative to the site root, overriding the URL's folder
            progress_callback: Optional callback for progress updates
            timeout: Optional deadline in seconds for the whole upload

        Returns:
            UploadResult of the transfer

        Raises:
            FileNotFoundError: If the file doesn't exist
            SharePointUploadError: If any remote step fails
            asyncio.TimeoutError: If the deadline passes

        Example:
            await sp.upload("report.pdf", file_name="2024-report.pdf", folder="Archive/2024")
        """
        config = UploadConfig(file_path=Path(file_path), file_name=file_name, folder=folder)
        upload = self._facade.upload(
            self._destination,
            self._credentials,
            config,
            progress_callback=progress_callback
        )

        if timeout is None:
            result = await upload
        else:
            # Abandon on deadline; the partially written file is replaced by the next upload
            result = await asyncio.wait_for(upload, timeout)

        self._logger.info(
            f"Upload finished successfully: {config.file_path.name} -> "
            f"{result.server_relative_url} ({result.size_mb:.2f} MB)"
        )
        return result


async def upload(
    url: str,
    credentials: Mapping[str, Any],
    file_path: Union[str, Path],
    file_name: Optional[str] = None,
    verbose: bool = False,
    logger: Optional[MessageSink] = None,
    config: Optional[ClientConfig] = None
) -> UploadResult:
    """
    One-off upload without managing a client.

    Example:
        await upload(url, {"access_token": token}, "build.zip", verbose=True, logger=print)
    """
    async with SharePointUploader(url, credentials, verbose=verbose, logger=logger, config=config) as sp:
        return await sp.upload(file_path, file_name=file_name)
