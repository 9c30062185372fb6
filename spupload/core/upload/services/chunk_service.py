"""
Upload session call service.

Issues the ``startupload`` / ``continueupload`` / ``finishupload`` calls
of a SharePoint upload session.
"""
from typing import Dict, Type
import time

from ...api.http import HttpTransport, TRANSPORT_ERRORS
from ...auth.digest import AuthContext
from ...destination import Destination, odata_string
from ...exceptions import (
    UploadStepError,
    StartUploadFailed,
    ContinueUploadFailed,
    FinishUploadFailed
)
from ...logging import get_logger

FILE_PATH = "/_api/web/getfilebyserverrelativeurl('{path}')"


class SessionCalls:
    """
    Sends the calls of one upload session for one file.

    Every call carries the auth headers, the form digest and an explicit
    Content-Length. A non-2xx response or a transport error raises the
    step's exception; nothing is retried.
    """

    def __init__(
        self,
        transport: HttpTransport,
        destination: Destination,
        file_name: str,
        auth: AuthContext
    ):
        """
        Initialize session calls.

        Args:
            transport: HTTP transport
            destination: Folder holding the file
            file_name: Name of the (already created) file object
            auth: Auth context of the current upload
        """
        self._transport = transport
        self._auth = auth
        self._file_url = destination.api_url(
            FILE_PATH.format(path=odata_string(destination.file_path(file_name)))
        )
        self._logger = get_logger('spupload.upload.chunk')

    @property
    def file_url(self) -> str:
        """REST URL of the target file."""
        return self._file_url

    def start_url(self, upload_id: str) -> str:
        return f"{self._file_url}/startupload(uploadId=guid'{upload_id}')"

    def continue_url(self, upload_id: str, offset: int) -> str:
        return f"{self._file_url}/continueupload(uploadId=guid'{upload_id}',fileOffset={offset})"

    def finish_url(self, upload_id: str, offset: int) -> str:
        return f"{self._file_url}/finishupload(uploadId=guid'{upload_id}',fileOffset={offset})"

    async def start_upload(self, upload_id: str, data: bytes) -> None:
        """Issue ``startupload`` with the first bytes of the file."""
        await self._send(self.start_url(upload_id), data, StartUploadFailed, 0)

    async def continue_upload(self, upload_id: str, offset: int, data: bytes) -> None:
        """Issue ``continueupload`` with the bytes starting at ``offset``."""
        await self._send(self.continue_url(upload_id, offset), data, ContinueUploadFailed, offset)

    async def finish_upload(self, upload_id: str, offset: int, data: bytes = b'') -> None:
        """Issue ``finishupload`` at ``offset``, optionally carrying the last bytes."""
        await self._send(self.finish_url(upload_id, offset), data, FinishUploadFailed, offset)

    async def _send(
        self,
        url: str,
        data: bytes,
        error: Type[UploadStepError],
        offset: int
    ) -> None:
        headers: Dict[str, str] = self._auth.request_headers({'Content-Length': str(len(data))})
        size_kb = len(data) / 1024

        start = time.time()
        try:
            response = await self._transport.post(url, headers=headers, data=data)
        except TRANSPORT_ERRORS as e:
            elapsed = time.time() - start
            self._logger.error(f"{error.step} at offset {offset} failed after {elapsed:.2f}s: {e}")
            raise error(f"{error.step} request failed: {e}", offset=offset) from e

        elapsed = time.time() - start
        if not response.ok:
            self._logger.error(f"{error.step} at offset {offset} returned HTTP {response.status}")
            raise error(f"{error.step} was rejected", status=response.status, offset=offset)

        speed_kbps = (size_kb / elapsed) if elapsed > 0 else 0
        self._logger.debug(
            f"{error.step} at offset {offset} ({size_kb:.1f} KB) done in {elapsed:.2f}s ({speed_kbps:.1f} KB/s)"
        )
