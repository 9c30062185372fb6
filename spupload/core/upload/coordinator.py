"""
Upload coordinator.

Drives one SharePoint upload session from the first byte to the finish
call. Files that fit in one chunk take the single-shot path (start with
the whole body, then finish at the file size); larger files are sent as
start / continue... / finish, strictly in source order.
"""
import time
from typing import Callable, Optional

from ..api.http import HttpTransport
from ..auth.digest import AuthContext
from ..destination import Destination
from ..exceptions import FinishUploadFailed, SmallUploadFailed, UploadStepError
from ..logging import get_logger
from ..utils import bytes_to_mb, format_percentage
from .models import SessionStatus, UploadProgress, UploadResult, UploadSession
from .protocols import ChunkSourceProtocol, MessageSink, ProgressCallback, SessionCallsProtocol
from .services import SessionCalls
from .strategies import BaseChunkingStrategy, FixedSizeChunkingStrategy

logger = get_logger('spupload.upload.coordinator')

CallsFactory = Callable[[HttpTransport, Destination, str, AuthContext], SessionCallsProtocol]


class UploadCoordinator:
    """
    Coordinates the chunk transfer of a single file.

    One coordinator may run many uploads; all per-upload state lives in the
    UploadSession created by :meth:`run`. There is no retry: the first
    failing call aborts the upload and no further call is made.
    """

    def __init__(
        self,
        transport: HttpTransport,
        chunking_strategy: Optional[BaseChunkingStrategy] = None,
        progress_callback: Optional[ProgressCallback] = None,
        sink: Optional[MessageSink] = None,
        verbose: bool = False,
        calls_factory: CallsFactory = SessionCalls
    ):
        """
        Initialize upload coordinator.

        Args:
            transport: HTTP transport for the session calls
            chunking_strategy: Decides the chunk size (16 MiB fixed by default)
            progress_callback: Optional callback for progress updates
            sink: Optional receiver of human-readable status lines
            verbose: Send a status line to the sink after every chunk
            calls_factory: Builds the session call sender for a file
        """
        self._transport = transport
        self._chunking = chunking_strategy or FixedSizeChunkingStrategy()
        self._progress_callback = progress_callback
        self._sink = sink
        self._verbose = verbose
        self._calls_factory = calls_factory

    @property
    def chunk_size(self) -> int:
        return self._chunking.chunk_size

    async def run(
        self,
        destination: Destination,
        file_name: str,
        source: ChunkSourceProtocol,
        auth: AuthContext
    ) -> UploadResult:
        """
        Transfer the source into the (already created) file object.

        Args:
            destination: Folder holding the file
            file_name: Name of the file object
            source: Chunk source of the local file
            auth: Auth context of the current upload

        Returns:
            Upload result

        Raises:
            SmallUploadFailed: If the single-shot path fails
            StartUploadFailed, ContinueUploadFailed, FinishUploadFailed:
                If a call of the chunked path fails
        """
        session = UploadSession(total_size=source.total_size)
        calls = self._calls_factory(self._transport, destination, file_name, auth)
        logger.info(f"Starting upload: {file_name} ({bytes_to_mb(session.total_size)} MB, session {session.id})")

        start = time.time()
        try:
            if self._chunking.fits_single_request(session.total_size):
                requests = await self._upload_small(calls, session, source)
            else:
                requests = await self._upload_chunked(calls, session, source)
        except Exception:
            session.fail()
            raise

        elapsed = time.time() - start
        logger.info(f"Upload of {file_name} finished in {elapsed:.2f}s ({requests} data calls)")
        if self._sink:
            self._emit(f"File {file_name} uploaded")

        return UploadResult(
            file_name=file_name,
            server_relative_url=destination.file_path(file_name),
            size=session.offset,
            upload_id=session.id,
            chunks=requests
        )

    async def _upload_small(
        self,
        calls: SessionCallsProtocol,
        session: UploadSession,
        source: ChunkSourceProtocol
    ) -> int:
        """Single-shot path: whole body in ``startupload``, empty ``finishupload``."""
        logger.debug("File fits in one request, using single-shot upload")
        data = b''.join([part async for part in source])

        try:
            await calls.start_upload(session.id, data)
            session.advance(len(data))
            await calls.finish_upload(session.id, session.total_size, b'')
        except UploadStepError as e:
            raise SmallUploadFailed(
                f"Single-shot upload failed during {e.step}",
                status=e.status,
                call=e.step,
                offset=e.offset
            ) from e

        session.finish()
        self._report(session)
        return 1

    async def _upload_chunked(
        self,
        calls: SessionCallsProtocol,
        session: UploadSession,
        source: ChunkSourceProtocol
    ) -> int:
        """Chunked path: start, continue at each offset, finish with the last bytes."""
        planned = len(self._chunking.calculate_chunks(session.total_size))
        logger.info(f"File split into {planned} chunks of up to {bytes_to_mb(self.chunk_size)} MB")

        sent = 0
        async for data in source:
            chunk = session.chunk(data, is_first=sent == 0)

            if chunk.is_first:
                await calls.start_upload(session.id, chunk.data)
            elif chunk.is_last:
                await calls.finish_upload(session.id, chunk.offset, chunk.data)
            else:
                await calls.continue_upload(session.id, chunk.offset, chunk.data)

            session.advance(chunk.size)
            sent += 1
            self._report(session)

            if chunk.is_last and not chunk.is_first:
                session.finish()
                break

        if session.status is not SessionStatus.FINISHED:
            # The file changed size after it was measured
            raise FinishUploadFailed(
                f"Source ended at offset {session.offset} of {session.total_size} declared bytes "
                f"without a final chunk; the file must not change during upload",
                offset=session.offset
            )
        return sent

    def _report(self, session: UploadSession) -> None:
        progress = UploadProgress(
            bytes_transferred=session.offset,
            total_size=session.total_size
        )
        logger.debug(f"Progress: {progress.bytes_transferred}/{progress.total_size} ({progress.percent:.2f}%)")

        if self._progress_callback:
            try:
                self._progress_callback(progress)
            except Exception as e:
                logger.warning(f"Progress callback failed: {e}")

        if self._verbose and self._sink:
            self._emit(
                f"Uploaded {bytes_to_mb(session.offset)} of {bytes_to_mb(session.total_size)} MB "
                f"({format_percentage(session.offset, session.total_size)})"
            )

    def _emit(self, message: str) -> None:
        try:
            self._sink(message)
        except Exception as e:
            logger.warning(f"Message sink failed: {e}")
