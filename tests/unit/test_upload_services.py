"""Tests for upload services."""
import pytest
from pathlib import Path
import tempfile

import aiohttp

from spupload.core.auth.digest import DIGEST_HEADER, FORMS_AUTH_HEADER
from spupload.core.exceptions import ContinueUploadFailed, FileCreationFailed, StartUploadFailed
from spupload.core.upload.services import (
    ChunkSource,
    FileCreator,
    FileValidator,
    SessionCalls,
    open_chunk_source
)

SITE = "https://contoso.sharepoint.com/sites/team"
FILE_URL = (
    f"{SITE}/_api/web/getfilebyserverrelativeurl("
    "'/sites/team/Shared%20Documents/Reports/a%20b.bin')"
)
UPLOAD_ID = "5f0c1a7e-3b7d-4a54-9f3c-0c6a2b1d9e11"


class TestFileValidator:
    """Test suite for FileValidator."""

    @pytest.fixture
    def validator(self):
        """Create validator instance."""
        return FileValidator()

    def test_validate_existing_file(self, validator, make_file):
        """Test validating existing file."""
        temp_file = make_file(12)

        path, size = validator.validate(temp_file)

        assert path == temp_file
        assert size == 12

    def test_validate_string_path(self, validator, make_file):
        """Test validating string path."""
        temp_file = make_file(3)

        path, _ = validator.validate(str(temp_file))

        assert path == temp_file

    def test_validate_empty_file(self, validator, make_file):
        """Test empty files are accepted."""
        _, size = validator.validate(make_file(0))

        assert size == 0

    def test_validate_nonexistent_file(self, validator):
        """Test validating non-existent file."""
        with pytest.raises(FileNotFoundError):
            validator.validate(Path("/nonexistent/file.txt"))

    def test_validate_directory(self, validator):
        """Test validating directory raises error."""
        with pytest.raises(ValueError):
            validator.validate(Path(tempfile.gettempdir()))


class TestChunkSource:
    """Test suite for ChunkSource."""

    async def _read_all(self, source):
        return [data async for data in source]

    @pytest.mark.asyncio
    async def test_reads_fixed_size_chunks(self, make_file):
        """Test chunks are full-sized except the last."""
        path = make_file(40)

        async with ChunkSource(path, 16) as source:
            chunks = await self._read_all(source)

        assert [len(c) for c in chunks] == [16, 16, 8]
        assert b''.join(chunks) == path.read_bytes()

    @pytest.mark.asyncio
    async def test_exact_multiple(self, make_file):
        """Test no empty trailing chunk."""
        async with ChunkSource(make_file(32), 16) as source:
            chunks = await self._read_all(source)

        assert [len(c) for c in chunks] == [16, 16]

    @pytest.mark.asyncio
    async def test_empty_file(self, make_file):
        """Test an empty file yields nothing."""
        async with ChunkSource(make_file(0), 16) as source:
            chunks = await self._read_all(source)

        assert chunks == []
        assert source.total_size == 0

    def test_total_size_from_file(self, make_file):
        """Test size is read from the file when not given."""
        source = open_chunk_source(make_file(100), 16)

        assert source.total_size == 100
        assert source.chunk_size == 16

    def test_total_size_given(self, make_file):
        """Test a known size is kept as is."""
        source = ChunkSource(make_file(100), 16, total_size=100)

        assert source.total_size == 100

    @pytest.mark.parametrize("chunk_size", [0, -1])
    def test_invalid_chunk_size(self, make_file, chunk_size):
        with pytest.raises(ValueError):
            ChunkSource(make_file(1), chunk_size)

    @pytest.mark.asyncio
    async def test_single_pass(self, make_file):
        """Test the source cannot be iterated twice."""
        source = ChunkSource(make_file(20), 16)
        await self._read_all(source)

        with pytest.raises(RuntimeError):
            source.__aiter__()

    @pytest.mark.asyncio
    async def test_handle_released_when_exhausted(self, make_file):
        """Test the file handle is closed after the last chunk."""
        source = ChunkSource(make_file(20), 16)

        await self._read_all(source)

        assert source._handle is None

    @pytest.mark.asyncio
    async def test_close_midway(self, make_file):
        """Test closing before exhaustion releases the handle."""
        source = ChunkSource(make_file(40), 16)
        iterator = source.__aiter__()
        first = await iterator.__anext__()

        await source.close()

        assert len(first) == 16
        assert source._handle is None

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        """Test reading a file deleted after sizing raises OSError."""
        path = tmp_path / "gone.bin"
        source = ChunkSource(path, 16, total_size=10)

        with pytest.raises(OSError):
            await self._read_all(source)


class TestFileCreator:
    """Test suite for FileCreator."""

    @pytest.fixture
    def creator(self, transport):
        return FileCreator(transport)

    def test_build_url(self, creator, destination):
        """Test the files/add URL escapes folder and name."""
        url = creator.build_url(destination, "Q3 O'Neil.xlsx")

        assert url == (
            f"{SITE}/_api/web/getfolderbyserverrelativeurl("
            "'/sites/team/Shared%20Documents/Reports')"
            "/files/add(url='Q3%20O%27%27Neil.xlsx',overwrite=true)"
        )

    @pytest.mark.asyncio
    async def test_create(self, creator, transport, destination, auth):
        """Test a successful creation request."""
        await creator.create_or_overwrite(destination, "a.txt", auth)

        [call] = transport.calls
        assert call.method == 'POST'
        assert "/files/add(url='a.txt',overwrite=true)" in call.url
        assert call.headers[DIGEST_HEADER] == auth.form_digest
        assert call.headers[FORMS_AUTH_HEADER] == 'f'
        assert call.headers['Authorization'] == 'Bearer token'
        assert call.data is None

    @pytest.mark.asyncio
    async def test_rejected(self, creator, transport, destination, auth):
        """Test non-2xx raises FileCreationFailed with the status."""
        transport.respond('/files/add(', status=404)

        with pytest.raises(FileCreationFailed) as exc_info:
            await creator.create_or_overwrite(destination, "a.txt", auth)

        assert exc_info.value.status == 404
        assert exc_info.value.step == 'files/add'

    @pytest.mark.asyncio
    async def test_transport_error(self, creator, transport, destination, auth):
        """Test connection errors are wrapped and chained."""
        error = aiohttp.ClientConnectionError("refused")
        transport.fail('/files/add(', error)

        with pytest.raises(FileCreationFailed) as exc_info:
            await creator.create_or_overwrite(destination, "a.txt", auth)

        assert exc_info.value.__cause__ is error
        assert exc_info.value.status is None


class TestSessionCalls:
    """Test suite for SessionCalls."""

    @pytest.fixture
    def calls(self, transport, destination, auth):
        return SessionCalls(transport, destination, "a b.bin", auth)

    def test_file_url(self, calls):
        assert calls.file_url == FILE_URL

    def test_step_urls(self, calls):
        """Test the upload id and offset placement."""
        assert calls.start_url(UPLOAD_ID) == f"{FILE_URL}/startupload(uploadId=guid'{UPLOAD_ID}')"
        assert calls.continue_url(UPLOAD_ID, 16) == (
            f"{FILE_URL}/continueupload(uploadId=guid'{UPLOAD_ID}',fileOffset=16)"
        )
        assert calls.finish_url(UPLOAD_ID, 40) == (
            f"{FILE_URL}/finishupload(uploadId=guid'{UPLOAD_ID}',fileOffset=40)"
        )

    @pytest.mark.asyncio
    async def test_start_upload(self, calls, transport, auth):
        """Test start carries body, digest and Content-Length."""
        await calls.start_upload(UPLOAD_ID, b'abcdef')

        [call] = transport.calls
        assert call.url == calls.start_url(UPLOAD_ID)
        assert call.data == b'abcdef'
        assert call.headers['Content-Length'] == '6'
        assert call.headers[DIGEST_HEADER] == auth.form_digest

    @pytest.mark.asyncio
    async def test_empty_finish(self, calls, transport):
        """Test an empty finish still sends a zero Content-Length."""
        await calls.finish_upload(UPLOAD_ID, 6)

        [call] = transport.calls
        assert call.data == b''
        assert call.headers['Content-Length'] == '0'

    @pytest.mark.asyncio
    async def test_rejected_continue(self, calls, transport):
        """Test a rejected continue reports step, status and offset."""
        transport.respond('/continueupload(', status=500)

        with pytest.raises(ContinueUploadFailed) as exc_info:
            await calls.continue_upload(UPLOAD_ID, 32, b'x')

        error = exc_info.value
        assert error.status == 500
        assert error.offset == 32
        assert str(error) == "[continueupload] continueupload was rejected (HTTP 500)"

    @pytest.mark.asyncio
    async def test_transport_error(self, calls, transport):
        """Test timeouts become the step's error."""
        transport.fail('/startupload(', aiohttp.ServerTimeoutError("slow"))

        with pytest.raises(StartUploadFailed) as exc_info:
            await calls.start_upload(UPLOAD_ID, b'x')

        assert isinstance(exc_info.value.__cause__, aiohttp.ServerTimeoutError)
