"""Tests for UploadFacade."""
import pytest

from spupload.core.auth import StaticHeadersProvider
from spupload.core.exceptions import FileCreationFailed
from spupload.core.upload import UploadConfig, UploadFacade


class RecordingCreator:
    """File creator that records its calls against the shared transport."""

    def __init__(self, transport, error=None):
        self.transport = transport
        self.error = error
        self.created = []

    async def create_or_overwrite(self, destination, file_name, auth):
        self.created.append((destination.file_path(file_name), auth.form_digest, len(self.transport.calls)))
        if self.error:
            raise self.error


class TestUploadFacade:
    """Test suite for UploadFacade."""

    @pytest.mark.asyncio
    async def test_custom_file_creator(self, transport, destination, credentials, make_file):
        """Test an injected creator runs after the digest and before any upload call."""
        creator = RecordingCreator(transport)
        facade = UploadFacade(transport, StaticHeadersProvider(), chunk_size=16, file_creator=creator)

        result = await facade.upload(destination, credentials, UploadConfig(make_file(40), folder="Archive"))

        [(path, digest, calls_before)] = creator.created
        assert path == "/sites/team/Archive/data.bin"
        assert digest == "0x1234ABCD,17 Oct 2026 10:00:00 -0000"
        assert calls_before == 1
        assert transport.calls_to('/files/add(') == []
        assert len(transport.upload_calls) == 3
        assert result.server_relative_url == path

    @pytest.mark.asyncio
    async def test_creator_failure_stops_upload(self, transport, destination, credentials, make_file):
        creator = RecordingCreator(transport, error=FileCreationFailed("locked", status=423))
        facade = UploadFacade(transport, StaticHeadersProvider(), file_creator=creator)

        with pytest.raises(FileCreationFailed):
            await facade.upload(destination, credentials, UploadConfig(make_file(5)))

        assert transport.upload_calls == []

    @pytest.mark.asyncio
    async def test_default_creator_uses_files_add(self, transport, destination, credentials, make_file):
        facade = UploadFacade(transport, StaticHeadersProvider())

        await facade.upload(destination, credentials, UploadConfig(make_file(5, "a.txt")))

        [create] = transport.calls_to('/files/add(')
        assert "url='a.txt'" in create.url
