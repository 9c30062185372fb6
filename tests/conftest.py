"""Pytest fixtures for spupload tests."""
from typing import Dict, List, Optional
from dataclasses import dataclass

import pytest

from spupload.core.api.http import HttpResponse
from spupload.core.auth import AuthContext
from spupload.core.destination import resolve_destination

SITE_URL = "https://contoso.sharepoint.com/sites/team/Shared Documents/Reports"

DIGEST_XML = (
    b'<?xml version="1.0" encoding="utf-8"?>'
    b'<d:GetContextWebInformation xmlns:d="http://schemas.microsoft.com/ado/2007/08/dataservices"'
    b' xmlns:m="http://schemas.microsoft.com/ado/2007/08/dataservices/metadata">'
    b'<d:FormDigestTimeoutSeconds m:type="Edm.Int32">1800</d:FormDigestTimeoutSeconds>'
    b'<d:FormDigestValue>0x1234ABCD,17 Oct 2026 10:00:00 -0000</d:FormDigestValue>'
    b'<d:LibraryVersion>16.0.0.0</d:LibraryVersion>'
    b'</d:GetContextWebInformation>'
)
DIGEST_VALUE = "0x1234ABCD,17 Oct 2026 10:00:00 -0000"


@dataclass
class RecordedCall:
    """One request seen by the fake transport."""
    method: str
    url: str
    headers: Dict[str, str]
    data: Optional[bytes]

    @property
    def size(self) -> int:
        return len(self.data) if self.data is not None else 0


class FakeTransport:
    """
    In-memory transport recording every request.

    Responses are chosen by URL fragment; the most recently registered
    matching rule wins. Context info calls answer with a valid digest
    unless overridden, everything else answers 200 with an empty body.
    """

    def __init__(self):
        self.calls: List[RecordedCall] = []
        self.closed = False
        self._rules = []
        self.respond('/_api/contextinfo', body=DIGEST_XML)

    def respond(self, fragment: str, status: int = 200, body: bytes = b'', headers=None):
        self._rules.append((fragment, HttpResponse(status=status, body=body, headers=headers or {})))
        return self

    def fail(self, fragment: str, error: Exception):
        self._rules.append((fragment, error))
        return self

    async def post(self, url, headers, data=None):
        return self._handle('POST', url, headers, data)

    async def get(self, url, headers):
        return self._handle('GET', url, headers, None)

    async def close(self):
        self.closed = True

    def _handle(self, method, url, headers, data):
        self.calls.append(RecordedCall(method, url, dict(headers), bytes(data) if data is not None else None))
        for fragment, outcome in reversed(self._rules):
            if fragment in url:
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        return HttpResponse(status=200)

    def calls_to(self, fragment: str) -> List[RecordedCall]:
        """Requests whose URL contains ``fragment``."""
        return [call for call in self.calls if fragment in call.url]

    @property
    def upload_calls(self) -> List[RecordedCall]:
        """Start, continue and finish calls, in order."""
        return [
            call for call in self.calls
            if any(step in call.url for step in ('/startupload(', '/continueupload(', '/finishupload('))
        ]


class MemorySource:
    """Chunk source over in-memory parts with a declared size."""

    def __init__(self, parts: List[bytes], total_size: Optional[int] = None):
        self._parts = parts
        self.total_size = sum(len(p) for p in parts) if total_size is None else total_size
        self.read = 0

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for part in self._parts:
            self.read += 1
            yield part


@pytest.fixture
def transport():
    """Fake transport with default successful responses."""
    return FakeTransport()


@pytest.fixture
def destination():
    """Destination for the Reports folder of the team site."""
    return resolve_destination(SITE_URL)


@pytest.fixture
def auth():
    """Auth context with a bearer header and a digest."""
    return AuthContext(headers={'Authorization': 'Bearer token'}, form_digest=DIGEST_VALUE)


@pytest.fixture
def credentials():
    """Bearer credentials."""
    return {'access_token': 'token'}


@pytest.fixture
def make_file(tmp_path):
    """Factory writing a file of ``size`` bytes with a repeating pattern."""
    def _make(size: int, name: str = "data.bin"):
        path = tmp_path / name
        pattern = bytes(range(256))
        path.write_bytes((pattern * (size // 256 + 1))[:size])
        return path
    return _make


@pytest.fixture
def site_url():
    """Folder URL used by the client tests."""
    return SITE_URL


@pytest.fixture
def digest_xml():
    """A contextinfo response body."""
    return DIGEST_XML


@pytest.fixture
def memory_source():
    """Factory for in-memory chunk sources."""
    return MemorySource
