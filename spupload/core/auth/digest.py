"""
Form digest acquisition.

Every mutating SharePoint REST call must carry an ``X-RequestDigest``
header. The digest is obtained from ``/_api/contextinfo`` after the
credential provider has produced auth headers, once per upload.
"""
import codecs
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional
from xml.etree import ElementTree

from ..api.http import HttpTransport, TRANSPORT_ERRORS
from ..destination import Destination
from ..exceptions import AuthenticationFailed, DigestUnavailable, SharePointUploadError
from ..logging import get_logger
from .providers import CredentialProvider

logger = get_logger('spupload.auth')

DIGEST_HEADER = 'X-RequestDigest'
FORMS_AUTH_HEADER = 'X-FORMS_BASED_AUTH_ACCEPTED'
CONTEXT_INFO_PATH = '/_api/contextinfo'


@dataclass(frozen=True)
class AuthContext:
    """
    Authentication state of a single upload.

    Attributes:
        headers: Auth headers from the credential provider
        form_digest: Anti-forgery token for mutating calls
        issued_at: When the digest was received (UTC)
        timeout_seconds: Digest lifetime reported by the server, if any
    """
    headers: Dict[str, str]
    form_digest: str
    issued_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    timeout_seconds: Optional[int] = None

    def request_headers(self, extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Auth headers plus the digest header, plus any ``extra`` headers."""
        headers = {**self.headers, DIGEST_HEADER: self.form_digest}
        if extra:
            headers.update(extra)
        return headers


def extract_element_text(body: bytes, local_name: str) -> Optional[str]:
    """
    Text of the first element named ``local_name``, whatever its prefix.

    Parsing stops at the first match, so a body that is malformed after the
    element still yields it. When the parser gives up before the element
    (undeclared prefix, broken markup), the raw body is scanned for the
    open/close tag pair instead. Returns None if neither finds it.
    """
    body = body.lstrip()
    if body.startswith(codecs.BOM_UTF8):
        body = body[len(codecs.BOM_UTF8):].lstrip()

    parser = ElementTree.XMLPullParser(events=('end',))
    try:
        parser.feed(body)
        for _event, element in parser.read_events():
            if element.tag.rsplit('}', 1)[-1] == local_name:
                return (element.text or '').strip()
    except ElementTree.ParseError as e:
        logger.debug(f"Stopped parsing before <{local_name}>: {e}")

    return _scan_element_text(body, local_name)


def _scan_element_text(body: bytes, local_name: str) -> Optional[str]:
    name = re.escape(local_name.encode())
    match = re.search(
        rb'<(?:[\w.-]+:)?' + name + rb'(?:\s[^>]*)?>(.*?)</(?:[\w.-]+:)?' + name + rb'\s*>',
        body,
        re.DOTALL
    )
    if match is None:
        return None
    return match.group(1).decode('utf-8', errors='replace').strip()


def extract_form_digest(body: bytes) -> str:
    """
    Extract the digest value from a ``contextinfo`` response body.

    Raises:
        DigestUnavailable: If the element is missing or empty
    """
    digest = extract_element_text(body, 'FormDigestValue')
    if not digest:
        raise DigestUnavailable("Response has no FormDigestValue")
    return digest


class DigestGate:
    """
    Produces a fresh AuthContext for every upload.

    Nothing is cached between calls: each :meth:`acquire` asks the
    credential provider for headers and requests a new digest.
    """

    def __init__(self, transport: HttpTransport, provider: CredentialProvider):
        """
        Initialize digest gate.

        Args:
            transport: HTTP transport
            provider: Credential provider for the auth headers
        """
        self._transport = transport
        self._provider = provider

    async def acquire(
        self,
        destination: Destination,
        credentials: Mapping[str, Any]
    ) -> AuthContext:
        """
        Authenticate and fetch a form digest.

        Args:
            destination: Resolved destination (its root address is used)
            credentials: Credential material for the provider

        Returns:
            AuthContext for the current upload

        Raises:
            AuthenticationFailed: If the provider fails
            DigestUnavailable: If the digest cannot be obtained
        """
        headers = await self._authenticate(destination.root_address, credentials)

        url = destination.api_url(CONTEXT_INFO_PATH)
        try:
            response = await self._transport.post(
                url,
                headers={**headers, FORMS_AUTH_HEADER: 'f'}
            )
        except TRANSPORT_ERRORS as e:
            raise DigestUnavailable(f"Context info request failed: {e}") from e

        if not response.ok:
            logger.error(f"Context info request returned HTTP {response.status}")
            raise DigestUnavailable("Context info request was rejected", status=response.status)

        digest = extract_form_digest(response.body)
        timeout = extract_element_text(response.body, 'FormDigestTimeoutSeconds')
        logger.debug("Form digest acquired")

        return AuthContext(
            headers=headers,
            form_digest=digest,
            timeout_seconds=int(timeout) if timeout and timeout.isdigit() else None
        )

    async def _authenticate(
        self,
        site_url: str,
        credentials: Mapping[str, Any]
    ) -> Dict[str, str]:
        try:
            headers = await self._provider.get_headers(site_url, credentials)
        except AuthenticationFailed:
            raise
        except SharePointUploadError as e:
            raise AuthenticationFailed(str(e), status=e.status) from e
        except Exception as e:
            raise AuthenticationFailed(f"Credential provider failed: {e}") from e
        logger.debug(f"Authenticated against {site_url}")
        return dict(headers)
