"""
Credential providers.

A credential provider turns opaque credential material into the HTTP
headers that authenticate requests against a SharePoint site. Callers may
plug in their own provider; the built-in ones cover bearer tokens, raw
headers and the SharePoint Online app-only (add-in) flow.
"""
import json
import re
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple
from urllib.parse import urlencode, urlsplit

from ..api.http import HttpTransport
from ..exceptions import AuthenticationFailed
from ..logging import get_logger

logger = get_logger('spupload.auth')

ACS_TOKEN_URL = 'https://accounts.accesscontrol.windows.net/{realm}/tokens/OAuth/2'
# Principal id of SharePoint itself in Azure ACS
SHAREPOINT_PRINCIPAL = '00000003-0000-0ff1-ce00-000000000000'


class CredentialProvider(Protocol):
    """Protocol for objects producing auth headers for a site."""

    async def get_headers(
        self,
        site_url: str,
        credentials: Mapping[str, Any]
    ) -> Dict[str, str]:
        """
        Produce authentication headers.

        Args:
            site_url: Absolute URL of the site root
            credentials: Credential material

        Returns:
            Headers to attach to every request against the site
        """
        ...


class StaticHeadersProvider:
    """
    Passes through pre-computed authentication.

    Accepts either ``{'headers': {...}}`` or ``{'access_token': '...'}``.
    """

    async def get_headers(
        self,
        site_url: str,
        credentials: Mapping[str, Any]
    ) -> Dict[str, str]:
        if credentials.get('headers'):
            return dict(credentials['headers'])
        token = credentials.get('access_token')
        if token:
            return {'Authorization': f"Bearer {token}"}
        raise AuthenticationFailed("Credentials carry neither 'headers' nor 'access_token'")


class AddinOnlyProvider:
    """
    SharePoint Online app-only authentication through Azure ACS.

    Uses a client id / client secret registered with ``appregnew.aspx``.
    The tenant realm is discovered from the site unless given explicitly.
    """

    def __init__(self, transport: HttpTransport):
        """
        Initialize provider.

        Args:
            transport: HTTP transport used for realm discovery and token requests
        """
        self._transport = transport

    async def get_headers(
        self,
        site_url: str,
        credentials: Mapping[str, Any]
    ) -> Dict[str, str]:
        client_id = credentials.get('client_id')
        client_secret = credentials.get('client_secret')
        if not client_id or not client_secret:
            raise AuthenticationFailed("App-only credentials need 'client_id' and 'client_secret'")

        realm = credentials.get('realm')
        principal = SHAREPOINT_PRINCIPAL
        if not realm:
            realm, principal = await self.discover_realm(site_url)

        token = await self._request_token(site_url, client_id, client_secret, realm, principal)
        return {'Authorization': f"Bearer {token}"}

    async def discover_realm(self, site_url: str) -> Tuple[str, str]:
        """
        Read the tenant realm from the site's ``WWW-Authenticate`` challenge.

        Returns:
            Tuple of (realm, resource principal id)
        """
        response = await self._transport.get(
            f"{site_url}/_vti_bin/client.svc",
            headers={'Authorization': 'Bearer'}
        )
        challenge = _header(response.headers, 'WWW-Authenticate') or ''
        realm = _challenge_param(challenge, 'realm')
        if not realm:
            raise AuthenticationFailed(
                "Site did not return a realm in its challenge",
                status=response.status
            )
        principal = _challenge_param(challenge, 'client_id') or SHAREPOINT_PRINCIPAL
        logger.debug(f"Discovered realm {realm} for {site_url}")
        return realm, principal

    async def _request_token(
        self,
        site_url: str,
        client_id: str,
        client_secret: str,
        realm: str,
        principal: str
    ) -> str:
        host = urlsplit(site_url).netloc
        form = urlencode({
            'grant_type': 'client_credentials',
            'client_id': f"{client_id}@{realm}",
            'client_secret': client_secret,
            'resource': f"{principal}/{host}@{realm}",
        }).encode()

        response = await self._transport.post(
            ACS_TOKEN_URL.format(realm=realm),
            headers={'Content-Type': 'application/x-www-form-urlencoded'},
            data=form
        )
        if not response.ok:
            raise AuthenticationFailed("Token request was rejected", status=response.status)

        try:
            token = json.loads(response.text)['access_token']
        except (ValueError, KeyError, TypeError) as e:
            raise AuthenticationFailed("Token response has no access_token") from e

        logger.debug(f"Obtained app-only token for {host}")
        return token


class DefaultCredentialProvider:
    """
    Picks a provider from the shape of the credentials.

    - ``client_id`` + ``client_secret`` → :class:`AddinOnlyProvider`
    - ``access_token`` or ``headers`` → :class:`StaticHeadersProvider`
    """

    def __init__(self, transport: HttpTransport):
        self._addin = AddinOnlyProvider(transport)
        self._static = StaticHeadersProvider()

    async def get_headers(
        self,
        site_url: str,
        credentials: Mapping[str, Any]
    ) -> Dict[str, str]:
        if credentials.get('client_id'):
            return await self._addin.get_headers(site_url, credentials)
        if credentials.get('access_token') or credentials.get('headers'):
            return await self._static.get_headers(site_url, credentials)
        raise AuthenticationFailed(
            f"Unsupported credentials (keys: {', '.join(sorted(credentials)) or 'none'})"
        )


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    for key, value in headers.items():
        if key.lower() == name.lower():
            return value
    return None


def _challenge_param(challenge: str, name: str) -> Optional[str]:
    match = re.search(rf'{name}="([^"]*)"', challenge)
    return match.group(1) if match else None
