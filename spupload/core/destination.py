"""
Destination resolution.

Turns a SharePoint folder URL such as
``https://contoso.sharepoint.com/sites/team/Shared Documents/Reports``
into the pieces the REST API needs: the site root address and the
server-relative folder path.
"""
from dataclasses import dataclass, replace
from typing import Optional
from urllib.parse import quote, unquote, urlsplit

from .exceptions import InvalidDestination


def odata_string(value: str) -> str:
    """
    Encodes a value for use inside a quoted OData string literal in a URL.

    Single quotes are doubled and everything outside the path-safe
    characters is percent-encoded.

    Example:
        >>> odata_string("/sites/team/Shared Documents/O'Brien.txt")
        "/sites/team/Shared%20Documents/O%27%27Brien.txt"
    """
    return quote(value.replace("'", "''"), safe='/')


@dataclass(frozen=True)
class Destination:
    """
    Resolved upload destination.

    Attributes:
        site_slug: First path segment (``sites``, ``teams``...)
        site: Site name
        relative_folder: Folder path below the site, ``''`` for the site root
        root_address: Absolute URL of the site, base of every REST call
    """
    site_slug: str
    site: str
    relative_folder: str
    root_address: str

    @property
    def folder(self) -> str:
        """Server-relative folder path, e.g. ``/sites/team/Shared Documents``."""
        return f"/{self.site_slug}/{self.site}{self.relative_folder}"

    def with_folder(self, folder: Optional[str]) -> 'Destination':
        """
        Returns a copy pointing at another folder of the same site.

        Only the folder below the site changes; the site itself never does.

        Args:
            folder: Folder path relative to the site root
        """
        if not folder:
            return self
        return replace(self, relative_folder=_normalize_folder(folder))

    def file_path(self, file_name: str) -> str:
        """Server-relative path of a file in this folder."""
        return f"{self.folder}/{file_name}"

    def api_url(self, path: str) -> str:
        """Joins a REST path (``/_api/...``) onto the site root."""
        return f"{self.root_address}{path}"


def _normalize_folder(folder: str) -> str:
    segments = [unquote(part) for part in folder.split('/') if part]
    if not segments:
        return ''
    return '/' + '/'.join(segments)


def resolve_destination(url: str) -> Destination:
    """
    Parse a folder URL into a Destination.

    Args:
        url: Absolute URL whose path is ``/{site_slug}/{site}/{folder...}``

    Returns:
        The resolved destination

    Raises:
        InvalidDestination: If the URL has no host or fewer than two
            path segments
    """
    if not url:
        raise InvalidDestination("Destination URL is empty")

    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        raise InvalidDestination(f"Not an absolute URL: {url}")

    segments = [unquote(part) for part in parts.path.split('/') if part]
    if len(segments) < 2:
        raise InvalidDestination(
            f"Cannot identify a site in {url}: expected /<slug>/<site>/<folder>"
        )

    site_slug, site, *folder = segments
    root_address = f"{parts.scheme}://{parts.netloc}/{quote(site_slug)}/{quote(site)}"

    return Destination(
        site_slug=site_slug,
        site=site,
        relative_folder='/' + '/'.join(folder) if folder else '',
        root_address=root_address
    )
