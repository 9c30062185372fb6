"""
File object creation service.

Creates (or replaces) the empty file object that the upload session
calls write into.
"""
from ...api.http import HttpTransport, TRANSPORT_ERRORS
from ...auth.digest import AuthContext, FORMS_AUTH_HEADER
from ...destination import Destination, odata_string
from ...exceptions import FileCreationFailed
from ...logging import get_logger

ADD_FILE_PATH = (
    "/_api/web/getfolderbyserverrelativeurl('{folder}')"
    "/files/add(url='{name}',overwrite=true)"
)


class FileCreator:
    """
    Creates file objects in a SharePoint folder.

    Responsibilities:
    - Build the ``files/add`` URL for the destination folder
    - Send the request with digest headers
    - Map failures to FileCreationFailed
    """

    def __init__(self, transport: HttpTransport):
        """
        Initialize file creator.

        Args:
            transport: HTTP transport
        """
        self._transport = transport
        self._logger = get_logger('spupload.upload.file')

    def build_url(self, destination: Destination, file_name: str) -> str:
        """URL of the ``files/add`` call for ``file_name`` in ``destination``."""
        return destination.api_url(ADD_FILE_PATH.format(
            folder=odata_string(destination.folder),
            name=odata_string(file_name)
        ))

    async def create_or_overwrite(
        self,
        destination: Destination,
        file_name: str,
        auth: AuthContext
    ) -> None:
        """
        Create the file, replacing an existing file of the same name.

        Args:
            destination: Target folder
            file_name: Name of the file object
            auth: Auth context of the current upload

        Raises:
            FileCreationFailed: If the request fails or is rejected
        """
        url = self.build_url(destination, file_name)
        self._logger.debug(f"Creating file object {destination.file_path(file_name)}")

        try:
            response = await self._transport.post(
                url,
                headers=auth.request_headers({FORMS_AUTH_HEADER: 'f'})
            )
        except TRANSPORT_ERRORS as e:
            raise FileCreationFailed(f"Could not create {file_name}: {e}") from e

        if not response.ok:
            self._logger.error(f"Failed to create {file_name}: HTTP {response.status}")
            raise FileCreationFailed(f"Could not create {file_name}", status=response.status)

        self._logger.debug(f"File object {file_name} created")
