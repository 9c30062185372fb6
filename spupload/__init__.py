"""
spupload - Async Python client for SharePoint chunked uploads.

Usage:
    >>> from spupload import SharePointUploader
    >>>
    >>> async with SharePointUploader(folder_url, credentials) as sp:
    ...     result = await sp.upload("big-file.zip")
"""
import logging
from .client import SharePointUploader, upload

# Configuration
from .core.api import (
    ClientConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    AiohttpTransport
)

# Authentication
from .core.auth import (
    AuthContext,
    CredentialProvider,
    StaticHeadersProvider,
    AddinOnlyProvider,
    DefaultCredentialProvider
)

from .core.destination import Destination, resolve_destination
from .core.upload import UploadProgress, UploadResult
from .core.exceptions import (
    SharePointUploadError,
    InvalidDestination,
    AuthenticationFailed,
    DigestUnavailable,
    FileCreationFailed,
    UploadStepError,
    StartUploadFailed,
    ContinueUploadFailed,
    FinishUploadFailed,
    SmallUploadFailed
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for spupload modules.

    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'spupload',
        'spupload.client',
        'spupload.auth',
        'spupload.http',
        'spupload.upload',
        'spupload.upload.coordinator',
        'spupload.upload.chunk',
        'spupload.upload.file',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        # Ensure propagation is enabled
        logger.propagate = True


__all__ = [
    'SharePointUploader',
    'upload',
    'setup_logging',

    # Configuration
    'ClientConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'AiohttpTransport',

    # Authentication
    'AuthContext',
    'CredentialProvider',
    'StaticHeadersProvider',
    'AddinOnlyProvider',
    'DefaultCredentialProvider',

    # Destination
    'Destination',
    'resolve_destination',

    # Results
    'UploadProgress',
    'UploadResult',

    # Errors
    'SharePointUploadError',
    'InvalidDestination',
    'AuthenticationFailed',
    'DigestUnavailable',
    'FileCreationFailed',
    'UploadStepError',
    'StartUploadFailed',
    'ContinueUploadFailed',
    'FinishUploadFailed',
    'SmallUploadFailed',
]
