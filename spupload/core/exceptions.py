"""
Custom exceptions for SharePoint upload operations.

Every failure of an upload is surfaced as one of these exceptions. Each
carries the protocol step it originated from and, when a response was
received, its HTTP status. Transport errors are chained via ``__cause__``.
"""
from typing import Optional


class SharePointUploadError(Exception):
    """Base exception for all spupload errors."""

    step = 'upload'

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        step: Optional[str] = None
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            status: HTTP status of the failing response (if any)
            step: Protocol step tag, defaults to the class step
        """
        self.status = status
        if step is not None:
            self.step = step
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.status is not None:
            return f"[{self.step}] {message} (HTTP {self.status})"
        return f"[{self.step}] {message}"


class InvalidDestination(SharePointUploadError):
    """Raised when the destination URL does not identify a site."""
    step = 'resolve'


class AuthenticationFailed(SharePointUploadError):
    """Raised when the credential provider cannot produce auth headers."""
    step = 'authenticate'


class DigestUnavailable(SharePointUploadError):
    """Raised when the form digest cannot be requested or parsed."""
    step = 'contextinfo'


class FileCreationFailed(SharePointUploadError):
    """Raised when the target file object cannot be created or overwritten."""
    step = 'files/add'


class UploadStepError(SharePointUploadError):
    """Base class for failures of the start/continue/finish calls."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        step: Optional[str] = None,
        offset: Optional[int] = None
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            status: HTTP status of the failing response (if any)
            step: Protocol step tag
            offset: File offset the failing call was issued at
        """
        self.offset = offset
        super().__init__(message, status=status, step=step)


class StartUploadFailed(UploadStepError):
    """Raised when ``startupload`` fails on the chunked path."""
    step = 'startupload'


class ContinueUploadFailed(UploadStepError):
    """Raised when a ``continueupload`` call fails."""
    step = 'continueupload'


class FinishUploadFailed(UploadStepError):
    """Raised when ``finishupload`` fails on the chunked path."""
    step = 'finishupload'


class SmallUploadFailed(UploadStepError):
    """
    Raised when the single-shot path fails.

    ``call`` names the inner request that failed (``startupload`` or
    ``finishupload``).
    """
    step = 'smallupload'

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        call: Optional[str] = None,
        offset: Optional[int] = None
    ) -> None:
        self.call = call
        super().__init__(message, status=status, offset=offset)


__all__ = [
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
