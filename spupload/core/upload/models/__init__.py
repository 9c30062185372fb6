"""Upload models."""
from .upload_models import (
    Chunk,
    SessionStatus,
    UploadSession,
    UploadProgress,
    UploadConfig,
    UploadResult
)

__all__ = [
    'Chunk',
    'SessionStatus',
    'UploadSession',
    'UploadProgress',
    'UploadConfig',
    'UploadResult',
]
