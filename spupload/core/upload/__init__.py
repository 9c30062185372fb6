"""
Upload module for SharePoint file uploads.

Pipeline: digest gate → file creation → upload coordinator consuming a
chunk source. Collaborators are injected, so each piece can be replaced.
"""
from .facade import UploadFacade
from .coordinator import UploadCoordinator
from .models import (
    Chunk,
    SessionStatus,
    UploadSession,
    UploadProgress,
    UploadConfig,
    UploadResult
)
from .protocols import (
    ChunkSourceProtocol,
    FileCreatorProtocol,
    SessionCallsProtocol,
    MessageSink,
    ProgressCallback
)
from .services import FileValidator, ChunkSource, open_chunk_source, FileCreator, SessionCalls
from .strategies import BaseChunkingStrategy, FixedSizeChunkingStrategy

__all__ = [
    # Main classes
    'UploadFacade',
    'UploadCoordinator',

    # Models
    'Chunk',
    'SessionStatus',
    'UploadSession',
    'UploadProgress',
    'UploadConfig',
    'UploadResult',

    # Protocols
    'ChunkSourceProtocol',
    'FileCreatorProtocol',
    'SessionCallsProtocol',
    'MessageSink',
    'ProgressCallback',

    # Services
    'FileValidator',
    'ChunkSource',
    'open_chunk_source',
    'FileCreator',
    'SessionCalls',

    # Strategies
    'BaseChunkingStrategy',
    'FixedSizeChunkingStrategy',
]
