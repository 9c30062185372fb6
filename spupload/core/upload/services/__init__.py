"""Upload services module."""
from .file_service import FileValidator, ChunkSource, open_chunk_source
from .file_creator import FileCreator
from .chunk_service import SessionCalls

__all__ = [
    'FileValidator',
    'ChunkSource',
    'open_chunk_source',
    'FileCreator',
    'SessionCalls',
]
