"""
Media component - file uploads stored as media content entities.
"""

from ._impl import MEDIA_TYPE, MediaService
from .component import run_replace, run_upload
from .models import (
    MediaOutput,
    MediaValidationError,
    ReplaceMediaInput,
    UploadConfig,
    UploadMediaInput,
)
from .ports import FileStorePort

__all__ = [
    "run_replace",
    "run_upload",
    "MEDIA_TYPE",
    "MediaService",
    "MediaOutput",
    "MediaValidationError",
    "ReplaceMediaInput",
    "UploadConfig",
    "UploadMediaInput",
    "FileStorePort",
]
