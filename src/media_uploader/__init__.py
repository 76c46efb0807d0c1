"""Media Uploader - Upload files and URLs to a MediaCrush server."""

__version__ = "0.1.0"

from media_uploader.api_client import MediaCrushAPIClient, parse_response
from media_uploader.models import OutputMode, UploaderConfig, UploadItem, UploadResult
from media_uploader.uploader import MediaUploader
from media_uploader.utils import file_hash

__all__ = [
    "MediaCrushAPIClient",
    "parse_response",
    "OutputMode",
    "UploaderConfig",
    "UploadItem",
    "UploadResult",
    "MediaUploader",
    "file_hash",
]
