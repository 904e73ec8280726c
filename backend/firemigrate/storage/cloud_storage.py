"""
Cloud Storage Service

Object listing, download and upload against one Firebase Storage bucket.
Object paths are used as-is so they stay identical across projects.
"""

from typing import Optional

from google.cloud.storage import Blob, Bucket

# Blob properties carried over when an object is copied
COPIED_PROPERTIES = (
    "content_type",
    "cache_control",
    "content_disposition",
    "content_encoding",
    "content_language",
)


class CloudStorageService:
    """Service for managing objects in a single Storage bucket."""

    def __init__(self, bucket: Bucket) -> None:
        self.bucket = bucket

    def list_objects(self, prefix: str) -> list[Blob]:
        """
        List all objects under a path prefix.

        Args:
            prefix: Path prefix such as "avatars/"

        Returns:
            Blobs whose names start with the prefix
        """
        return list(self.bucket.list_blobs(prefix=prefix))

    def download(self, blob: Blob) -> bytes:
        """
        Download the full content of an object into memory.

        The stored bytes are returned as-is, so gzip-encoded objects stay
        compressed and still match their content_encoding on upload.
        """
        return blob.download_as_bytes(raw_download=True)

    def upload(self, name: str, content: bytes, source: Optional[Blob] = None) -> Blob:
        """
        Upload content under `name`, copying metadata from `source` when given.

        Args:
            name: Object path in this bucket
            content: Object content
            source: Blob whose content type and custom metadata are reused

        Returns:
            The uploaded blob
        """
        blob = self.bucket.blob(name)
        content_type = None

        if source is not None:
            for prop in COPIED_PROPERTIES:
                value = getattr(source, prop, None)
                if value is not None:
                    setattr(blob, prop, value)
            if source.metadata:
                blob.metadata = dict(source.metadata)
            content_type = source.content_type

        blob.upload_from_string(
            content,
            content_type=content_type or "application/octet-stream",
        )
        return blob
