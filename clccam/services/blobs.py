"""
Blob Service.

Uploads files (e.g. box event scripts) as blobs.
"""

from clccam.schemas.blobs import BlobResponse
from clccam.services.base import BaseService


class BlobService(BaseService):

    def upload_file(self, name: str, data: bytes) -> BlobResponse:
        """
        Upload the contents of a file.

        The content type is sniffed from data.

        Args:
            name: File name the blob is stored under
            data: Raw file contents

        Returns:
            Upload record with the download URL of the blob
        """
        return self._client.post(f"/services/blobs/upload/{name}", bytes(data), BlobResponse)
