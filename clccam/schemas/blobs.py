"""
Blob Schemas.
"""

from pydantic import Field

from clccam.schemas.base import CamModel, Timestamp


class BlobResponse(CamModel):
    """Returned when uploading a file; also describes files attached to boxes."""

    url: str = ""
    length: int = 0
    content_type: str = ""
    uploaded: Timestamp | None = Field(default=None, alias="upload_date")
