"""
File upload models.
"""

from app.models.base import CamelModel


class UploadResult(CamelModel):
    """Stored attachment reference returned to the client."""

    url: str
    pathname: str
    content_type: str
