"""
Storage provider interface.

Defines the contract for attachment (blob) storage.
"""

from abc import ABC, abstractmethod
from typing import Optional


class IStorageProvider(ABC):
    """Abstract interface for file storage."""

    @abstractmethod
    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> str:
        """
        Upload a file.

        Args:
            path: Storage path relative to the storage root
            data: File contents
            content_type: MIME type

        Returns:
            Stored location
        """
        pass

    @abstractmethod
    def get_public_url(self, path: str) -> str:
        """Get a URL the browser can fetch the file from."""
        pass
