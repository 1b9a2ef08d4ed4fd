"""
Local file system storage provider.

Stands in for blob storage: attachments are written under STORAGE_BASE_PATH
and served by the /storage static mount.
"""

from pathlib import Path
from typing import Optional
from urllib.parse import quote

from app.core.config import get_settings
from app.core.exceptions import InfrastructureError
from app.interfaces.storage_provider import IStorageProvider


class LocalStorageProvider(IStorageProvider):
    """
    Local file system storage implementation.

    Stores files in a local directory structure.
    """

    def __init__(self, base_path: Optional[str] = None, base_url: Optional[str] = None):
        """
        Initialize local storage provider.

        Args:
            base_path: Base directory for file storage (default: ./storage)
            base_url: Public URL prefix (default: BASE_URL setting)
        """
        self.base_path = Path(base_path or "./storage")
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._base_url = (base_url or get_settings().BASE_URL).rstrip("/")

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> str:
        """Upload a file to local storage and return its relative path."""
        file_path = self._resolve_path(path)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise InfrastructureError(f"Failed to upload file: {e}")
        return file_path.relative_to(self.base_path.resolve()).as_posix()

    def get_public_url(self, path: str) -> str:
        """Get an HTTP URL relative to BASE_URL."""
        return f"{self._base_url}/storage/{quote(path)}"

    def _resolve_path(self, path: str) -> Path:
        """Resolve a relative path inside base_path."""
        root = self.base_path.resolve()
        file_path = (root / path).resolve()
        if root != file_path and root not in file_path.parents:
            raise InfrastructureError(f"Path escapes storage root: {path}")
        return file_path
