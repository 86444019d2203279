"""
Storage Service
Blob storage integration for uploaded QR code images
"""

import logging
from typing import Optional

import httpx

from boosterhub.config import Settings
from boosterhub.exceptions import ConfigurationError, StorageError

logger = logging.getLogger(__name__)


class StorageService:
    """Supabase-style object storage helper"""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    def _ensure_config(self):
        if not self.settings.storage_configured:
            raise ConfigurationError("Blob storage is not configured")

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=30, transport=self.transport)

    def public_url(self, path: str) -> str:
        base = self.settings.BLOB_STORAGE_URL.rstrip("/")
        return f"{base}/storage/v1/object/public/{self.settings.STORAGE_BUCKET}/{path}"

    async def upload_bytes(self, path: str, content: bytes, content_type: str) -> str:
        """
        Upload (or overwrite) an object

        Returns:
            Public URL of the stored object
        """
        self._ensure_config()

        base = self.settings.BLOB_STORAGE_URL.rstrip("/")
        url = f"{base}/storage/v1/object/{self.settings.STORAGE_BUCKET}/{path}"

        headers = {
            "Authorization": f"Bearer {self.settings.BLOB_STORAGE_KEY}",
            "apikey": self.settings.BLOB_STORAGE_KEY,
            "Content-Type": content_type or "application/octet-stream",
            "x-upsert": "true"
        }

        async with self._client() as client:
            resp = await client.post(url, headers=headers, content=content)

        if resp.status_code not in (200, 201):
            logger.error("Storage upload of %s failed with %s: %s", path, resp.status_code, resp.text)
            raise StorageError()

        return self.public_url(path)
