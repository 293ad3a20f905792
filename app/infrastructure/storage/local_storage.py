import logging
import os

from ...config import settings
from ...application.ports.storage_repo import StorageRepository

logger = logging.getLogger(__name__)


class LocalStorageRepository(StorageRepository):
    """Writes blobs under ``UPLOAD_DIR/<bucket>`` served from ``/uploads``."""

    def __init__(self, upload_dir: str = None, base_url: str = None) -> None:
        self.upload_dir = upload_dir or settings.UPLOAD_DIR
        self.base_url = (base_url or settings.BASE_URL).rstrip("/")

    def save_bytes(self, bucket: str, filename: str, data: bytes, content_type: str) -> str:
        safe_name = os.path.basename(filename)
        dest_dir = os.path.join(self.upload_dir, bucket)
        os.makedirs(dest_dir, exist_ok=True)
        path = os.path.join(dest_dir, safe_name)
        with open(path, "wb") as f:
            f.write(data)
        logger.debug(f"Stored {len(data)} bytes ({content_type}) at {path}")
        return f"{self.base_url}/uploads/{bucket}/{safe_name}"
