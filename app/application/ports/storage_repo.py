from typing import Protocol


class StorageRepository(Protocol):
    def save_bytes(self, bucket: str, filename: str, data: bytes, content_type: str) -> str:
        """Store the blob and return its public URL."""
        ...
