from abc import ABC, abstractmethod
from pathlib import Path


class StorageService(ABC):
    """Abstract base class for upload storage."""

    @abstractmethod
    def temp_path(self, original_filename: str) -> Path:
        """
        Reserve a unique temporary location for an upload.

        Args:
            original_filename: The client-declared file name. Only its extension is kept.

        Returns:
            The local path the upload should be written to.
        """
        pass

    @abstractmethod
    async def write_file(self, path: Path, data: bytes) -> Path:
        """
        Write an uploaded payload to a path returned by temp_path.

        Args:
            path: The destination path.
            data: The raw bytes of the upload.

        Returns:
            The path that was written.
        """
        pass

    @abstractmethod
    async def delete_file(self, path: Path) -> bool:
        """
        Delete a previously written file.

        Args:
            path: The path returned by temp_path.

        Returns:
            True if deletion was successful, False otherwise.
        """
        pass
