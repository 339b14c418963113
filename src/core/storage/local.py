import asyncio
import logging
import os
import secrets
import string
import time
from pathlib import Path

import aiofiles

from core.config import configs

from .base import StorageService

logger = logging.getLogger(__name__)


def generate_temp_name(original_filename: str, length: int = 9) -> str:
    chars = string.ascii_lowercase + string.digits
    random_str = "".join(secrets.choice(chars) for _ in range(length))
    suffix = Path(original_filename or "").suffix
    return f"temp_{int(time.time() * 1000)}_{random_str}{suffix}"


class LocalStorageService(StorageService):
    """Implementation of StorageService for the local filesystem."""

    def __init__(self, upload_dir: str = configs.UPLOAD_DIR):
        self.upload_dir = Path(upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(f"LocalStorageService initialized with base path {self.upload_dir}")

    def temp_path(self, original_filename: str) -> Path:
        return self.upload_dir / generate_temp_name(original_filename)

    async def write_file(self, path: Path, data: bytes) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)

        logger.debug(f"Saving upload to local storage: {path}")
        async with aiofiles.open(path, "wb") as out_file:
            await out_file.write(data)

        return path

    async def delete_file(self, path: Path) -> bool:
        logger.debug(f"Deleting file from local storage: {path}")
        if path.exists():
            await asyncio.to_thread(os.remove, path)
            logger.debug(f"Successfully deleted file: {path}")
            return True
        logger.warning(f"File not found for deletion: {path}")
        return False
