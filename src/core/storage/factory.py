import logging
from functools import lru_cache

from core.config import configs

from .base import StorageService
from .local import LocalStorageService

logger = logging.getLogger(__name__)


@lru_cache()
def get_storage_client() -> StorageService:
    logger.debug(f"Getting storage client (cached). Upload dir: {configs.UPLOAD_DIR}")
    return LocalStorageService(upload_dir=configs.UPLOAD_DIR)
