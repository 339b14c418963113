from fastapi import Depends, Request

from core.storage.factory import get_storage_client
from geometa.metadata.extractor import MetadataExtractor
from geometa.metadata.service import MetadataService


def get_extractor(request: Request) -> MetadataExtractor:
    return request.app.state.extractor


def get_metadata_service(extractor: MetadataExtractor = Depends(get_extractor)) -> MetadataService:
    return MetadataService(extractor, get_storage_client())
