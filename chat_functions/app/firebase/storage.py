import asyncio
import logging

from google.api_core.exceptions import NotFound

from ..clients import ObjectStore
from ..errors import ObjectNotFound

logger = logging.getLogger(__name__)


class FirebaseStorageObjectStore(ObjectStore):
    """Object deletion against the project's Cloud Storage for Firebase bucket."""

    def __init__(self, bucket):
        self.bucket = bucket

    async def delete_object(self, path: str) -> None:
        blob = self.bucket.blob(path)
        try:
            await asyncio.to_thread(blob.delete)
        except NotFound:
            raise ObjectNotFound(path)
        logger.debug(f"Deleted object {path} from bucket {self.bucket.name}")
