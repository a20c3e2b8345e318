"""
S3 object store for deployments that keep chat media in S3 instead of
Cloud Storage for Firebase
"""
import asyncio
import logging

import boto3
from botocore.exceptions import ClientError

from ..clients import ObjectStore
from ..config import Settings
from ..errors import ObjectNotFound

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = ('404', 'NoSuchKey', 'NotFound')


class S3ObjectStore(ObjectStore):
    def __init__(self, settings: Settings, **kwargs):
        """
        Initialize S3 client with proper configuration.
        """
        self.s3 = boto3.client(
            's3',
            region_name=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            **kwargs
        )
        self.bucket_name = settings.aws_s3_bucket_name
        logger.info(f"S3 client initialized with bucket: {self.bucket_name}")

    async def delete_object(self, path: str) -> None:
        """
        Delete an object from the S3 bucket.

        Args:
            path: The key of the object to delete

        Raises:
            ObjectNotFound: If the bucket reports the key as missing
            ClientError: For any other S3 failure
        """
        try:
            await asyncio.to_thread(
                self.s3.delete_object,
                Bucket=self.bucket_name,
                Key=path
            )
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in NOT_FOUND_CODES:
                raise ObjectNotFound(path)
            raise
        logger.debug(f"Deleted object {path} from bucket {self.bucket_name}")
