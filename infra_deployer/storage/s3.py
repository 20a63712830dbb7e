# infra_deployer/storage/s3.py
"""AWS S3 storage backend"""

import logging
from typing import Any, Optional

from botocore.exceptions import ClientError

from .base import StorageBackend
from ..utils.aws_utils import AwsCredentials
from ..constants import (
    S3_DEFAULT_LOCATION,
    S3_BUCKET_WAIT_DELAY,
    S3_BUCKET_MAX_WAIT_TIME,
    S3_VERSIONING_ENABLED,
)
from ..models.result import UploadResult

logger = logging.getLogger(__name__)


class S3Storage(StorageBackend):
    """AWS S3 storage implementation"""

    def __init__(self, credentials: AwsCredentials, client=None):
        """
        Initialize S3 storage

        Args:
            credentials: AWS profile and region to use
            client: Pre-built boto3 S3 client (created from credentials if omitted)
        """
        super().__init__(credentials.region)
        self.credentials = credentials
        self.client = client
        self._owns_client = client is None

    async def _do_initialize(self) -> None:
        """Create the S3 client"""
        if self.client is None:
            session = self.credentials.create_session()
            self.client = session.client("s3", region_name=self.region)

    async def _call(self, operation: str, **kwargs) -> Any:
        await self.initialize()
        return await self._run_sync(getattr(self.client, operation), **kwargs)

    async def bucket_exists(self, bucket: str) -> bool:
        """Check if bucket exists in S3"""
        try:
            await self._call("head_bucket", Bucket=bucket)
            return True
        except ClientError as e:
            status = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            if status == 404 or e.response.get("Error", {}).get("Code") in ("404", "NoSuchBucket"):
                return False
            raise

    async def create_bucket(self, bucket: str) -> None:
        """Create bucket, with a LocationConstraint outside us-east-1"""
        params = {"Bucket": bucket}
        if self.region and self.region != S3_DEFAULT_LOCATION:
            params["CreateBucketConfiguration"] = {"LocationConstraint": self.region}

        logger.debug(f"Creating S3 bucket {bucket} in {self.region}")
        await self._call("create_bucket", **params)

    async def wait_for_bucket_exists(self, bucket: str) -> None:
        """Wait for the bucket_exists waiter to succeed"""
        await self.initialize()
        waiter = self.client.get_waiter("bucket_exists")
        await self._run_sync(
            waiter.wait,
            Bucket=bucket,
            WaiterConfig={
                "Delay": S3_BUCKET_WAIT_DELAY,
                "MaxAttempts": S3_BUCKET_MAX_WAIT_TIME // S3_BUCKET_WAIT_DELAY,
            }
        )

    async def get_versioning_status(self, bucket: str) -> Optional[str]:
        """Get bucket versioning status"""
        response = await self._call("get_bucket_versioning", Bucket=bucket)
        return response.get("Status")

    async def enable_versioning(self, bucket: str) -> None:
        """Enable bucket versioning"""
        logger.debug(f"Enabling versioning on S3 bucket {bucket}")
        await self._call(
            "put_bucket_versioning",
            Bucket=bucket,
            VersioningConfiguration={
                "MFADelete": "Disabled",
                "Status": S3_VERSIONING_ENABLED,
            }
        )

    async def put_object(self, bucket: str, key: str, body: bytes) -> UploadResult:
        """Upload object to S3"""
        response = await self._call("put_object", Bucket=bucket, Key=key, Body=body)
        logger.info(f"Uploaded s3://{bucket}/{key} (version {response.get('VersionId')})")
        return UploadResult(
            etag=response.get("ETag"),
            version_id=response.get("VersionId")
        )

    async def _do_close(self) -> None:
        """Release the S3 client"""
        if self._owns_client:
            self.client = None
