"""Artifact staging into versioned object storage"""

import logging
from pathlib import Path

import aiofiles

from ..constants import S3_VERSIONING_ENABLED
from ..models.result import UploadResult
from ..storage.base import StorageBackend
from .reporter import StatusReporter


class ArtifactStager:
    """Ensure a versioned bucket exists and upload the build artifact to it

    Provider errors propagate unchanged; retrying is left to whoever drives
    the whole deploy.
    """

    def __init__(self, storage: StorageBackend, reporter: StatusReporter):
        """
        Initialize artifact stager

        Args:
            storage: Object storage backend bound to the target region
            reporter: Progress reporter
        """
        self.storage = storage
        self.reporter = reporter
        self.logger = logging.getLogger("ArtifactStager")

    async def upload_to_s3(self, bucket: str, key: str, file_path: Path) -> UploadResult:
        """
        Upload the artifact, creating and versioning the bucket when needed

        Args:
            bucket: Bucket name
            key: Object key
            file_path: Local artifact path

        Returns:
            Upload result carrying the object version id
        """
        if not await self.storage.bucket_exists(bucket):
            self.reporter.update_status(f'Creating s3 bucket "{bucket}"...')
            await self.storage.create_bucket(bucket)
            await self.storage.wait_for_bucket_exists(bucket)

        # Enabling twice is a no-op on the provider side
        if await self.storage.get_versioning_status(bucket) != S3_VERSIONING_ENABLED:
            self.reporter.update_status(f'Enabling versioning on s3 bucket "{bucket}"...')
            await self.storage.enable_versioning(bucket)

        self.reporter.update_status(f"Uploading code artifact to s3://{bucket}/{key}")
        async with aiofiles.open(file_path, 'rb') as f:
            body = await f.read()

        result = await self.storage.put_object(bucket, key, body)
        self.logger.debug(f"Staged {file_path} ({len(body)} bytes) as version {result.version_id}")
        return result
