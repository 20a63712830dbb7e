"""Tests for artifact staging"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from botocore.exceptions import ClientError

from infra_deployer.core.artifact_stager import ArtifactStager
from infra_deployer.models.result import UploadResult


def make_storage(exists=True, versioning="Enabled"):
    storage = MagicMock()
    storage.bucket_exists = AsyncMock(return_value=exists)
    storage.create_bucket = AsyncMock()
    storage.wait_for_bucket_exists = AsyncMock()
    storage.get_versioning_status = AsyncMock(return_value=versioning)
    storage.enable_versioning = AsyncMock()
    storage.put_object = AsyncMock(return_value=UploadResult(etag='"abc"', version_id="v1"))
    return storage


class TestUploadToS3:
    """Bucket preparation and upload"""

    @pytest.mark.asyncio
    async def test_creates_and_versions_missing_bucket(self, reporter, artifact):
        """A missing bucket is created, awaited and versioned before the upload"""
        storage = make_storage(exists=False, versioning=None)
        stager = ArtifactStager(storage, reporter)

        result = await stager.upload_to_s3("ask-bucket", "endpoint/build.zip", artifact)

        storage.create_bucket.assert_awaited_once_with("ask-bucket")
        storage.wait_for_bucket_exists.assert_awaited_once_with("ask-bucket")
        storage.enable_versioning.assert_awaited_once_with("ask-bucket")
        storage.put_object.assert_awaited_once_with("ask-bucket", "endpoint/build.zip", artifact.read_bytes())
        assert result.version_id == "v1"
        assert reporter.messages == [
            'Creating s3 bucket "ask-bucket"...',
            'Enabling versioning on s3 bucket "ask-bucket"...',
            "Uploading code artifact to s3://ask-bucket/endpoint/build.zip",
        ]

    @pytest.mark.asyncio
    async def test_suspended_versioning_is_enabled(self, reporter, artifact):
        """Versioning other than Enabled is switched on"""
        storage = make_storage(versioning="Suspended")
        stager = ArtifactStager(storage, reporter)

        await stager.upload_to_s3("ask-bucket", "key", artifact)

        storage.create_bucket.assert_not_called()
        storage.enable_versioning.assert_awaited_once_with("ask-bucket")

    @pytest.mark.asyncio
    async def test_second_upload_only_puts(self, reporter, artifact):
        """Once the bucket exists with versioning, staging is a single put"""
        storage = make_storage(exists=False, versioning=None)
        stager = ArtifactStager(storage, reporter)
        await stager.upload_to_s3("ask-bucket", "key", artifact)

        storage.bucket_exists.return_value = True
        storage.get_versioning_status.return_value = "Enabled"
        storage.put_object.return_value = UploadResult(etag='"def"', version_id="v2")

        result = await stager.upload_to_s3("ask-bucket", "key", artifact)

        assert result.version_id == "v2"
        assert storage.put_object.await_count == 2
        assert storage.create_bucket.await_count == 1
        assert storage.enable_versioning.await_count == 1

    @pytest.mark.asyncio
    async def test_provider_error_propagates(self, reporter, artifact):
        """Errors from the storage backend are not swallowed"""
        storage = make_storage()
        storage.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "PutObject"
        )
        stager = ArtifactStager(storage, reporter)

        with pytest.raises(ClientError):
            await stager.upload_to_s3("ask-bucket", "key", artifact)
