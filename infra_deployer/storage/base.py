"""Artifact storage backend abstract base class"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from ..models.result import UploadResult
from ..utils.async_utils import run_blocking


class StorageBackend(ABC):
    """Abstract base class for versioned object storage backends"""

    def __init__(self, region: Optional[str] = None):
        """
        Initialize storage backend

        Args:
            region: Region the backend creates buckets in
        """
        self.region = region
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize storage backend (e.g., create the SDK client)"""
        if not self._initialized:
            await self._do_initialize()
            self._initialized = True

    @abstractmethod
    async def _do_initialize(self) -> None:
        """Actual initialization logic to be implemented by subclasses"""
        pass

    @abstractmethod
    async def bucket_exists(self, bucket: str) -> bool:
        """
        Check if bucket exists

        Args:
            bucket: Bucket name

        Returns:
            True if exists, False if the provider reports it missing
        """
        pass

    @abstractmethod
    async def create_bucket(self, bucket: str) -> None:
        """Create bucket in the backend region"""
        pass

    @abstractmethod
    async def wait_for_bucket_exists(self, bucket: str) -> None:
        """Block until the provider reports the bucket as existing"""
        pass

    @abstractmethod
    async def get_versioning_status(self, bucket: str) -> Optional[str]:
        """
        Get bucket versioning status

        Returns:
            Versioning status, None if versioning was never configured
        """
        pass

    @abstractmethod
    async def enable_versioning(self, bucket: str) -> None:
        """Enable bucket versioning"""
        pass

    @abstractmethod
    async def put_object(self, bucket: str, key: str, body: bytes) -> UploadResult:
        """
        Upload object

        Args:
            bucket: Bucket name
            key: Object key
            body: Object content

        Returns:
            Upload result with the object version
        """
        pass

    async def _run_sync(self, func: Callable[..., Any], *args, **kwargs) -> Any:
        """Run a blocking SDK call in the default executor"""
        await self.initialize()
        return await run_blocking(func, *args, **kwargs)

    async def close(self) -> None:
        """Close storage backend connections"""
        if self._initialized:
            await self._do_close()
            self._initialized = False

    async def _do_close(self) -> None:
        """Actual cleanup logic to be implemented by subclasses"""
        pass

    async def __aenter__(self):
        """Async context manager entry"""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
