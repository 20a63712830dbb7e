"""Code build hashing used to detect unchanged artifacts"""

import hashlib
from pathlib import Path

import aiofiles

from ..api.exceptions import ConfigError

READ_CHUNK_SIZE = 64 * 1024


async def hash_code_build(code_build: Path) -> str:
    """
    Hash a built code artifact

    The digest is stored as lastDeployHash once the artifact is deployed and
    compared on the next deploy to decide whether the upload can be skipped.

    Raises:
        ConfigError: If the build path does not point at a file
    """
    if not code_build.is_file():
        raise ConfigError(f'Code build "{code_build}" does not exist. Please build the skill code first.')

    digest = hashlib.sha256()
    async with aiofiles.open(code_build, 'rb') as f:
        while chunk := await f.read(READ_CHUNK_SIZE):
            digest.update(chunk)
    return digest.hexdigest()
