"""Shared fixtures for infra-deployer tests"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from infra_deployer.core.reporter import RecordingStatusReporter


@pytest.fixture
def reporter():
    """Reporter keeping every status line"""
    return RecordingStatusReporter()


@pytest.fixture
def no_sleep():
    """Awaitable sleep that returns immediately and records its calls"""
    return AsyncMock(return_value=None)


@pytest.fixture
def artifact(tmp_path):
    """Built code artifact on disk"""
    path = tmp_path / "build.zip"
    path.write_bytes(b"PK\x03\x04 skill code")
    return path


@pytest.fixture
def cfn_client():
    """CloudFormation client double with awaitable operations"""
    client = MagicMock()
    client.stack_exists = AsyncMock(return_value=False)
    client.create_stack = AsyncMock(return_value="arn:aws:cloudformation:us-east-1:123456789012:stack/new/1")
    client.update_stack = AsyncMock()
    client.get_stack = AsyncMock()
    client.get_stack_events = AsyncMock(return_value=[])
    return client
