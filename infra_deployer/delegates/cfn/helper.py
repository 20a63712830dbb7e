"""AWS plumbing of the cfn deployer"""

import asyncio
from pathlib import Path
from typing import Dict, List, Optional

from ...clients.cloudformation import CloudFormationClient
from ...core.artifact_stager import ArtifactStager
from ...core.reporter import StatusReporter
from ...core.stack_driver import StackLifecycleDriver
from ...models.result import StackDeployOutcome, UploadResult
from ...storage.s3 import S3Storage
from ...utils.async_utils import SleepFunc
from ...utils.aws_utils import AwsCredentials


class CfnDeployHelper:
    """Bundle the artifact stager and stack driver for one AWS profile and region"""

    def __init__(self,
                 credentials: AwsCredentials,
                 reporter: StatusReporter,
                 sleep: SleepFunc = asyncio.sleep,
                 storage: Optional[S3Storage] = None,
                 cfn_client: Optional[CloudFormationClient] = None):
        self.credentials = credentials
        self.reporter = reporter
        self.storage = storage or S3Storage(credentials)
        self.cfn_client = cfn_client or CloudFormationClient(credentials)
        self.stager = ArtifactStager(self.storage, reporter)
        self.driver = StackLifecycleDriver(self.cfn_client, reporter, sleep=sleep)

    async def upload_to_s3(self, bucket: str, key: str, file_path: Path) -> UploadResult:
        return await self.stager.upload_to_s3(bucket, key, file_path)

    async def deploy_stack(self,
                           stack_id: Optional[str],
                           stack_name: str,
                           template_body: str,
                           parameters: List[Dict[str, str]],
                           capabilities: List[str]) -> StackDeployOutcome:
        return await self.driver.deploy_stack(stack_id, stack_name, template_body, parameters, capabilities)

    async def close(self) -> None:
        await self.storage.close()
