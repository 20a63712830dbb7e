"""Built-in CloudFormation deploy delegate"""

import asyncio
import posixpath
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional

import aiofiles
from botocore.exceptions import BotoCoreError, ClientError

from ...api.exceptions import BootstrapError, CfnDeployerError, InfraDeployerError
from ...constants import (
    CAPABILITY_IAM,
    DEFAULT_CODE_KEY_PREFIX,
    INFRASTRUCTURE_DIR,
    RESERVED_STACK_PARAMETERS,
    RESOURCE_NAME_PREFIX,
    BUCKET_PROJECT_NAME_MAX_LENGTH,
    BUCKET_PROFILE_NAME_MAX_LENGTH,
    STACK_SKILL_NAME_MAX_LENGTH,
    SKILL_ENDPOINT_OUTPUT_KEY,
    SKILL_STACK_ASSET_FILE_NAME,
    SKILL_STACK_PUBLIC_FILE_NAME,
)
from ...core.reporter import StatusReporter
from ...models.config import get_alexa_deploy_regions
from ...models.options import BootstrapOptions, DeployOptions
from ...models.result import BootstrapResult, DeployResult, DeployState, Endpoint, S3Location
from ...utils.async_utils import SleepFunc
from ...utils.aws_utils import AwsCredentials, ProfileResolver
from ...utils.string_utils import filter_non_alphanumeric
from ..base import DeployDelegateBackend
from .helper import CfnDeployHelper

ASSETS_DIR = Path(__file__).parent / "assets"

HelperFactory = Callable[[AwsCredentials, StatusReporter, SleepFunc], CfnDeployHelper]


class CfnDeployer(DeployDelegateBackend):
    """Deploy skill code to S3 and its infrastructure through a CloudFormation stack"""

    def __init__(self,
                 profile_resolver: Optional[ProfileResolver] = None,
                 helper_factory: Optional[HelperFactory] = None,
                 clock: Callable[[], float] = time.time,
                 sleep: SleepFunc = asyncio.sleep):
        """
        Initialize cfn deployer

        Args:
            profile_resolver: Resolves the AWS profile linked to a CLI profile
            helper_factory: Builds the AWS helper for explicit credentials
            clock: Time source for generated bucket and stack names
            sleep: Awaitable sleep used while polling the stack
        """
        super().__init__()
        self.profile_resolver = profile_resolver or ProfileResolver()
        self.helper_factory = helper_factory or CfnDeployHelper
        self.clock = clock
        self.sleep = sleep

    async def bootstrap(self, options: BootstrapOptions) -> BootstrapResult:
        """Write the starter template into the workspace and resolve the default AWS region"""
        workspace_path = Path(options.workspace_path)
        user_config = dict(options.user_config or {})
        try:
            async with aiofiles.open(ASSETS_DIR / SKILL_STACK_ASSET_FILE_NAME, 'r') as f:
                template_content = await f.read()

            aws_profile = self.profile_resolver.get_aws_profile(options.profile)
            aws_region = self.profile_resolver.get_default_region(aws_profile)

            workspace_path.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(workspace_path / SKILL_STACK_PUBLIC_FILE_NAME, 'w') as f:
                await f.write(template_content)
        except (InfraDeployerError, BotoCoreError, OSError) as e:
            raise BootstrapError(str(e)) from e

        user_config["templatePath"] = "./" + posixpath.join(
            INFRASTRUCTURE_DIR, workspace_path.name, SKILL_STACK_PUBLIC_FILE_NAME
        )
        user_config["awsRegion"] = aws_region
        self.logger.info(f"Bootstrapped {workspace_path} for region {aws_region}")
        return BootstrapResult(user_config=user_config)

    async def invoke(self, reporter: StatusReporter, options: DeployOptions) -> DeployResult:
        """Deploy one Alexa region; every outcome is returned as a DeployResult"""
        alexa_region = options.alexa_region
        prior_state = options.deploy_state.get(alexa_region)
        result = DeployResult(deploy_state=prior_state.copy() if prior_state else DeployState())

        try:
            await self._deploy(reporter, options, result)
            if result.is_deploy_skipped:
                result.result_message = (
                    f'The CloudFormation deploy for Alexa region "{alexa_region}" '
                    f'is same as "{result.deploy_region}".'
                )
            else:
                result.result_message = (
                    f'The CloudFormation deploy succeeded for Alexa region "{alexa_region}" '
                    f'with output Lambda ARN: {result.endpoint.uri}.'
                )
        except (InfraDeployerError, ClientError, BotoCoreError, OSError) as e:
            self.logger.debug(f"Deploy failed for {alexa_region}", exc_info=True)
            result.is_all_step_success = False
            result.result_message = f'The CloudFormation deploy failed for Alexa region "{alexa_region}": {e}'

        return result

    async def _deploy(self, reporter: StatusReporter, options: DeployOptions, result: DeployResult) -> None:
        alexa_region = options.alexa_region
        user_config = options.user_config
        deploy_regions = options.deploy_regions or get_alexa_deploy_regions([alexa_region], user_config)

        aws_region = deploy_regions.get(alexa_region)
        if not aws_region:
            raise CfnDeployerError(
                f"Unsupported Alexa region: {alexa_region}. "
                'Please check your region name or use "regionalOverrides" to specify AWS region.'
            )

        aws_profile = self.profile_resolver.get_aws_profile(options.profile)
        if not aws_profile:
            raise CfnDeployerError(
                f"Profile [{options.profile}] doesn't have AWS profile linked to it. "
                'Please run "ask configure" to re-configure your profile.'
            )

        template_path = user_config.get_template_path(alexa_region)
        if not template_path:
            raise CfnDeployerError("The template path in userConfig must be provided.")
        template_body = await self._read_template(template_path, options.project_root)

        user_parameters = self._get_user_defined_parameters(alexa_region, options)
        bucket_name = self._get_bucket_name(options, result.deploy_state, aws_profile, aws_region)
        bucket_key = user_config.get_bucket_key(alexa_region) or (
            f"{DEFAULT_CODE_KEY_PREFIX}/{Path(options.code.code_build).name}"
        )
        stack_name = self._get_stack_name(options.skill_name, alexa_region)

        # Regions sharing an AWS region with identical state reuse that region's deploy
        deploy_region = next(
            (region for region, target in deploy_regions.items() if target == aws_region),
            alexa_region
        )
        if deploy_region != alexa_region and (
                options.deploy_state.get(deploy_region) == options.deploy_state.get(alexa_region)):
            result.is_deploy_skipped = True
            result.deploy_region = deploy_region
            return

        helper = self.helper_factory(AwsCredentials(aws_profile, aws_region), reporter, self.sleep)
        try:
            code_version = await self._stage_artifact(helper, reporter, options, result, bucket_name, bucket_key)

            parameters = self._map_stack_parameters(options, bucket_name, bucket_key, code_version, user_parameters)
            capabilities = self._get_capabilities(alexa_region, options)

            outcome = await helper.deploy_stack(
                result.deploy_state.stack_id, stack_name, template_body, parameters, capabilities
            )
        finally:
            await helper.close()

        result.deploy_state.stack_id = outcome.stack_id
        result.deploy_state.outputs = outcome.stack_info.outputs
        if not outcome.endpoint_uri:
            raise CfnDeployerError(
                f'Stack ({outcome.stack_id}) does not provide the "{SKILL_ENDPOINT_OUTPUT_KEY}" output.'
            )
        result.endpoint = Endpoint(uri=outcome.endpoint_uri)
        result.is_all_step_success = True

    async def _read_template(self, template_path: str, project_root: Optional[Path]) -> str:
        template_file = Path(template_path)
        if not template_file.is_absolute() and project_root:
            template_file = Path(project_root) / template_file
        async with aiofiles.open(template_file, 'r') as f:
            return await f.read()

    async def _stage_artifact(self,
                              helper: CfnDeployHelper,
                              reporter: StatusReporter,
                              options: DeployOptions,
                              result: DeployResult,
                              bucket_name: str,
                              bucket_key: str) -> Optional[str]:
        """Upload the artifact unless the recorded version is still current

        Returns:
            Object version id referenced by the stack
        """
        previous = result.deploy_state.s3
        reusable = (
            previous is not None
            and previous.version_id
            and previous.bucket == bucket_name
            and previous.key == bucket_key
        )
        if options.code.is_code_modified or not reusable:
            upload = await helper.upload_to_s3(bucket_name, bucket_key, Path(options.code.code_build))
            result.deploy_state.s3 = S3Location(bucket=bucket_name, key=bucket_key, version_id=upload.version_id)
            result.is_code_deployed = True
            return upload.version_id

        reporter.update_status(f"Code artifact unchanged, reusing s3://{bucket_name}/{bucket_key}")
        result.is_code_deployed = True
        return previous.version_id

    def _get_user_defined_parameters(self, alexa_region: str, options: DeployOptions) -> Dict[str, str]:
        parameters = options.user_config.get_cfn_parameters(alexa_region)
        for key in parameters:
            if key in RESERVED_STACK_PARAMETERS:
                raise CfnDeployerError(
                    f'Cloud Formation parameter "{key}" is reserved. {RESERVED_STACK_PARAMETERS[key]}'
                )
        return parameters

    def _get_bucket_name(self,
                         options: DeployOptions,
                         deploy_state: DeployState,
                         aws_profile: str,
                         aws_region: str) -> str:
        custom = options.user_config.get_bucket_name(options.alexa_region)
        if custom:
            return custom
        if deploy_state.s3 and deploy_state.s3.bucket:
            return deploy_state.s3.bucket

        # ask-<project>-<profile>-<region>-<timestamp>, kept within the 63 character bucket name limit
        project_name = Path(options.project_root or Path.cwd()).resolve().name
        project = filter_non_alphanumeric(project_name.lower())[:BUCKET_PROJECT_NAME_MAX_LENGTH]
        profile = filter_non_alphanumeric(aws_profile.lower())[:BUCKET_PROFILE_NAME_MAX_LENGTH]
        region = aws_region.replace("-", "")
        return f"{RESOURCE_NAME_PREFIX}-{project}-{profile}-{region}-{self._timestamp()}"

    def _get_stack_name(self, skill_name: str, alexa_region: str) -> str:
        # ask-<skill>-<region>-skillStack-<timestamp>, within the 128 character stack name limit
        skill = filter_non_alphanumeric(skill_name)[:STACK_SKILL_NAME_MAX_LENGTH]
        region = alexa_region.replace("-", "")
        return f"{RESOURCE_NAME_PREFIX}-{skill}-{region}-skillStack-{self._timestamp()}"

    def _timestamp(self) -> int:
        return int(self.clock() * 1000)

    def _get_capabilities(self, alexa_region: str, options: DeployOptions) -> List[str]:
        capabilities = options.user_config.get_cfn_capabilities(alexa_region)
        if CAPABILITY_IAM not in capabilities:
            capabilities.append(CAPABILITY_IAM)
        return capabilities

    def _map_stack_parameters(self,
                              options: DeployOptions,
                              bucket_name: str,
                              bucket_key: str,
                              code_version: Optional[str],
                              user_parameters: Dict[str, str]) -> List[Dict[str, str]]:
        reserved = {
            "SkillId": options.skill_id,
            "LambdaRuntime": options.user_config.runtime,
            "LambdaHandler": options.user_config.handler,
            "CodeBucket": bucket_name,
            "CodeKey": bucket_key,
            "CodeVersion": code_version,
        }
        parameters = [
            {"ParameterKey": key, "ParameterValue": value}
            for key, value in reserved.items()
            if value is not None
        ]
        parameters.extend(
            {"ParameterKey": key, "ParameterValue": str(value)}
            for key, value in user_parameters.items()
        )
        return parameters
