"""Skill infrastructure orchestration across Alexa regions"""

import asyncio
import copy
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..api.exceptions import ConfigError, DeployDelegateError, InfraDeployerError, InfrastructureDeployError
from ..constants import INFRASTRUCTURE_DIR
from ..delegates.contract import DeployDelegate, DeployDelegateRegistry, load_deploy_delegate
from ..models.config import (
    ProfileResources,
    ResourcesConfig,
    SkillInfrastructure,
    UserConfig,
    get_alexa_deploy_regions,
)
from ..models.options import BootstrapOptions, CodeOptions, DeployOptions
from ..models.result import BootstrapResult, DeployResult
from ..utils.hash_utils import hash_code_build
from ..utils.string_utils import filter_non_alphanumeric
from .reporter import LoggingStatusReporter, StatusReporter

ReporterFactory = Callable[[str], StatusReporter]


def _default_reporter_factory(alexa_region: str) -> StatusReporter:
    return LoggingStatusReporter(prefix=f"[{alexa_region}] ")


class InfrastructureController:
    """Deploy the skill infrastructure of one profile to all of its code regions

    Regions are deployed concurrently, each through its own reporter. Results
    are written back to the resources file, including the partial state of
    failed regions, before any failure is raised.
    """

    def __init__(self,
                 resources: ResourcesConfig,
                 profile: str,
                 registry: Optional[DeployDelegateRegistry] = None,
                 reporter_factory: Optional[ReporterFactory] = None,
                 ignore_hash: bool = False):
        """
        Initialize infrastructure controller

        Args:
            resources: Loaded resources file
            profile: Profile to deploy
            registry: Deploy delegate registry, the global one if omitted
            reporter_factory: Creates the status reporter of each region
            ignore_hash: Treat the code of every region as modified
        """
        self.resources = resources
        self.profile = profile
        self.registry = registry
        self.reporter_factory = reporter_factory or _default_reporter_factory
        self.ignore_hash = ignore_hash
        self.logger = logging.getLogger("InfrastructureController")

    @property
    def project_root(self) -> Path:
        return self.resources.path.parent

    def _get_infrastructure(self) -> SkillInfrastructure:
        infrastructure = self.resources.get_profile(self.profile).skill_infrastructure
        if infrastructure is None:
            raise ConfigError(
                f'Profile [{self.profile}] has no "skillInfrastructure" configured in {self.resources.path.name}.'
            )
        return infrastructure

    def _load_delegate(self, infrastructure: SkillInfrastructure) -> DeployDelegate:
        return load_deploy_delegate(infrastructure.type, self.registry)

    def get_default_workspace_path(self) -> Path:
        """Workspace named after the deploy delegate type, under the infrastructure directory"""
        infra_type = self._get_infrastructure().type
        return self.project_root / INFRASTRUCTURE_DIR / infra_type.rsplit("/", 1)[-1]

    async def bootstrap_infrastructure(self, workspace_path: Path) -> BootstrapResult:
        """
        Prepare the infrastructure workspace through the deploy delegate

        Args:
            workspace_path: Directory receiving the starter template

        Returns:
            Bootstrap result, its user config is also saved to the resources file
        """
        infrastructure = self._get_infrastructure()
        delegate = self._load_delegate(infrastructure)

        options = BootstrapOptions(
            profile=self.profile,
            workspace_path=Path(workspace_path),
            user_config=infrastructure.user_config.to_dict()
        )
        result = await delegate.bootstrap(options)

        infrastructure.user_config = UserConfig.from_dict(result.user_config)
        self.resources.write()
        self.logger.info(f"Bootstrapped {infrastructure.type} in {workspace_path}")
        return result

    async def deploy_infrastructure(self) -> Dict[str, DeployResult]:
        """
        Deploy every code region of the profile

        Returns:
            Deploy result per Alexa region

        Raises:
            ConfigError: If the profile cannot be deployed as configured
            InfrastructureDeployError: If one or more regions failed
            DeployDelegateError: If the delegate broke the contract, after the other
                regions' results were saved
        """
        profile_resources = self.resources.get_profile(self.profile)
        infrastructure = self._get_infrastructure()

        skill_name = (filter_non_alphanumeric(profile_resources.skill_name or "")
                      or filter_non_alphanumeric(self.project_root.resolve().name))
        if not skill_name.strip():
            raise ConfigError(
                "Failed to parse the skill name used to decide the CloudFormation stack name. "
                "Please make sure your skill name or skill project folder basename contains "
                "alphanumeric characters."
            )

        regions = list(profile_resources.code)
        if not regions:
            raise ConfigError(
                'Skip the infrastructure deployment, as the "code" field has not been set '
                'in the resources config file.'
            )

        delegate = self._load_delegate(infrastructure)
        deploy_regions = get_alexa_deploy_regions(regions, infrastructure.user_config)

        outcomes = await asyncio.gather(*[
            self._deploy_region(delegate, profile_resources, infrastructure, region, skill_name, deploy_regions)
            for region in regions
        ], return_exceptions=True)

        results: Dict[str, DeployResult] = {}
        errors: List[BaseException] = []
        for region, outcome in zip(regions, outcomes):
            if isinstance(outcome, InfraDeployerError) and not isinstance(outcome, DeployDelegateError):
                message = f'Failed to deploy the infrastructure for Alexa region "{region}": {outcome}'
                self.logger.warning(message)
                results[region] = DeployResult(result_message=message)
            elif isinstance(outcome, BaseException):
                errors.append(outcome)
            else:
                results[region] = outcome

        failures = [
            result.result_message for result in results.values()
            if not result.is_all_step_success and not result.is_deploy_skipped
        ]

        # Skipped regions share the result of the region they were deployed with
        for region, result in list(results.items()):
            if result.is_deploy_skipped and result.deploy_region in results:
                results[region] = copy.deepcopy(results[result.deploy_region])

        if errors:
            # Integration errors still leave the other regions' progress on disk
            self._update_resources_config(profile_resources, infrastructure, regions, results)
            raise errors[0]

        if failures:
            self._update_resources_config(profile_resources, infrastructure, regions, results)
            raise InfrastructureDeployError(failures)

        delegate.validate_deploy_delegate_responses(results)
        self._update_resources_config(profile_resources, infrastructure, regions, results)
        return results

    async def _deploy_region(self,
                             delegate: DeployDelegate,
                             profile_resources: ProfileResources,
                             infrastructure: SkillInfrastructure,
                             alexa_region: str,
                             skill_name: str,
                             deploy_regions: Dict[str, str]) -> DeployResult:
        code = profile_resources.code[alexa_region]
        code_build = Path(code.build)
        if not code_build.is_absolute():
            code_build = self.project_root / code_build

        current_hash = await hash_code_build(code_build)
        is_code_modified = self.ignore_hash or current_hash != code.last_deploy_hash

        options = DeployOptions(
            profile=self.profile,
            alexa_region=alexa_region,
            skill_id=profile_resources.skill_id,
            skill_name=skill_name,
            code=CodeOptions(code_build=code_build, is_code_modified=is_code_modified),
            user_config=infrastructure.user_config,
            deploy_state=dict(infrastructure.deploy_state),
            deploy_regions=deploy_regions,
            project_root=self.project_root
        )
        reporter = self.reporter_factory(alexa_region)
        result = await delegate.invoke(reporter, options)

        if result.is_code_deployed:
            result.last_deploy_hash = current_hash
        if result.is_deploy_skipped:
            self.logger.info(result.result_message)
        elif not result.is_all_step_success:
            self.logger.warning(result.result_message)
        return result

    def _update_resources_config(self,
                                 profile_resources: ProfileResources,
                                 infrastructure: SkillInfrastructure,
                                 regions: List[str],
                                 results: Dict[str, DeployResult]) -> None:
        """Record the deploy state and code hash of every region, keeping prior state where none came back"""
        new_deploy_state = {}
        for region in regions:
            result = results.get(region)
            if result is not None and not result.deploy_state.is_empty():
                new_deploy_state[region] = result.deploy_state
            elif region in infrastructure.deploy_state:
                new_deploy_state[region] = infrastructure.deploy_state[region]
            if result is not None and result.last_deploy_hash:
                profile_resources.code[region].last_deploy_hash = result.last_deploy_hash

        infrastructure.deploy_state = new_deploy_state
        self.resources.write()
