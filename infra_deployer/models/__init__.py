"""Data models for infra-deployer"""

from .result import (
    S3Location,
    DeployState,
    StackInfo,
    StackDeployOutcome,
    UploadResult,
    Endpoint,
    BootstrapResult,
    DeployResult,
)
from .config import (
    ArtifactsS3Config,
    CfnConfig,
    RegionalOverride,
    UserConfig,
    CodeConfig,
    SkillInfrastructure,
    ProfileResources,
    ResourcesConfig,
    get_alexa_deploy_regions,
)
from .options import CodeOptions, DeployOptions, BootstrapOptions

__all__ = [
    # Result models
    "S3Location",
    "DeployState",
    "StackInfo",
    "StackDeployOutcome",
    "UploadResult",
    "Endpoint",
    "BootstrapResult",
    "DeployResult",

    # Config models
    "ArtifactsS3Config",
    "CfnConfig",
    "RegionalOverride",
    "UserConfig",
    "CodeConfig",
    "SkillInfrastructure",
    "ProfileResources",
    "ResourcesConfig",
    "get_alexa_deploy_regions",

    # Options
    "CodeOptions",
    "DeployOptions",
    "BootstrapOptions",
]
