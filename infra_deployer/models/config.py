"""Configuration data models"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Any

import yaml

from ..api.exceptions import ConfigError, ProfileNotFoundError
from ..constants import RESOURCES_CONFIG_FILE, DEFAULT_ALEXA_AWS_REGION_MAP
from .result import DeployState


@dataclass
class ArtifactsS3Config:
    """Custom artifact bucket settings"""

    bucket_name: Optional[str] = None
    bucket_key: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {}
        if self.bucket_name:
            data["bucketName"] = self.bucket_name
        if self.bucket_key:
            data["bucketKey"] = self.bucket_key
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['ArtifactsS3Config']:
        """Create from dictionary"""
        if not data:
            return None
        return cls(bucket_name=data.get("bucketName"), bucket_key=data.get("bucketKey"))


@dataclass
class CfnConfig:
    """CloudFormation parameters and capabilities"""

    parameters: Optional[Dict[str, str]] = None
    capabilities: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {}
        if self.parameters is not None:
            data["parameters"] = self.parameters
        if self.capabilities is not None:
            data["capabilities"] = self.capabilities
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['CfnConfig']:
        """Create from dictionary"""
        if not data:
            return None
        return cls(parameters=data.get("parameters"), capabilities=data.get("capabilities"))


@dataclass
class RegionalOverride:
    """Per Alexa region overrides of the user config"""

    template_path: Optional[str] = None
    aws_region: Optional[str] = None
    artifacts_s3: Optional[ArtifactsS3Config] = None
    cfn: Optional[CfnConfig] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data: Dict[str, Any] = {}
        if self.template_path:
            data["templatePath"] = self.template_path
        if self.aws_region:
            data["awsRegion"] = self.aws_region
        if self.artifacts_s3:
            data["artifactsS3"] = self.artifacts_s3.to_dict()
        if self.cfn:
            data["cfn"] = self.cfn.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RegionalOverride':
        """Create from dictionary"""
        return cls(
            template_path=data.get("templatePath"),
            aws_region=data.get("awsRegion"),
            artifacts_s3=ArtifactsS3Config.from_dict(data.get("artifactsS3")),
            cfn=CfnConfig.from_dict(data.get("cfn"))
        )


@dataclass
class UserConfig:
    """User config of the skill infrastructure

    Every lookup prefers the regional override of the requested Alexa region
    over the top-level value.
    """

    runtime: Optional[str] = None
    handler: Optional[str] = None
    template_path: Optional[str] = None
    aws_region: Optional[str] = None
    artifacts_s3: Optional[ArtifactsS3Config] = None
    cfn: Optional[CfnConfig] = None
    regional_overrides: Dict[str, RegionalOverride] = field(default_factory=dict)

    def _override(self, alexa_region: str) -> RegionalOverride:
        return self.regional_overrides.get(alexa_region) or RegionalOverride()

    def get_template_path(self, alexa_region: str) -> Optional[str]:
        return self._override(alexa_region).template_path or self.template_path

    def get_bucket_name(self, alexa_region: str) -> Optional[str]:
        override = self._override(alexa_region).artifacts_s3
        if override and override.bucket_name:
            return override.bucket_name
        return self.artifacts_s3.bucket_name if self.artifacts_s3 else None

    def get_bucket_key(self, alexa_region: str) -> Optional[str]:
        override = self._override(alexa_region).artifacts_s3
        if override and override.bucket_key:
            return override.bucket_key
        return self.artifacts_s3.bucket_key if self.artifacts_s3 else None

    def get_cfn_parameters(self, alexa_region: str) -> Dict[str, str]:
        override = self._override(alexa_region).cfn
        if override and override.parameters:
            return dict(override.parameters)
        if self.cfn and self.cfn.parameters:
            return dict(self.cfn.parameters)
        return {}

    def get_cfn_capabilities(self, alexa_region: str) -> List[str]:
        override = self._override(alexa_region).cfn
        if override and override.capabilities:
            return list(override.capabilities)
        if self.cfn and self.cfn.capabilities:
            return list(self.cfn.capabilities)
        return []

    def get_aws_region(self, alexa_region: str) -> Optional[str]:
        """AWS region configured for an Alexa region, if any

        The top-level awsRegion only applies to the "default" Alexa region.
        """
        if alexa_region == "default":
            return self.aws_region
        return self._override(alexa_region).aws_region

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data: Dict[str, Any] = {}
        if self.runtime:
            data["runtime"] = self.runtime
        if self.handler:
            data["handler"] = self.handler
        if self.template_path:
            data["templatePath"] = self.template_path
        if self.aws_region:
            data["awsRegion"] = self.aws_region
        if self.artifacts_s3:
            data["artifactsS3"] = self.artifacts_s3.to_dict()
        if self.cfn:
            data["cfn"] = self.cfn.to_dict()
        if self.regional_overrides:
            data["regionalOverrides"] = {
                region: override.to_dict() for region, override in self.regional_overrides.items()
            }
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'UserConfig':
        """Create from dictionary"""
        data = data or {}
        return cls(
            runtime=data.get("runtime"),
            handler=data.get("handler"),
            template_path=data.get("templatePath"),
            aws_region=data.get("awsRegion"),
            artifacts_s3=ArtifactsS3Config.from_dict(data.get("artifactsS3")),
            cfn=CfnConfig.from_dict(data.get("cfn")),
            regional_overrides={
                region: RegionalOverride.from_dict(override or {})
                for region, override in (data.get("regionalOverrides") or {}).items()
            }
        )


def get_alexa_deploy_regions(regions: List[str], user_config: UserConfig) -> Dict[str, str]:
    """Map each Alexa region to the AWS region it deploys into

    Regions with neither an override nor a default mapping are left out, which
    the deploy delegate reports as unsupported.
    """
    deploy_regions = {}
    for alexa_region in regions:
        aws_region = user_config.get_aws_region(alexa_region) or DEFAULT_ALEXA_AWS_REGION_MAP.get(alexa_region)
        if aws_region:
            deploy_regions[alexa_region] = aws_region
    return deploy_regions


@dataclass
class CodeConfig:
    """Built artifact of one Alexa region"""

    build: str
    last_deploy_hash: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {"build": self.build}
        if self.last_deploy_hash:
            data["lastDeployHash"] = self.last_deploy_hash
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CodeConfig':
        """Create from dictionary"""
        if "build" not in data:
            raise ConfigError("Each code region must define the \"build\" artifact path.")
        return cls(build=data["build"], last_deploy_hash=data.get("lastDeployHash"))


@dataclass
class SkillInfrastructure:
    """Deploy delegate settings of a profile"""

    type: str
    user_config: UserConfig = field(default_factory=UserConfig)
    deploy_state: Dict[str, DeployState] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "type": self.type,
            "userConfig": self.user_config.to_dict(),
            "deployState": {region: state.to_dict() for region, state in self.deploy_state.items()}
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SkillInfrastructure':
        """Create from dictionary"""
        if not data.get("type"):
            raise ConfigError("skillInfrastructure.type must be provided.")
        return cls(
            type=data["type"],
            user_config=UserConfig.from_dict(data.get("userConfig")),
            deploy_state={
                region: DeployState.from_dict(state)
                for region, state in (data.get("deployState") or {}).items()
            }
        )


@dataclass
class ProfileResources:
    """Resources of one profile"""

    skill_id: Optional[str] = None
    skill_name: Optional[str] = None
    skill_infrastructure: Optional[SkillInfrastructure] = None
    code: Dict[str, CodeConfig] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data: Dict[str, Any] = {}
        if self.skill_id:
            data["skillId"] = self.skill_id
        if self.skill_name:
            data["skillName"] = self.skill_name
        if self.skill_infrastructure:
            data["skillInfrastructure"] = self.skill_infrastructure.to_dict()
        if self.code:
            data["code"] = {region: code.to_dict() for region, code in self.code.items()}
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProfileResources':
        """Create from dictionary"""
        infra = data.get("skillInfrastructure")
        return cls(
            skill_id=data.get("skillId"),
            skill_name=data.get("skillName"),
            skill_infrastructure=SkillInfrastructure.from_dict(infra) if infra else None,
            code={region: CodeConfig.from_dict(code or {}) for region, code in (data.get("code") or {}).items()}
        )


class ResourcesConfig:
    """Project resources file (ask-resources.yaml)"""

    def __init__(self, path: Path, profiles: Dict[str, ProfileResources] = None):
        self.path = path
        self.profiles = profiles or {}

    @classmethod
    def load(cls, project_root: Path) -> 'ResourcesConfig':
        """Load the resources file from a project root"""
        path = project_root / RESOURCES_CONFIG_FILE
        if not path.exists():
            raise ConfigError(f"Resources file not found: {path}")

        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}")

        profiles = {
            name: ProfileResources.from_dict(profile or {})
            for name, profile in (data.get("profiles") or {}).items()
        }
        return cls(path, profiles)

    def get_profile(self, profile: str) -> ProfileResources:
        if profile not in self.profiles:
            raise ProfileNotFoundError(profile, RESOURCES_CONFIG_FILE)
        return self.profiles[profile]

    def write(self) -> None:
        """Write the resources file back to disk"""
        data = {"profiles": {name: p.to_dict() for name, p in self.profiles.items()}}
        with open(self.path, 'w') as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
