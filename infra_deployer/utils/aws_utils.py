"""AWS profile and region resolution

Credentials are resolved into an explicit AwsCredentials value that is passed
to every client; nothing here touches process-wide boto3 defaults.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional

import boto3
from botocore.exceptions import ProfileNotFound

from ..api.exceptions import ConfigError
from ..constants import (
    CLI_CONFIG_DIR,
    CLI_CONFIG_FILE,
    DEFAULT_AWS_REGION,
    ENV_CLI_CONFIG,
    ENV_AWS_ACCESS_KEY,
    ENV_AWS_SECRET_KEY,
    ENV_AWS_PROFILE,
    ENV_AWS_DEFAULT_PROFILE,
    ENV_REGION_VARIABLES,
    ENVIRONMENT_PROFILE_NAME,
    ENVIRONMENT_AWS_CREDENTIALS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AwsCredentials:
    """AWS profile and region used by one deploy invocation"""

    profile: str
    region: str

    @property
    def uses_environment(self) -> bool:
        """Credentials come from AWS_* environment variables"""
        return self.profile == ENVIRONMENT_AWS_CREDENTIALS

    def create_session(self) -> boto3.session.Session:
        """Create a boto3 session bound to this profile and region"""
        profile_name = None if self.uses_environment else self.profile
        return boto3.session.Session(profile_name=profile_name, region_name=self.region)


def get_cli_config_path() -> Path:
    """Get the CLI config file path"""
    custom = os.environ.get(ENV_CLI_CONFIG)
    if custom:
        return Path(custom)
    return Path.home() / CLI_CONFIG_DIR / CLI_CONFIG_FILE


class ProfileResolver:
    """Resolve the AWS profile linked to a CLI profile and its default region"""

    def __init__(self, cli_config_path: Optional[Path] = None):
        self.cli_config_path = cli_config_path or get_cli_config_path()
        self._cli_config: Optional[Dict[str, Any]] = None

    def _load_cli_config(self) -> Dict[str, Any]:
        if self._cli_config is None:
            if not self.cli_config_path.exists():
                raise ConfigError(f"CLI config file not found: {self.cli_config_path}")
            try:
                with open(self.cli_config_path, 'r') as f:
                    self._cli_config = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(f"Invalid JSON in {self.cli_config_path}: {e}")
        return self._cli_config

    def get_aws_profile(self, profile: str) -> Optional[str]:
        """
        Get the AWS profile linked to a CLI profile

        Args:
            profile: CLI profile name

        Returns:
            AWS profile name, the environment credentials marker, or None
        """
        if profile == ENVIRONMENT_PROFILE_NAME:
            if os.environ.get(ENV_AWS_ACCESS_KEY) and os.environ.get(ENV_AWS_SECRET_KEY):
                return ENVIRONMENT_AWS_CREDENTIALS

        profiles = self._load_cli_config().get("profiles") or {}
        return (profiles.get(profile) or {}).get("aws_profile")

    def get_default_region(self, aws_profile: Optional[str]) -> str:
        """
        Get the default AWS region of an AWS profile

        Region environment variables win, then the region configured for the
        profile in the shared AWS config files, then the global default.
        """
        for variable in ENV_REGION_VARIABLES:
            region = os.environ.get(variable)
            if region:
                return region

        profile_name = aws_profile
        if not profile_name or profile_name == ENVIRONMENT_AWS_CREDENTIALS:
            profile_name = os.environ.get(ENV_AWS_PROFILE) or os.environ.get(ENV_AWS_DEFAULT_PROFILE)

        try:
            region = boto3.session.Session(profile_name=profile_name).region_name
        except ProfileNotFound:
            logger.debug(f"AWS profile {profile_name} not found in shared config files")
            region = None

        return region or DEFAULT_AWS_REGION

    def get_credentials(self, profile: str, region: str) -> Optional[AwsCredentials]:
        """Build explicit credentials for a CLI profile, None if no AWS profile is linked"""
        aws_profile = self.get_aws_profile(profile)
        if not aws_profile:
            return None
        return AwsCredentials(profile=aws_profile, region=region)
