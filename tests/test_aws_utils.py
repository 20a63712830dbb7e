"""Tests for AWS profile and region resolution"""

import json

import pytest

from infra_deployer.api.exceptions import ConfigError
from infra_deployer.constants import ENVIRONMENT_AWS_CREDENTIALS, ENVIRONMENT_PROFILE_NAME, ENV_REGION_VARIABLES
from infra_deployer.utils.aws_utils import AwsCredentials, ProfileResolver


@pytest.fixture
def cli_config(tmp_path):
    path = tmp_path / "cli_config"
    path.write_text(json.dumps({
        "profiles": {
            "default": {"aws_profile": "skill-dev"},
            "no-aws": {},
        }
    }))
    return path


@pytest.fixture
def clean_env(monkeypatch):
    for variable in ENV_REGION_VARIABLES + ("AWS_PROFILE", "AWS_DEFAULT_PROFILE",
                                            "AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY"):
        monkeypatch.delenv(variable, raising=False)
    return monkeypatch


class TestProfileResolver:
    """CLI profile to AWS profile mapping"""

    def test_linked_profile(self, cli_config, clean_env):
        """The aws_profile of the CLI profile is returned"""
        resolver = ProfileResolver(cli_config)

        assert resolver.get_aws_profile("default") == "skill-dev"
        assert resolver.get_aws_profile("no-aws") is None
        assert resolver.get_aws_profile("unknown") is None

    def test_environment_profile(self, cli_config, clean_env):
        """The environment profile uses AWS_* credentials when both are set"""
        clean_env.setenv("AWS_ACCESS_KEY_ID", "AKIA")
        clean_env.setenv("AWS_SECRET_ACCESS_KEY", "secret")

        assert ProfileResolver(cli_config).get_aws_profile(ENVIRONMENT_PROFILE_NAME) == ENVIRONMENT_AWS_CREDENTIALS

    def test_missing_cli_config(self, tmp_path, clean_env):
        """A missing CLI config file is a config error"""
        with pytest.raises(ConfigError):
            ProfileResolver(tmp_path / "missing").get_aws_profile("default")

    def test_invalid_cli_config(self, tmp_path, clean_env):
        """Unparseable CLI config is a config error"""
        path = tmp_path / "cli_config"
        path.write_text("{not json")

        with pytest.raises(ConfigError):
            ProfileResolver(path).get_aws_profile("default")

    def test_region_from_environment(self, cli_config, clean_env):
        """Region variables win over the profile configuration"""
        clean_env.setenv("AWS_DEFAULT_REGION", "ap-northeast-1")

        assert ProfileResolver(cli_config).get_default_region("skill-dev") == "ap-northeast-1"

    def test_region_from_shared_config(self, cli_config, clean_env, tmp_path):
        """The profile region comes from the shared AWS config"""
        aws_config = tmp_path / "aws_config"
        aws_config.write_text("[profile skill-dev]\nregion = eu-west-3\n")
        clean_env.setenv("AWS_CONFIG_FILE", str(aws_config))
        clean_env.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "credentials"))

        resolver = ProfileResolver(cli_config)

        assert resolver.get_default_region("skill-dev") == "eu-west-3"
        assert resolver.get_default_region("not-configured") == "us-east-1"

    def test_credentials(self, cli_config, clean_env):
        """Credentials carry the linked profile and the requested region"""
        resolver = ProfileResolver(cli_config)

        assert resolver.get_credentials("default", "eu-west-1") == AwsCredentials("skill-dev", "eu-west-1")
        assert resolver.get_credentials("no-aws", "eu-west-1") is None


def test_environment_credentials_session(clean_env):
    """Environment credentials open a session without a profile name"""
    clean_env.setenv("AWS_ACCESS_KEY_ID", "AKIA")
    clean_env.setenv("AWS_SECRET_ACCESS_KEY", "secret")

    session = AwsCredentials(ENVIRONMENT_AWS_CREDENTIALS, "eu-west-1").create_session()

    assert session.region_name == "eu-west-1"
    assert session.get_credentials().access_key == "AKIA"
