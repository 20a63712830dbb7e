"""Tests for the deploy delegate contract and registry"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from infra_deployer.api.exceptions import (
    DeployDelegateLoadError,
    DeployDelegateNotInstantiatedError,
    DeployDelegateResponseError,
    InvalidDeployDelegateError,
)
from infra_deployer.constants import CFN_DEPLOYER_TYPE
from infra_deployer.delegates.base import DeployDelegateBackend
from infra_deployer.delegates.cfn import CfnDeployer
from infra_deployer.delegates.contract import DeployDelegate, DeployDelegateRegistry, load_deploy_delegate
from infra_deployer.models.result import BootstrapResult, DeployResult, DeployState, Endpoint


class EchoBackend(DeployDelegateBackend):
    """Backend returning canned results"""

    async def bootstrap(self, options):
        return BootstrapResult(user_config={"profile": options.profile})

    async def invoke(self, reporter, options):
        reporter.update_status("echo")
        return DeployResult(is_all_step_success=True, endpoint=Endpoint(uri="arn:echo"))


class HalfBackend(DeployDelegateBackend):
    """Backend missing invoke"""

    async def bootstrap(self, options):
        return BootstrapResult()


class TestDeployDelegate:
    """Wrapper validation and forwarding"""

    def test_rejects_missing_instance(self):
        """A None instance is not a deploy delegate"""
        with pytest.raises(InvalidDeployDelegateError) as exc_info:
            DeployDelegate("custom", None)
        assert str(exc_info.value) == "[Error]: Invalid deploy delegate. Failed to load the target module."

    @pytest.mark.parametrize("method", ["bootstrap", "invoke"])
    def test_rejects_missing_method(self, method):
        """Both methods must be callable"""
        instance = MagicMock(spec=["bootstrap", "invoke"])
        setattr(instance, method, "not callable")

        with pytest.raises(InvalidDeployDelegateError) as exc_info:
            DeployDelegate("custom", instance)
        assert f'"{method}"' in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_forwards_calls(self, reporter):
        """bootstrap and invoke reach the backend unchanged"""
        delegate = DeployDelegate("echo", EchoBackend())
        options = MagicMock(profile="default")

        bootstrap_result = await delegate.bootstrap(options)
        invoke_result = await delegate.invoke(reporter, options)

        assert bootstrap_result.user_config == {"profile": "default"}
        assert invoke_result.endpoint.uri == "arn:echo"
        assert reporter.messages == ["echo"]

    @pytest.mark.asyncio
    async def test_disposed_delegate_is_fatal(self, reporter):
        """Calls after dispose raise the not-instantiated error"""
        instance = MagicMock()
        instance.invoke = AsyncMock()
        instance.bootstrap = AsyncMock()
        delegate = DeployDelegate("custom", instance)
        delegate.dispose()

        with pytest.raises(DeployDelegateNotInstantiatedError) as exc_info:
            await delegate.invoke(reporter, MagicMock())
        assert str(exc_info.value) == "[Fatal]: Please instantiate the DeployDelegate class before using."

        with pytest.raises(DeployDelegateNotInstantiatedError):
            await delegate.bootstrap(MagicMock())
        instance.invoke.assert_not_called()


class TestResponseValidation:
    """Result checks with field-specific messages"""

    @pytest.fixture
    def delegate(self):
        return DeployDelegate("echo", EchoBackend())

    def test_valid_result(self, delegate):
        """A complete result passes"""
        delegate.validate_deploy_delegate_response(
            DeployResult(is_all_step_success=True, endpoint=Endpoint(uri="arn:aws:lambda:fn"))
        )

    def test_empty_result(self, delegate):
        """A missing result is rejected"""
        with pytest.raises(DeployDelegateResponseError) as exc_info:
            delegate.validate_deploy_delegate_response(None)
        assert "should not be empty" in str(exc_info.value)

    def test_missing_endpoint(self, delegate):
        """A result without endpoint names the field"""
        with pytest.raises(DeployDelegateResponseError) as exc_info:
            delegate.validate_deploy_delegate_response(DeployResult())
        assert '"endpoint" field must exist' in str(exc_info.value)

    def test_missing_uri(self, delegate):
        """An endpoint without uri names the field"""
        with pytest.raises(DeployDelegateResponseError) as exc_info:
            delegate.validate_deploy_delegate_response(DeployResult(endpoint=Endpoint(uri="")))
        assert '"uri" field must exist' in str(exc_info.value)

    def test_missing_deploy_state(self, delegate):
        """A result without deploy state names the field"""
        result = DeployResult(endpoint=Endpoint(uri="arn:aws:lambda:fn"))
        result.deploy_state = None
        with pytest.raises(DeployDelegateResponseError) as exc_info:
            delegate.validate_deploy_delegate_response(result)
        assert '"deployState" field must exist' in str(exc_info.value)

    def test_every_region_is_checked(self, delegate):
        """Mapping validation fails on any invalid region"""
        good = DeployResult(endpoint=Endpoint(uri="arn:aws:lambda:fn"), deploy_state=DeployState())
        with pytest.raises(DeployDelegateResponseError):
            delegate.validate_deploy_delegate_responses({"default": good, "EU": DeployResult()})


class TestRegistry:
    """Type lookup and registration"""

    def test_builtin_cfn_deployer(self):
        """The built-in type loads the CloudFormation backend"""
        delegate = load_deploy_delegate(CFN_DEPLOYER_TYPE, DeployDelegateRegistry())

        assert delegate.type == CFN_DEPLOYER_TYPE
        assert isinstance(delegate.instance, CfnDeployer)

    def test_unknown_type(self):
        """An unregistered type is not recognized"""
        with pytest.raises(DeployDelegateLoadError) as exc_info:
            DeployDelegateRegistry().load("@ask-cli/unknown")
        assert str(exc_info.value) == '[Error]: Skill infrastructure type "@ask-cli/unknown" is not recognized.'

    def test_failing_module(self):
        """A registered module that fails to import reports the cause"""
        registry = DeployDelegateRegistry()
        registry._delegates["broken"] = {"module": "infra_deployer.delegates.does_not_exist", "description": ""}

        with pytest.raises(DeployDelegateLoadError) as exc_info:
            registry.load("broken")
        assert str(exc_info.value).startswith('[Error]: Built-in skill infrastructure type "broken" failed to load.\n')

    def test_register_and_load(self):
        """A registered backend class is instantiated on load"""
        registry = DeployDelegateRegistry()
        registry.register("echo", EchoBackend, "Echo backend")

        delegate = registry.load("echo")

        assert isinstance(delegate.instance, EchoBackend)
        assert [info.type for info in registry.list_delegates()] == [CFN_DEPLOYER_TYPE, "echo"]

    def test_register_rejects_abstract_backend(self):
        """Backends must implement both methods at registration"""
        with pytest.raises(InvalidDeployDelegateError):
            DeployDelegateRegistry().register("half", HalfBackend)

    def test_register_rejects_foreign_class(self):
        """Only DeployDelegateBackend subclasses can be registered"""
        with pytest.raises(InvalidDeployDelegateError):
            DeployDelegateRegistry().register("dict", dict)

    def test_each_load_is_a_new_instance(self):
        """Loading twice gives independent delegates"""
        registry = DeployDelegateRegistry()
        assert registry.load(CFN_DEPLOYER_TYPE).instance is not registry.load(CFN_DEPLOYER_TYPE).instance
