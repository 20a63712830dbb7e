"""Exception definitions for infra-deployer"""

from typing import List

from ..constants import ErrorCode


class InfraDeployerError(Exception):
    """Base exception for infra-deployer"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class ConfigError(InfraDeployerError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_FORMAT_ERROR)


class ProfileNotFoundError(ConfigError):
    """Profile missing from the resources or CLI configuration"""

    def __init__(self, profile: str, config_file: str):
        super().__init__(f"Profile [{profile}] does not exist. Please configure it in your {config_file} file.")
        self.error_code = ErrorCode.PROFILE_NOT_FOUND
        self.profile = profile


class CfnDeployerError(InfraDeployerError):
    """CloudFormation deployer error, carries the diagnosed root cause"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CFN_DEPLOY_FAILED)


class StackDeployTimeoutError(CfnDeployerError):
    """Stack did not reach a terminal status within the polling budget"""

    def __init__(self, stack_id: str, last_status: str, waited: float):
        message = (
            f"Timed out after {waited:.0f} seconds waiting for stack ({stack_id}) to finish, "
            f"last status: {last_status}. The stack operation continues in CloudFormation; "
            "check AWS Console for its final state."
        )
        super().__init__(message)
        self.error_code = ErrorCode.STACK_DEPLOY_TIMEOUT
        self.stack_id = stack_id
        self.last_status = last_status


class BootstrapError(InfraDeployerError):
    """Deploy delegate bootstrap failed"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.BOOTSTRAP_FAILED)


class DeployDelegateError(InfraDeployerError):
    """Integration error between the orchestrator and a deploy delegate"""
    pass


class InvalidDeployDelegateError(DeployDelegateError):
    """Deploy delegate does not implement the contract"""

    def __init__(self, message: str):
        super().__init__(f"[Error]: Invalid deploy delegate. {message}", ErrorCode.DELEGATE_INVALID)


class DeployDelegateNotInstantiatedError(DeployDelegateError):
    """Deploy delegate wrapper used after its instance was disposed"""

    def __init__(self):
        super().__init__(
            "[Fatal]: Please instantiate the DeployDelegate class before using.",
            ErrorCode.DELEGATE_NOT_INSTANTIATED
        )


class DeployDelegateResponseError(DeployDelegateError):
    """Deploy delegate returned a result violating the contract"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.DELEGATE_RESPONSE_INVALID)


class DeployDelegateLoadError(DeployDelegateError):
    """Deploy delegate type unknown or its module failed to load"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.DELEGATE_LOAD_FAILED)


class InfrastructureDeployError(InfraDeployerError):
    """One or more environments failed to deploy"""

    def __init__(self, failures: List[str]):
        message = "\n".join(failures)
        super().__init__(message, ErrorCode.INFRASTRUCTURE_DEPLOY_FAILED)
        self.failures = failures
