"""Deploy delegate contract and registry"""

import importlib
import inspect
import logging
from typing import Any, Dict, List, Mapping, Optional, Type

from ..api.exceptions import (
    DeployDelegateLoadError,
    DeployDelegateNotInstantiatedError,
    DeployDelegateResponseError,
    InvalidDeployDelegateError,
)
from ..constants import CFN_DEPLOYER_TYPE
from ..core.reporter import StatusReporter
from ..models.options import BootstrapOptions, DeployOptions
from ..models.result import BootstrapResult, DeployResult
from .base import DeployDelegateBackend, DeployDelegateInfo


class DeployDelegate:
    """Validated wrapper enforcing the contract between the orchestrator and a backend

    Each backend exposes:
    - bootstrap: prepare the infrastructure workspace and return the updated user config
    - invoke: deploy one environment and return its DeployResult
    """

    def __init__(self, type: str, instance: Any):
        """
        Wrap a deploy delegate instance

        Args:
            type: Deploy delegate type name
            instance: Object exposing bootstrap and invoke

        Raises:
            InvalidDeployDelegateError: If the instance is missing either method
        """
        self.type = type
        self.instance = instance
        self._validate_deploy_delegate_methods()

    def _validate_deploy_delegate_methods(self) -> None:
        if self.instance is None:
            raise InvalidDeployDelegateError("Failed to load the target module.")
        for method in ("bootstrap", "invoke"):
            if not callable(getattr(self.instance, method, None)):
                raise InvalidDeployDelegateError(
                    f'The class of the deploy delegate must contain "{method}" method.'
                )

    def dispose(self) -> None:
        """Release the wrapped instance"""
        self.instance = None

    async def bootstrap(self, options: BootstrapOptions) -> BootstrapResult:
        """Wrapper of the backend's bootstrap"""
        if self.instance is None:
            raise DeployDelegateNotInstantiatedError()
        return await self.instance.bootstrap(options)

    async def invoke(self, reporter: StatusReporter, options: DeployOptions) -> DeployResult:
        """Wrapper of the backend's invoke"""
        if self.instance is None:
            raise DeployDelegateNotInstantiatedError()
        return await self.instance.invoke(reporter, options)

    def validate_deploy_delegate_response(self, result: Optional[DeployResult]) -> None:
        """
        Check one environment's result against the contract

        Raises:
            DeployDelegateResponseError: Naming the first missing field
        """
        if not result:
            raise DeployDelegateResponseError("[Error]: Deploy result should not be empty.")
        if not getattr(result, "endpoint", None):
            raise DeployDelegateResponseError(
                '[Error]: Invalid response from deploy delegate. "endpoint" field must exist in the response.'
            )
        if not getattr(result.endpoint, "uri", None):
            raise DeployDelegateResponseError(
                '[Error]: Invalid response from deploy delegate. '
                '"uri" field must exist in the "endpoint" field in the response.'
            )
        if getattr(result, "deploy_state", None) is None:
            raise DeployDelegateResponseError(
                '[Error]: Invalid response from deploy delegate. "deployState" field must exist in the response.'
            )

    def validate_deploy_delegate_responses(self, results: Mapping[str, DeployResult]) -> None:
        """Check the result of every environment"""
        if not results:
            raise DeployDelegateResponseError("[Error]: Deploy result should not be empty.")
        for result in results.values():
            self.validate_deploy_delegate_response(result)


class DeployDelegateRegistry:
    """Registry mapping deploy delegate types to their implementation modules

    A module qualifies when it defines exactly one concrete
    DeployDelegateBackend subclass, checked when the type is registered.
    """

    _builtins: Dict[str, Dict[str, str]] = {
        CFN_DEPLOYER_TYPE: {
            "module": "infra_deployer.delegates.cfn",
            "description": (
                "Deploy skill infrastructure by uploading local skill code to Amazon S3, "
                "and using AWS CloudFormation to configure all the skill needed AWS resources. "
                "Will keep polling the CloudFormation status and update deploy progress in real time. "
                "Starting from a basic skill-template.yaml with AWS Lambda related resources."
            ),
        },
    }

    def __init__(self):
        self._delegates: Dict[str, Dict[str, Any]] = {
            type: dict(entry) for type, entry in self._builtins.items()
        }
        self.logger = logging.getLogger("DeployDelegateRegistry")

    def register(self, type: str, backend_class: Type[DeployDelegateBackend], description: str = "") -> None:
        """
        Register a backend class under a type name

        Raises:
            InvalidDeployDelegateError: If the class does not implement the backend interface
        """
        if not (inspect.isclass(backend_class) and issubclass(backend_class, DeployDelegateBackend)):
            raise InvalidDeployDelegateError(f"{backend_class!r} is not a DeployDelegateBackend.")
        if inspect.isabstract(backend_class):
            raise InvalidDeployDelegateError(f"{backend_class.__name__} does not implement bootstrap and invoke.")

        if type in self._delegates:
            self.logger.warning(f"Deploy delegate {type} already registered, replacing")
        self._delegates[type] = {"class": backend_class, "description": description}

    def is_supported(self, type: str) -> bool:
        return isinstance(type, str) and type in self._delegates

    def list_delegates(self) -> List[DeployDelegateInfo]:
        return [
            DeployDelegateInfo(type=type, description=entry.get("description", ""))
            for type, entry in self._delegates.items()
        ]

    def load(self, type: str) -> DeployDelegate:
        """
        Load a deploy delegate by type

        Raises:
            DeployDelegateLoadError: If the type is unknown or fails to load
        """
        if not self.is_supported(type):
            raise DeployDelegateLoadError(f'[Error]: Skill infrastructure type "{type}" is not recognized.')

        entry = self._delegates[type]
        try:
            backend_class = entry.get("class") or self._import_backend_class(entry["module"])
            return DeployDelegate(type, backend_class())
        except Exception as e:
            raise DeployDelegateLoadError(
                f'[Error]: Built-in skill infrastructure type "{type}" failed to load.\n{e}'
            ) from e

    @staticmethod
    def _import_backend_class(module_name: str) -> Type[DeployDelegateBackend]:
        module = importlib.import_module(module_name)
        candidates = [
            obj for _, obj in inspect.getmembers(module, inspect.isclass)
            if issubclass(obj, DeployDelegateBackend)
            and obj is not DeployDelegateBackend
            and not inspect.isabstract(obj)
        ]
        if len(candidates) != 1:
            raise InvalidDeployDelegateError(
                f"Module {module_name} must define exactly one deploy delegate, found {len(candidates)}."
            )
        return candidates[0]


# Global registry instance
deploy_delegate_registry = DeployDelegateRegistry()


def load_deploy_delegate(type: str, registry: Optional[DeployDelegateRegistry] = None) -> DeployDelegate:
    """Load a deploy delegate from the given registry (global registry if omitted)"""
    return (registry or deploy_delegate_registry).load(type)
