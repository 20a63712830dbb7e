"""Deploy result and state models"""

import copy
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any


@dataclass
class S3Location:
    """Artifact location in S3"""

    bucket: str
    key: str
    version_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {"bucket": self.bucket, "key": self.key}
        if self.version_id:
            data["versionId"] = self.version_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'S3Location':
        """Create from dictionary"""
        return cls(
            bucket=data["bucket"],
            key=data["key"],
            version_id=data.get("versionId")
        )


@dataclass
class DeployState:
    """Durable deploy record of one environment

    Persisted by the orchestrator and passed back on the next deploy so the
    delegate can update the existing stack and reuse the artifact bucket.
    """

    stack_id: Optional[str] = None
    outputs: List[Dict[str, Any]] = field(default_factory=list)
    s3: Optional[S3Location] = None

    def copy(self) -> 'DeployState':
        """Return an independent copy"""
        return copy.deepcopy(self)

    def is_empty(self) -> bool:
        """Check if nothing has been recorded yet"""
        return not self.stack_id and not self.outputs and self.s3 is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data: Dict[str, Any] = {}
        if self.stack_id:
            data["stackId"] = self.stack_id
        if self.outputs:
            data["outputs"] = self.outputs
        if self.s3:
            data["s3"] = self.s3.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'DeployState':
        """Create from dictionary"""
        data = data or {}
        s3 = data.get("s3")
        return cls(
            stack_id=data.get("stackId"),
            outputs=list(data.get("outputs") or []),
            s3=S3Location.from_dict(s3) if s3 else None
        )


@dataclass
class StackInfo:
    """Snapshot of a CloudFormation stack as returned by describe_stacks"""

    stack_id: str
    status: str
    status_reason: Optional[str] = None
    outputs: List[Dict[str, Any]] = field(default_factory=list)

    def get_output(self, key: str) -> Optional[str]:
        """Get an output value by its OutputKey"""
        for output in self.outputs:
            if output.get("OutputKey") == key:
                return output.get("OutputValue")
        return None

    @classmethod
    def from_stack(cls, stack: Dict[str, Any]) -> 'StackInfo':
        """Create from a boto3 stack description"""
        return cls(
            stack_id=stack.get("StackId"),
            status=stack["StackStatus"],
            status_reason=stack.get("StackStatusReason"),
            outputs=list(stack.get("Outputs") or [])
        )


@dataclass
class StackDeployOutcome:
    """Terminal success of a stack deploy"""

    stack_id: str
    stack_info: StackInfo
    endpoint_uri: Optional[str] = None


@dataclass
class UploadResult:
    """Result of a put_object call"""

    etag: Optional[str] = None
    version_id: Optional[str] = None


@dataclass
class Endpoint:
    """Skill endpoint produced by the deploy"""

    uri: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {"uri": self.uri}


@dataclass
class BootstrapResult:
    """Result of a deploy delegate bootstrap"""

    user_config: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {"userConfig": self.user_config}


@dataclass
class DeployResult:
    """Result of one deploy delegate invocation for one environment

    Failures are recorded here instead of being raised, so the deploy state
    gathered before the failure reaches the caller.
    """

    is_all_step_success: bool = False
    is_code_deployed: bool = False
    deploy_state: DeployState = field(default_factory=DeployState)
    endpoint: Optional[Endpoint] = None
    result_message: str = ""
    is_deploy_skipped: bool = False
    deploy_region: Optional[str] = None
    last_deploy_hash: Optional[str] = None

    @property
    def is_partial(self) -> bool:
        """Artifact staged but stack not deployed"""
        return self.is_code_deployed and not self.is_all_step_success

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data: Dict[str, Any] = {
            "isAllStepSuccess": self.is_all_step_success,
            "isCodeDeployed": self.is_code_deployed,
            "deployState": self.deploy_state.to_dict(),
            "resultMessage": self.result_message,
        }
        if self.endpoint:
            data["endpoint"] = self.endpoint.to_dict()
        if self.is_deploy_skipped:
            data["isDeploySkipped"] = True
            data["deployRegion"] = self.deploy_region
        if self.last_deploy_hash:
            data["lastDeployHash"] = self.last_deploy_hash
        return data
