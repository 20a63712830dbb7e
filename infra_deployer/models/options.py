"""Deploy delegate input models"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from .config import UserConfig
from .result import DeployState


@dataclass
class CodeOptions:
    """Built code artifact for one Alexa region"""

    code_build: Path
    is_code_modified: bool = True


@dataclass
class DeployOptions:
    """Input of a deploy delegate invoke, read-only to the delegate"""

    profile: str
    alexa_region: str
    skill_id: str
    skill_name: str
    code: CodeOptions
    user_config: UserConfig = field(default_factory=UserConfig)
    deploy_state: Dict[str, DeployState] = field(default_factory=dict)
    deploy_regions: Dict[str, str] = field(default_factory=dict)
    project_root: Optional[Path] = None


@dataclass
class BootstrapOptions:
    """Input of a deploy delegate bootstrap"""

    profile: str
    workspace_path: Path
    user_config: Dict = field(default_factory=dict)
