"""AWS CloudFormation client"""

import logging
from typing import Dict, List, Optional, Any

from botocore.exceptions import ClientError

from ..constants import STACK_DELETE_COMPLETE, STACK_NO_UPDATES_MESSAGE
from ..utils.async_utils import run_blocking
from ..utils.aws_utils import AwsCredentials

logger = logging.getLogger(__name__)


class CloudFormationClient:
    """Async wrapper around the boto3 CloudFormation client"""

    def __init__(self, credentials: AwsCredentials, client=None):
        """
        Initialize CloudFormation client

        Args:
            credentials: AWS profile and region to use
            client: Pre-built boto3 CloudFormation client (created from credentials if omitted)
        """
        self.credentials = credentials
        self._client = client

    @property
    def client(self):
        if self._client is None:
            session = self.credentials.create_session()
            self._client = session.client("cloudformation", region_name=self.credentials.region)
        return self._client

    async def create_stack(self,
                           stack_name: str,
                           template_body: str,
                           parameters: List[Dict[str, str]],
                           capabilities: List[str]) -> str:
        """
        Create a stack

        Returns:
            Id of the new stack
        """
        params: Dict[str, Any] = {
            "StackName": stack_name,
            "TemplateBody": template_body,
            "Capabilities": capabilities,
        }
        if parameters:
            params["Parameters"] = parameters

        logger.debug(f"Creating stack {stack_name}")
        response = await run_blocking(self.client.create_stack, **params)
        return response["StackId"]

    async def update_stack(self,
                           stack_id: str,
                           template_body: str,
                           parameters: List[Dict[str, str]],
                           capabilities: List[str]) -> Optional[str]:
        """
        Update a stack

        Returns:
            Stack id, or None when CloudFormation reports nothing to update
        """
        params: Dict[str, Any] = {
            "StackName": stack_id,
            "TemplateBody": template_body,
            "Capabilities": capabilities,
        }
        if parameters:
            params["Parameters"] = parameters

        logger.debug(f"Updating stack {stack_id}")
        try:
            response = await run_blocking(self.client.update_stack, **params)
        except ClientError as e:
            error = e.response.get("Error", {})
            if error.get("Code") == "ValidationError" and error.get("Message") == STACK_NO_UPDATES_MESSAGE:
                logger.info(f"Stack {stack_id} is already up to date")
                return None
            raise
        return response["StackId"]

    async def get_stack(self, stack_id: str) -> Optional[Dict[str, Any]]:
        """Describe a stack, None if CloudFormation returns no record"""
        response = await run_blocking(self.client.describe_stacks, StackName=stack_id)
        stacks = response.get("Stacks") or []
        return stacks[0] if stacks else None

    async def stack_exists(self, stack_id: Optional[str]) -> bool:
        """
        Check if a stack exists and has not been deleted

        Any describe failure counts as a missing stack, since a recorded id
        may point at a stack removed outside this tool.
        """
        if not stack_id:
            return False
        try:
            stack = await self.get_stack(stack_id)
        except ClientError as e:
            logger.debug(f"Stack {stack_id} not found: {e}")
            return False
        return stack is not None and stack.get("StackStatus") != STACK_DELETE_COMPLETE

    async def get_stack_events(self, stack_id: str) -> List[Dict[str, Any]]:
        """Get the most recent page of stack events, newest first

        Older pages belong to earlier deploys and are not read.
        """
        response = await run_blocking(self.client.describe_stack_events, StackName=stack_id)
        return response.get("StackEvents") or []
