"""CloudFormation stack lifecycle driver"""

import asyncio
import logging
import math
from typing import Dict, List, Optional

from ..api.exceptions import CfnDeployerError, StackDeployTimeoutError
from ..clients.cloudformation import CloudFormationClient
from ..constants import (
    STACK_POLL_INTERVAL,
    STACK_MAX_WAIT_TIME,
    STACK_IN_PROGRESS_SUFFIX,
    STACK_FAILED_SUFFIX,
    STACK_SUCCESS_STATUSES,
    SKILL_ENDPOINT_OUTPUT_KEY,
)
from ..models.result import StackInfo, StackDeployOutcome
from ..utils.async_utils import SleepFunc
from .reporter import StatusReporter

DEPLOY_ERROR_FALLBACK_MESSAGE = (
    "CloudFormation deploy failed. We could not find details for deploy error. "
    "Please check AWS Console for more details."
)


class StackLifecycleDriver:
    """Drive a stack through create or update until it reaches a terminal status

    Polling suspends only through the injected sleep function. The number of
    polls is bounded by max_polls; running out raises StackDeployTimeoutError
    and leaves the remote operation running.
    """

    def __init__(self,
                 cfn_client: CloudFormationClient,
                 reporter: StatusReporter,
                 sleep: SleepFunc = asyncio.sleep,
                 poll_interval: float = STACK_POLL_INTERVAL,
                 max_polls: Optional[int] = None):
        """
        Initialize stack driver

        Args:
            cfn_client: CloudFormation client bound to the target region
            reporter: Progress reporter
            sleep: Awaitable sleep used between polls
            poll_interval: Seconds between polls
            max_polls: Poll limit, derived from STACK_MAX_WAIT_TIME if omitted
        """
        self.cfn_client = cfn_client
        self.reporter = reporter
        self.sleep = sleep
        self.poll_interval = poll_interval
        if max_polls is None:
            max_polls = max(1, math.ceil(STACK_MAX_WAIT_TIME / poll_interval)) if poll_interval > 0 else 1800
        self.max_polls = max_polls
        self.logger = logging.getLogger("StackLifecycleDriver")

    async def deploy_stack(self,
                           stack_id: Optional[str],
                           stack_name: str,
                           template_body: str,
                           parameters: List[Dict[str, str]],
                           capabilities: List[str]) -> StackDeployOutcome:
        """
        Create or update the stack and wait for it to finish

        Args:
            stack_id: Previously recorded stack id, if any
            stack_name: Name used when a new stack has to be created
            template_body: Template content
            parameters: Stack parameters as ParameterKey/ParameterValue pairs
            capabilities: Acknowledged capabilities

        Returns:
            Stack id, final stack info and the skill endpoint output

        Raises:
            CfnDeployerError: Stack ended in a failed or rolled back status
            StackDeployTimeoutError: Stack did not finish within max_polls
        """
        if await self.cfn_client.stack_exists(stack_id):
            self.reporter.update_status(f"Updating stack ({stack_id})...")
            updated_id = await self.cfn_client.update_stack(stack_id, template_body, parameters, capabilities)
            stack_id = updated_id or stack_id
        else:
            self.reporter.update_status(
                f'No stack exists or stack has been deleted. Creating cloudformation stack "{stack_name}"...'
            )
            stack_id = await self.cfn_client.create_stack(stack_name, template_body, parameters, capabilities)

        return await self._wait_for_stack_deploy(stack_id)

    async def _wait_for_stack_deploy(self, stack_id: str) -> StackDeployOutcome:
        polls = 0
        while True:
            stack = await self.cfn_client.get_stack(stack_id)
            if stack is None:
                raise CfnDeployerError(f"Stack ({stack_id}) could not be found while waiting for it to deploy.")

            stack_info = StackInfo.from_stack(stack)
            reason = f"Status reason: {stack_info.status_reason}." if stack_info.status_reason else ""
            self.reporter.update_status(f"Current stack status: {stack_info.status}... {reason}")
            polls += 1

            if not stack_info.status.endswith(STACK_IN_PROGRESS_SUFFIX):
                break

            if polls >= self.max_polls:
                raise StackDeployTimeoutError(stack_id, stack_info.status, polls * self.poll_interval)
            await self.sleep(self.poll_interval)

        if stack_info.status in STACK_SUCCESS_STATUSES:
            self.logger.info(f"Stack {stack_id} reached {stack_info.status}")
            return StackDeployOutcome(
                stack_id=stack_id,
                stack_info=stack_info,
                endpoint_uri=stack_info.get_output(SKILL_ENDPOINT_OUTPUT_KEY)
            )

        self.logger.warning(f"Stack {stack_id} ended in {stack_info.status}")
        raise CfnDeployerError(await self._diagnose_failure(stack_id))

    async def _diagnose_failure(self, stack_id: str) -> str:
        """Describe the first failed resource event, or fall back to a generic message"""
        events = await self.cfn_client.get_stack_events(stack_id)
        for event in events:
            if (event.get("ResourceStatus") or "").endswith(STACK_FAILED_SUFFIX):
                return (
                    f"{event.get('LogicalResourceId')}[{event.get('ResourceType')}]  "
                    f"{event.get('ResourceStatus')} ({event.get('ResourceStatusReason')})"
                )
        return DEPLOY_ERROR_FALLBACK_MESSAGE
