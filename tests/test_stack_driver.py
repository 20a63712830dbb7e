"""Tests for the CloudFormation stack lifecycle driver"""

import pytest

from infra_deployer.api.exceptions import CfnDeployerError, StackDeployTimeoutError
from infra_deployer.core.stack_driver import DEPLOY_ERROR_FALLBACK_MESSAGE, StackLifecycleDriver

from .fakes import endpoint_outputs, make_stack

STACK_ID = "arn:aws:cloudformation:us-east-1:123456789012:stack/skill/abc"
TEMPLATE = "AWSTemplateFormatVersion: 2010-09-09"
PARAMETERS = [{"ParameterKey": "SkillId", "ParameterValue": "amzn1.ask.skill.1"}]
CAPABILITIES = ["CAPABILITY_IAM"]


class TestSubmit:
    """Choosing between create and update"""

    @pytest.mark.asyncio
    async def test_create_when_no_stack_recorded(self, cfn_client, reporter, no_sleep):
        """A new stack is created and polled until CREATE_COMPLETE"""
        new_id = cfn_client.create_stack.return_value
        cfn_client.get_stack.side_effect = [
            make_stack(new_id, "CREATE_IN_PROGRESS", reason="User Initiated"),
            make_stack(new_id, "CREATE_COMPLETE", outputs=endpoint_outputs()),
        ]
        driver = StackLifecycleDriver(cfn_client, reporter, sleep=no_sleep)

        outcome = await driver.deploy_stack(None, "ask-skill-default-skillStack-1", TEMPLATE, PARAMETERS, CAPABILITIES)

        cfn_client.create_stack.assert_awaited_once_with(
            "ask-skill-default-skillStack-1", TEMPLATE, PARAMETERS, CAPABILITIES
        )
        cfn_client.update_stack.assert_not_called()
        assert outcome.stack_id == new_id
        assert outcome.endpoint_uri == "arn:aws:lambda:us-east-1:123456789012:function:skill"
        assert no_sleep.await_count == 1
        no_sleep.assert_awaited_with(2)
        assert reporter.messages == [
            'No stack exists or stack has been deleted. Creating cloudformation stack '
            '"ask-skill-default-skillStack-1"...',
            "Current stack status: CREATE_IN_PROGRESS... Status reason: User Initiated.",
            "Current stack status: CREATE_COMPLETE... ",
        ]

    @pytest.mark.asyncio
    async def test_create_when_recorded_stack_is_gone(self, cfn_client, reporter, no_sleep):
        """A recorded id whose stack no longer exists falls back to create"""
        new_id = cfn_client.create_stack.return_value
        cfn_client.stack_exists.return_value = False
        cfn_client.get_stack.return_value = make_stack(new_id, "CREATE_COMPLETE", outputs=endpoint_outputs())
        driver = StackLifecycleDriver(cfn_client, reporter, sleep=no_sleep)

        outcome = await driver.deploy_stack(STACK_ID, "ask-skill-default-skillStack-2", TEMPLATE, PARAMETERS, CAPABILITIES)

        cfn_client.stack_exists.assert_awaited_once_with(STACK_ID)
        cfn_client.create_stack.assert_awaited_once_with(
            "ask-skill-default-skillStack-2", TEMPLATE, PARAMETERS, CAPABILITIES
        )
        cfn_client.update_stack.assert_not_called()
        assert outcome.stack_id == new_id
        assert reporter.messages[0] == (
            'No stack exists or stack has been deleted. Creating cloudformation stack '
            '"ask-skill-default-skillStack-2"...'
        )

    @pytest.mark.asyncio
    async def test_update_existing_stack(self, cfn_client, reporter, no_sleep):
        """An existing stack is updated by id and never re-created"""
        cfn_client.stack_exists.return_value = True
        cfn_client.update_stack.return_value = STACK_ID
        cfn_client.get_stack.return_value = make_stack(STACK_ID, "UPDATE_COMPLETE", outputs=endpoint_outputs())
        driver = StackLifecycleDriver(cfn_client, reporter, sleep=no_sleep)

        outcome = await driver.deploy_stack(STACK_ID, "unused", TEMPLATE, PARAMETERS, CAPABILITIES)

        cfn_client.update_stack.assert_awaited_once_with(STACK_ID, TEMPLATE, PARAMETERS, CAPABILITIES)
        cfn_client.create_stack.assert_not_called()
        assert outcome.stack_id == STACK_ID
        assert reporter.messages[0] == f"Updating stack ({STACK_ID})..."

    @pytest.mark.asyncio
    async def test_no_updates_keeps_stack_id(self, cfn_client, reporter, no_sleep):
        """An update with nothing to change observes the current stack state"""
        cfn_client.stack_exists.return_value = True
        cfn_client.update_stack.return_value = None
        cfn_client.get_stack.return_value = make_stack(STACK_ID, "UPDATE_COMPLETE", outputs=endpoint_outputs())
        driver = StackLifecycleDriver(cfn_client, reporter, sleep=no_sleep)

        outcome = await driver.deploy_stack(STACK_ID, "unused", TEMPLATE, PARAMETERS, CAPABILITIES)

        cfn_client.get_stack.assert_awaited_once_with(STACK_ID)
        assert outcome.stack_id == STACK_ID
        no_sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_endpoint_output(self, cfn_client, reporter, no_sleep):
        """Success without a SkillEndpoint output leaves endpoint_uri empty"""
        new_id = cfn_client.create_stack.return_value
        cfn_client.get_stack.return_value = make_stack(new_id, "CREATE_COMPLETE", outputs=[])
        driver = StackLifecycleDriver(cfn_client, reporter, sleep=no_sleep)

        outcome = await driver.deploy_stack(None, "stack", TEMPLATE, PARAMETERS, CAPABILITIES)

        assert outcome.endpoint_uri is None
        assert outcome.stack_info.status == "CREATE_COMPLETE"


class TestFailure:
    """Terminal failure statuses"""

    @pytest.mark.asyncio
    async def test_rollback_without_failed_event_uses_fallback(self, cfn_client, reporter, no_sleep):
        """No _FAILED event yields the fixed fallback message"""
        cfn_client.stack_exists.return_value = True
        cfn_client.update_stack.return_value = STACK_ID
        cfn_client.get_stack.return_value = make_stack(STACK_ID, "UPDATE_ROLLBACK_COMPLETE")
        cfn_client.get_stack_events.return_value = [
            {"LogicalResourceId": "skill", "ResourceType": "AWS::CloudFormation::Stack",
             "ResourceStatus": "UPDATE_ROLLBACK_COMPLETE"},
        ]
        driver = StackLifecycleDriver(cfn_client, reporter, sleep=no_sleep)

        with pytest.raises(CfnDeployerError) as exc_info:
            await driver.deploy_stack(STACK_ID, "unused", TEMPLATE, PARAMETERS, CAPABILITIES)

        assert str(exc_info.value) == DEPLOY_ERROR_FALLBACK_MESSAGE
        no_sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_first_failed_event_is_reported(self, cfn_client, reporter, no_sleep):
        """The first failed resource event is quoted verbatim"""
        new_id = cfn_client.create_stack.return_value
        cfn_client.get_stack.return_value = make_stack(new_id, "ROLLBACK_COMPLETE")
        cfn_client.get_stack_events.return_value = [
            {"LogicalResourceId": "AlexaSkillFunction", "ResourceType": "AWS::Lambda::Function",
             "ResourceStatus": "DELETE_COMPLETE"},
            {"LogicalResourceId": "AlexaSkillFunction", "ResourceType": "AWS::Lambda::Function",
             "ResourceStatus": "CREATE_FAILED",
             "ResourceStatusReason": "Error occurred while GetObject. S3 Error Code: NoSuchKey."},
            {"LogicalResourceId": "AlexaSkillIAMRole", "ResourceType": "AWS::IAM::Role",
             "ResourceStatus": "CREATE_FAILED", "ResourceStatusReason": "Resource creation cancelled"},
        ]
        driver = StackLifecycleDriver(cfn_client, reporter, sleep=no_sleep)

        with pytest.raises(CfnDeployerError) as exc_info:
            await driver.deploy_stack(None, "stack", TEMPLATE, PARAMETERS, CAPABILITIES)

        assert str(exc_info.value) == (
            "AlexaSkillFunction[AWS::Lambda::Function]  CREATE_FAILED "
            "(Error occurred while GetObject. S3 Error Code: NoSuchKey.)"
        )

    @pytest.mark.asyncio
    async def test_vanished_stack(self, cfn_client, reporter, no_sleep):
        """A stack that cannot be described while waiting is a failure"""
        cfn_client.get_stack.return_value = None
        driver = StackLifecycleDriver(cfn_client, reporter, sleep=no_sleep)

        with pytest.raises(CfnDeployerError):
            await driver.deploy_stack(None, "stack", TEMPLATE, PARAMETERS, CAPABILITIES)


class TestPollBound:
    """Bounded polling"""

    @pytest.mark.asyncio
    async def test_timeout_after_max_polls(self, cfn_client, reporter, no_sleep):
        """A stack stuck in progress raises once max_polls is reached"""
        new_id = cfn_client.create_stack.return_value
        cfn_client.get_stack.return_value = make_stack(new_id, "CREATE_IN_PROGRESS")
        driver = StackLifecycleDriver(cfn_client, reporter, sleep=no_sleep, poll_interval=2, max_polls=3)

        with pytest.raises(StackDeployTimeoutError) as exc_info:
            await driver.deploy_stack(None, "stack", TEMPLATE, PARAMETERS, CAPABILITIES)

        assert cfn_client.get_stack.await_count == 3
        assert no_sleep.await_count == 2
        assert exc_info.value.stack_id == new_id
        assert exc_info.value.last_status == "CREATE_IN_PROGRESS"
        assert "continues in CloudFormation" in str(exc_info.value)

    def test_default_poll_budget(self, cfn_client, reporter):
        """The default bound covers an hour of polling"""
        driver = StackLifecycleDriver(cfn_client, reporter)
        assert driver.max_polls == 1800
