"""Fake provider records shared by the tests"""


def make_stack(stack_id, status, reason=None, outputs=None):
    """describe_stacks record"""
    stack = {"StackId": stack_id, "StackName": "skill-stack", "StackStatus": status}
    if reason:
        stack["StackStatusReason"] = reason
    if outputs is not None:
        stack["Outputs"] = outputs
    return stack


def endpoint_outputs(uri="arn:aws:lambda:us-east-1:123456789012:function:skill"):
    return [{"OutputKey": "SkillEndpoint", "OutputValue": uri}]
