"""Global constants for infra-deployer"""

APP_NAME = "infra-deployer"
LOG_FORMAT = "%(message)s"

# Alexa region -> AWS region used when userConfig does not override it
DEFAULT_ALEXA_AWS_REGION_MAP = {
    "default": "us-east-1",
    "NA": "us-east-1",
    "EU": "eu-west-1",
    "FE": "us-west-2",
}
DEFAULT_AWS_REGION = "us-east-1"

# S3 buckets in us-east-1 must be created without a LocationConstraint
S3_DEFAULT_LOCATION = "us-east-1"
S3_BUCKET_WAIT_DELAY = 5  # seconds
S3_BUCKET_MAX_WAIT_TIME = 300  # seconds
S3_VERSIONING_ENABLED = "Enabled"

# CloudFormation stack polling
STACK_POLL_INTERVAL = 2  # seconds
STACK_MAX_WAIT_TIME = 60 * 60  # seconds
STACK_IN_PROGRESS_SUFFIX = "_IN_PROGRESS"
STACK_FAILED_SUFFIX = "_FAILED"
STACK_DELETE_COMPLETE = "DELETE_COMPLETE"
STACK_SUCCESS_STATUSES = ("CREATE_COMPLETE", "UPDATE_COMPLETE")
STACK_NO_UPDATES_MESSAGE = "No updates are to be performed."
SKILL_ENDPOINT_OUTPUT_KEY = "SkillEndpoint"
CAPABILITY_IAM = "CAPABILITY_IAM"

# Built-in cfn deployer
SKILL_STACK_PUBLIC_FILE_NAME = "skill-stack.yaml"
SKILL_STACK_ASSET_FILE_NAME = "basic-lambda.yaml"
INFRASTRUCTURE_DIR = "infrastructure"
DEFAULT_CODE_KEY_PREFIX = "endpoint"
RESOURCE_NAME_PREFIX = "ask"
BUCKET_PROJECT_NAME_MAX_LENGTH = 22
BUCKET_PROFILE_NAME_MAX_LENGTH = 9
STACK_SKILL_NAME_MAX_LENGTH = 64

# Stack parameters injected by the cfn deployer, with the hint shown on collision
RESERVED_STACK_PARAMETERS = {
    "SkillId": "Please use a different name.",
    "SkillClientId": "Please use a different name.",
    "SkillClientSecret": "Please use a different name.",
    "LambdaRuntime": "Please specify under skillInfrastructure.userConfig.runtime.",
    "LambdaHandler": "Please specify under skillInfrastructure.userConfig.handler.",
    "CodeBucket": "Please specify under skillInfrastructure.userConfig.artifactsS3.bucketName.",
    "CodeKey": "Please specify under skillInfrastructure.userConfig.artifactsS3.bucketKey.",
    "CodeVersion": "Please use a different name.",
}

# Deploy delegate types
CFN_DEPLOYER_TYPE = "@ask-cli/cfn-deployer"

# Profiles and configuration files
ENVIRONMENT_PROFILE_NAME = "__ENVIRONMENT_ASK_PROFILE__"
ENVIRONMENT_AWS_CREDENTIALS = "__AWS_CREDENTIALS_IN_ENVIRONMENT_VARIABLE__"
CLI_CONFIG_DIR = ".ask"
CLI_CONFIG_FILE = "cli_config"
RESOURCES_CONFIG_FILE = "ask-resources.yaml"

# Environment variables
ENV_CLI_CONFIG = "INFRA_DEPLOYER_CLI_CONFIG"
ENV_AWS_ACCESS_KEY = "AWS_ACCESS_KEY_ID"
ENV_AWS_SECRET_KEY = "AWS_SECRET_ACCESS_KEY"
ENV_AWS_PROFILE = "AWS_PROFILE"
ENV_AWS_DEFAULT_PROFILE = "AWS_DEFAULT_PROFILE"
ENV_REGION_VARIABLES = (
    "AWS_REGION",
    "AMAZON_REGION",
    "AWS_DEFAULT_REGION",
    "AMAZON_DEFAULT_REGION",
)


# Error codes
class ErrorCode:
    CONFIG_FORMAT_ERROR = "ID001"
    PROFILE_NOT_FOUND = "ID002"
    CFN_DEPLOY_FAILED = "ID101"
    STACK_DEPLOY_TIMEOUT = "ID102"
    BOOTSTRAP_FAILED = "ID201"
    DELEGATE_INVALID = "ID301"
    DELEGATE_NOT_INSTANTIATED = "ID302"
    DELEGATE_RESPONSE_INVALID = "ID303"
    DELEGATE_LOAD_FAILED = "ID304"
    INFRASTRUCTURE_DEPLOY_FAILED = "ID401"


# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_SKIPPED = "↷"
