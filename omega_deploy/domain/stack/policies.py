"""IAM policy documents shared by the Lambda and EC2 roles."""
from typing import Any, Dict, List

from troposphere import AWS_ACCOUNT_ID, AWS_REGION, AWS_STACK_NAME, Join, Ref
from troposphere.iam import Policy

POLICY_VERSION = "2012-10-17"

EXECUTION_ROLE_SERVICES = ["ec2.amazonaws.com", "lambda.amazonaws.com"]


def policy_statement(actions: List[str], resource: Any, effect: str = "Allow") -> Dict[str, Any]:
    return {"Effect": effect, "Action": list(actions), "Resource": resource}


def common_statements() -> List[Dict[str, Any]]:
    """Permissions every execution role of this deployment needs."""
    return [
        policy_statement(
            ["logs:CreateLogGroup", "logs:CreateLogStream", "logs:PutLogEvents"],
            "arn:aws:logs:*:*:*",
        ),
        policy_statement(["cloudwatch:PutMetricData"], "*"),
        policy_statement(
            ["cloudformation:DescribeStacks", "cloudformation:DescribeStackResource"],
            Join("", ["arn:aws:cloudformation:", Ref(AWS_REGION), ":",
                      Ref(AWS_ACCOUNT_ID), ":stack/", Ref(AWS_STACK_NAME), "/*"]),
        ),
        policy_statement(["xray:PutTraceSegments", "xray:PutTelemetryRecords"], "*"),
    ]


def s3_object_read_statement(bucket: str, key: str) -> Dict[str, Any]:
    """Read access scoped to exactly one object."""
    return policy_statement(["s3:GetObject"], f"arn:aws:s3:::{bucket}/{key}")


def policy_document(statements: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"Version": POLICY_VERSION, "Statement": list(statements)}


def inline_policy(name: str, statements: List[Dict[str, Any]]) -> Policy:
    return Policy(PolicyName=name, PolicyDocument=policy_document(statements))


def assume_role_policy_document(services: List[str]) -> Dict[str, Any]:
    """Trust policy letting the given AWS services assume a role."""
    return {
        "Version": POLICY_VERSION,
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": {"Service": list(services)},
                "Action": ["sts:AssumeRole"],
            }
        ],
    }
