"""
Stack builder.

Assembles the complete CloudFormation template for one deployment: the
hello-world Lambda function, the image lookup Lambda function and its custom
resource, and the EC2 resources added by the template decorator. Uploading the
artifact and applying the template are left to the deployment tooling.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from troposphere import GetAtt, Output, Ref, Template
from troposphere.awslambda import Code, Function
from troposphere.cloudformation import CustomResource
from troposphere.iam import Role

from omega_deploy.application.decorator.template_decorator import TemplateDecorator
from omega_deploy.config.schemas.deployment_schema import DeploymentConfig
from omega_deploy.domain.core.exceptions import GraphMutationError
from omega_deploy.domain.stack import policies
from omega_deploy.domain.stack.resource_graph import add_resources, dangling_references, new_template
from omega_deploy.infrastructure.logging.logger import get_logger
from omega_deploy.infrastructure.utilities.common.resource_naming import (
    cloudformation_resource_name,
    function_resource_name,
)

HELLO_WORLD_HANDLER = "omega_deploy.lambda_handler.hello_world_handler"
IMAGE_LOOKUP_HANDLER = "omega_deploy.lambda_handler.image_lookup_handler"


@dataclass(frozen=True)
class StackResourceNames:
    """Logical names of the Lambda side of the stack."""
    hello_world_function: str
    hello_world_role: str
    lookup_function: str
    lookup_role: str
    lookup_custom_resource: str

    @classmethod
    def default(cls) -> 'StackResourceNames':
        return cls(
            hello_world_function=function_resource_name("helloWorld"),
            hello_world_role=cloudformation_resource_name("HelloWorldRole", "helloWorld", "IAMRole"),
            lookup_function=function_resource_name("imageLookup"),
            lookup_role=cloudformation_resource_name("ImageLookupRole", "imageLookup", "IAMRole"),
            lookup_custom_resource=cloudformation_resource_name(
                "ImageLookupCustomResource", "imageLookup", "CustomResource"
            ),
        )


class StackBuilder:
    """Builds the deployment's CloudFormation template."""

    def __init__(self, config: Optional[DeploymentConfig] = None,
                 decorator: Optional[TemplateDecorator] = None):
        self.config = config or DeploymentConfig()
        self.decorator = decorator or TemplateDecorator(self.config)
        self.names = StackResourceNames.default()
        self._logger = get_logger(__name__)

    def build(self, s3_bucket: str, s3_key: str, service_name: Optional[str] = None) -> Template:
        """
        Build the template for the artifact at ``s3://s3_bucket/s3_key``.

        Raises:
            TemplateExpansionError: If the bootstrap script cannot be expanded
            GraphMutationError: If resources collide or reference undefined resources
        """
        service_name = service_name or self.config.service_name
        template = new_template("Provision AWS Lambda and EC2 instance with same code")

        add_resources(template, [
            self._role(self.names.hello_world_role, []),
            self._function(
                self.names.hello_world_function, HELLO_WORLD_HANDLER, self.names.hello_world_role,
                s3_bucket, s3_key, self.config.lambda_memory_size, self.config.lambda_timeout),
            self._role(self.names.lookup_role, [
                policies.policy_statement(["ec2:DescribeImages"], "*"),
            ]),
            self._function(
                self.names.lookup_function, IMAGE_LOOKUP_HANDLER, self.names.lookup_role,
                s3_bucket, s3_key, self.config.lookup_memory_size, self.config.lookup_timeout),
            self._lookup_custom_resource(),
        ])

        self.decorator.decorate(service_name, self.names.lookup_custom_resource, s3_bucket, s3_key, template)

        template.add_output(Output(
            "HelloWorldFunctionArn",
            Description="Hello world Lambda function",
            Value=GetAtt(self.names.hello_world_function, "Arn"),
        ))
        template.add_output(Output(
            "AutoScalingGroupName",
            Description="Auto scaling group running the HTTP server",
            Value=Ref(self.decorator.names.auto_scaling_group),
        ))

        dangling = dangling_references(template)
        if dangling:
            raise GraphMutationError(
                f"Resources reference undefined resources: {dangling}", sorted(dangling)
            )

        self._logger.info("Built stack template", service_name=service_name,
                          resources=len(template.resources))
        return template

    def _role(self, title: str, extra_statements: List[Dict[str, Any]]) -> Role:
        statements = policies.common_statements() + extra_statements
        return Role(
            title,
            AssumeRolePolicyDocument=policies.assume_role_policy_document(["lambda.amazonaws.com"]),
            Policies=[policies.inline_policy("LambdaPolicy", statements)],
        )

    def _function(self, title: str, handler: str, role_name: str, s3_bucket: str, s3_key: str,
                  memory_size: int, timeout: int) -> Function:
        return Function(
            title,
            Code=Code(S3Bucket=s3_bucket, S3Key=s3_key),
            Handler=handler,
            Role=GetAtt(role_name, "Arn"),
            Runtime=self.config.lambda_runtime,
            MemorySize=memory_size,
            Timeout=timeout,
            DependsOn=[role_name],
        )

    def _lookup_custom_resource(self) -> CustomResource:
        return CustomResource(
            self.names.lookup_custom_resource,
            ServiceToken=GetAtt(self.names.lookup_function, "Arn"),
            DependsOn=[self.names.lookup_function],
        )
