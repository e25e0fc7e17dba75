"""
Template decorator that adds the EC2 twin of the Lambda function.

Given the logical name of the image lookup custom resource, the decorator adds
a security group, an instance role and profile, a launch configuration booting
the looked-up image with the expanded bootstrap script, and a single-instance
auto scaling group that keeps that instance running.
"""
from dataclasses import dataclass
from typing import List, Optional

from troposphere import AWSObject, Base64, GetAtt, GetAZs, Ref, Template
from troposphere.autoscaling import AutoScalingGroup, LaunchConfiguration
from troposphere.ec2 import SecurityGroup, SecurityGroupRule
from troposphere.iam import InstanceProfile, Role

from omega_deploy.config.schemas.deployment_schema import DeploymentConfig
from omega_deploy.config.schemas.image_schema import ImageLookupConfig
from omega_deploy.config.schemas.server_schema import ServerConfig
from omega_deploy.domain.core.exceptions import TemplateExpansionError, UndefinedVariableError
from omega_deploy.domain.stack import policies
from omega_deploy.domain.stack.resource_graph import add_resources
from omega_deploy.infrastructure.logging.logger import get_logger
from omega_deploy.infrastructure.template.expander import BootstrapTemplateExpander
from omega_deploy.infrastructure.template.store import PackageTemplateStore, TemplateStore
from omega_deploy.infrastructure.utilities.common.resource_naming import cloudformation_resource_name


@dataclass(frozen=True)
class DecoratorResourceNames:
    """Logical names of the resources the decorator adds."""
    security_group: str
    instance_role: str
    instance_profile: str
    launch_configuration: str
    auto_scaling_group: str

    @classmethod
    def default(cls) -> 'DecoratorResourceNames':
        return cls(
            security_group=cloudformation_resource_name("OmegaSecurityGroup", "OmegaSecurityGroup"),
            instance_role=cloudformation_resource_name("OmegaEC2InstanceRole", "OmegaEC2InstanceRole"),
            instance_profile=cloudformation_resource_name("OmegaEC2InstanceProfile", "OmegaEC2InstanceProfile"),
            launch_configuration=cloudformation_resource_name("OmegaASGLaunchConfig", "OmegaASGLaunchConfig"),
            auto_scaling_group=cloudformation_resource_name("OmegaASG", "OmegaASG"),
        )


class TemplateDecorator:
    """Adds the EC2 auto scaling group resources to a CloudFormation template."""

    def __init__(self,
                 config: Optional[DeploymentConfig] = None,
                 template_store: Optional[TemplateStore] = None,
                 expander: Optional[BootstrapTemplateExpander] = None,
                 server_config: Optional[ServerConfig] = None,
                 image_config: Optional[ImageLookupConfig] = None):
        """
        Initialize the decorator.

        Args:
            config: Deployment settings, including the SSH key name
            template_store: Source of the bootstrap script
            expander: Bootstrap script expander
            server_config: HTTP server settings; its port is opened on the security group
            image_config: Image lookup settings; names the lookup output attribute
        """
        self.config = config or DeploymentConfig()
        self.template_store = template_store or PackageTemplateStore()
        self.expander = expander or BootstrapTemplateExpander()
        self.server_config = server_config or ServerConfig()
        self.image_config = image_config or ImageLookupConfig()
        self.names = DecoratorResourceNames.default()
        self._logger = get_logger(__name__)

    def decorate(self,
                 service_name: str,
                 lookup_resource_name: str,
                 binary_bucket: str,
                 binary_key: str,
                 template: Template) -> Template:
        """
        Add the EC2 resources to ``template``.

        Either every resource is added or, on failure, none is.

        Args:
            service_name: Service name passed to the bootstrap script
            lookup_resource_name: Logical name of the image lookup custom resource
            binary_bucket: S3 bucket holding the packaged application
            binary_key: S3 key of the packaged application
            template: Template to decorate

        Returns:
            The decorated template

        Raises:
            TemplateNotFoundError: If the bootstrap script is missing
            TemplateExpansionError: If the bootstrap script cannot be expanded
            GraphMutationError: If a resource name is already taken
        """
        user_data = self._expand_user_data(service_name, binary_bucket, binary_key)

        staged: List[AWSObject] = [
            self._security_group(service_name),
            self._instance_role(binary_bucket, binary_key),
            self._instance_profile(),
            self._launch_configuration(lookup_resource_name, user_data),
            self._auto_scaling_group(),
        ]
        add_resources(template, staged)

        self._logger.info(
            "Decorated template",
            service_name=service_name,
            lookup_resource=lookup_resource_name,
            resources=[resource.title for resource in staged]
        )
        return template

    def _security_group(self, service_name: str) -> SecurityGroup:
        ports = [self.server_config.port, self.config.admin_port]
        return SecurityGroup(
            self.names.security_group,
            GroupDescription=f"{service_name} security group",
            SecurityGroupIngress=[
                SecurityGroupRule(
                    CidrIp=self.config.ingress_cidr,
                    IpProtocol="tcp",
                    FromPort=port,
                    ToPort=port,
                )
                for port in ports
            ],
        )

    def _instance_role(self, binary_bucket: str, binary_key: str) -> Role:
        statements = policies.common_statements()
        # Fetch the packaged application and nothing else from S3
        statements.append(policies.s3_object_read_statement(binary_bucket, binary_key))
        return Role(
            self.names.instance_role,
            AssumeRolePolicyDocument=policies.assume_role_policy_document(
                policies.EXECUTION_ROLE_SERVICES
            ),
            Policies=[policies.inline_policy("EC2Policy", statements)],
        )

    def _instance_profile(self) -> InstanceProfile:
        return InstanceProfile(
            self.names.instance_profile,
            Path="/",
            Roles=[Ref(self.names.instance_role)],
        )

    def _launch_configuration(self, lookup_resource_name: str, user_data: str) -> LaunchConfiguration:
        launch_configuration = LaunchConfiguration(
            self.names.launch_configuration,
            ImageId=GetAtt(lookup_resource_name, self.image_config.output_key),
            InstanceType=self.config.instance_type,
            IamInstanceProfile=Ref(self.names.instance_profile),
            UserData=Base64(user_data),
            SecurityGroups=[GetAtt(self.names.security_group, "GroupId")],
        )
        if self.config.key_name:
            launch_configuration.KeyName = self.config.key_name
        # The image ID only exists once the lookup resource has been created
        launch_configuration.DependsOn = [lookup_resource_name]
        return launch_configuration

    def _auto_scaling_group(self) -> AutoScalingGroup:
        # Exactly one instance mirrors the Lambda function
        return AutoScalingGroup(
            self.names.auto_scaling_group,
            AvailabilityZones=GetAZs(""),
            LaunchConfigurationName=Ref(self.names.launch_configuration),
            MinSize="1",
            MaxSize="1",
        )

    def _expand_user_data(self, service_name: str, binary_bucket: str, binary_key: str) -> str:
        path = self.config.userdata_template
        template_text = self.template_store.read(path)
        parameters = {
            "S3Bucket": binary_bucket,
            "S3Key": binary_key,
            "ServiceName": service_name,
        }
        if self.config.binary_name:
            parameters["SpartaBinaryName"] = self.config.binary_name
        try:
            expanded = self.expander.expand(template_text, parameters)
        except UndefinedVariableError as e:
            self._logger.error("Failed to expand userdata", path=path, error=str(e))
            raise TemplateExpansionError(path, e) from e
        self._logger.debug("Expanded userdata", parameters=parameters, expanded=expanded)
        return expanded
