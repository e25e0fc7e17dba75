"""CloudFormation template decoration for the EC2 side of the deployment."""
from omega_deploy.application.decorator.template_decorator import DecoratorResourceNames, TemplateDecorator

__all__ = ["DecoratorResourceNames", "TemplateDecorator"]
