"""omega-deploy - Root Package.

This package provisions a single service two ways: as an AWS Lambda function
and as a long-running process on an EC2 instance supervised by an Auto
Scaling Group. Both run the same code, deployed from the same S3 artifact.

Key Components:
    - api: HTTP server exposing the hello-world resource
    - application: Image lookup handler, template decorator and stack builder
    - domain: Image selection, resource graph and lifecycle value objects
    - infrastructure: AWS clients, lifecycle acknowledgment, template store
    - config: Typed configuration and its loader
    - cli: Command line entry point

Usage:
    >>> omega-deploy provision --key my-ssh-key --s3-bucket my-bucket --s3-key app.zip
    >>> omega-deploy http-server
"""

from ._version import __version__

__author__ = "AWS Professional Services"
__email__ = "aws-proserve@amazon.com"
__package_name__ = "omega-deploy"
